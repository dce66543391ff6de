"""
Participant (user) management on top of the store
"""
import logging
import uuid
from typing import List, Optional

from config.settings import Config
from src.scheduler.models import Participant
from src.store.base import SchedulingStore

logger = logging.getLogger(__name__)


class ParticipantService:
    def __init__(self, store: SchedulingStore):
        self.store = store

    def list_participants(self) -> List[Participant]:
        return self.store.list_participants()

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        return self.store.get_participant(participant_id)

    def create_participant(self, name: str, timezone: str = None) -> Participant:
        participant = Participant(
            participant_id=str(uuid.uuid4()),
            name=name,
            timezone=timezone or Config.DEFAULT_TIMEZONE
        )
        return self.store.add_participant(participant)

    def update_participant(self, participant_id: str, name: str, timezone: str = None) -> bool:
        existing = self.store.get_participant(participant_id)
        if existing is None:
            return False

        updated = Participant(participant_id, name, timezone or Config.DEFAULT_TIMEZONE)
        logger.info(f"✏️  Updating participant {existing.label()} -> {updated.label()}")
        return self.store.update_participant(updated)

    def delete_participant(self, participant_id: str) -> bool:
        if self.store.get_participant(participant_id) is None:
            return False
        return self.store.delete_participant(participant_id)
