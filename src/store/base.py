"""
Storage contract used by the scheduling engine
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Iterable

from src.scheduler.models import Participant, Meeting


class SchedulingStore(ABC):
    """Participants and meetings, as seen by the scheduler"""

    # Participants

    @abstractmethod
    def get_participant(self, participant_id: str) -> Optional[Participant]:
        pass

    @abstractmethod
    def list_participants(self) -> List[Participant]:
        pass

    @abstractmethod
    def add_participant(self, participant: Participant) -> Participant:
        pass

    @abstractmethod
    def update_participant(self, participant: Participant) -> bool:
        pass

    @abstractmethod
    def delete_participant(self, participant_id: str) -> bool:
        pass

    # Meetings

    @abstractmethod
    def get_meeting(self, meeting_id: str) -> Optional[Meeting]:
        pass

    @abstractmethod
    def list_meetings(self) -> List[Meeting]:
        pass

    @abstractmethod
    def insert_meeting(self, meeting: Meeting) -> Meeting:
        pass

    @abstractmethod
    def delete_meeting(self, meeting_id: str) -> bool:
        pass

    @abstractmethod
    def list_meetings_for_participant(self, participant_id: str) -> List[Meeting]:
        pass

    @abstractmethod
    def list_overlapping_meetings(self, start: datetime, end: datetime,
                                  participant_ids: Iterable[str]) -> List[Meeting]:
        """Meetings intersecting [start, end) that include at least one of participant_ids"""
