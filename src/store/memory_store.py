"""
In-memory store for participants and meetings

Backs the API server, the CLI and the test suite.
"""
import logging
import threading
import uuid
from datetime import datetime, timedelta
from typing import List, Dict, Optional, Iterable, Any

from config.settings import Config
from src.scheduler.models import Participant, Meeting
from src.scheduler.timezone_offset import utc_now
from src.store.base import SchedulingStore

logger = logging.getLogger(__name__)

DEMO_PARTICIPANTS = [
    ("João (Brasil)", "UTC-3:00"),
    ("James (UK)", "UTC"),
    ("Raj (India)", "UTC+5:30"),
    ("Hiroshi (Japan)", "UTC+9:00"),
]


class InMemoryStore(SchedulingStore):
    """Dictionary-backed store. Insertion order is kept for listings."""

    def __init__(self):
        self._participants: Dict[str, Participant] = {}
        self._meetings: Dict[str, Meeting] = {}
        self._lock = threading.Lock()

    # Participants

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        with self._lock:
            return self._participants.get(participant_id)

    def list_participants(self) -> List[Participant]:
        with self._lock:
            return list(self._participants.values())

    def add_participant(self, participant: Participant) -> Participant:
        with self._lock:
            self._participants[participant.id] = participant
        logger.info(f"👤 Added participant {participant.label()}")
        return participant

    def update_participant(self, participant: Participant) -> bool:
        with self._lock:
            if participant.id not in self._participants:
                return False
            self._participants[participant.id] = participant
            for meeting in self._meetings.values():
                meeting.participants = [
                    participant if p.id == participant.id else p for p in meeting.participants
                ]
        return True

    def delete_participant(self, participant_id: str) -> bool:
        with self._lock:
            return self._participants.pop(participant_id, None) is not None

    # Meetings

    def get_meeting(self, meeting_id: str) -> Optional[Meeting]:
        with self._lock:
            return self._meetings.get(meeting_id)

    def list_meetings(self) -> List[Meeting]:
        with self._lock:
            return list(self._meetings.values())

    def insert_meeting(self, meeting: Meeting) -> Meeting:
        with self._lock:
            self._meetings[meeting.id] = meeting
        logger.info(f"📅 Stored meeting '{meeting.title}' {meeting.start_time} - {meeting.end_time}")
        return meeting

    def delete_meeting(self, meeting_id: str) -> bool:
        with self._lock:
            return self._meetings.pop(meeting_id, None) is not None

    def list_meetings_for_participant(self, participant_id: str) -> List[Meeting]:
        with self._lock:
            return [m for m in self._meetings.values() if participant_id in m.participant_ids]

    def list_overlapping_meetings(self, start: datetime, end: datetime,
                                  participant_ids: Iterable[str]) -> List[Meeting]:
        wanted = set(participant_ids)
        with self._lock:
            return [
                m for m in self._meetings.values()
                if m.overlaps_with(start, end) and wanted.intersection(m.participant_ids)
            ]

    # Loading helpers

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InMemoryStore":
        """
        Build a store from plain data:

            {"participants": [{"id", "name", "timeZone"}],
             "meetings": [{"id", "title", "startTime", "endTime", "participantIds"}]}

        Meeting times are ISO-8601 strings in UTC.
        """
        from utils.validators import RequestValidator

        store = cls()
        for item in data.get("participants", []):
            store.add_participant(Participant(
                participant_id=str(item.get("id") or uuid.uuid4()),
                name=item.get("name", ""),
                timezone=item.get("timeZone") or Config.DEFAULT_TIMEZONE
            ))

        for item in data.get("meetings", []):
            participants = [
                store.get_participant(str(pid)) for pid in item.get("participantIds", [])
            ]
            store.insert_meeting(Meeting(
                meeting_id=str(item.get("id") or uuid.uuid4()),
                title=item.get("title") or Config.DEFAULT_MEETING_TITLE,
                start_time=RequestValidator.parse_datetime(item["startTime"]),
                end_time=RequestValidator.parse_datetime(item["endTime"]),
                participants=[p for p in participants if p is not None]
            ))
        return store

    @classmethod
    def with_demo_data(cls) -> "InMemoryStore":
        """A store seeded with participants across several offsets and one booking"""
        store = cls()
        participants = [
            store.add_participant(Participant(str(uuid.uuid4()), name, tz))
            for name, tz in DEMO_PARTICIPANTS
        ]

        tomorrow = datetime.combine((utc_now() + timedelta(days=1)).date(), datetime.min.time())
        store.insert_meeting(Meeting(
            meeting_id=str(uuid.uuid4()),
            title="Existing Meeting",
            start_time=tomorrow + timedelta(hours=14),
            end_time=tomorrow + timedelta(hours=15),
            participants=participants[:2]
        ))
        return store
