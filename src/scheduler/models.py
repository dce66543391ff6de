"""
Domain objects and report types for the meeting scheduler

All datetimes held here are naive and in UTC.
"""
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Dict, Any, Optional, NamedTuple

from config.settings import Config


def format_utc(value: Optional[datetime]) -> Optional[str]:
    """Render a naive UTC datetime as ISO-8601 with a Z suffix"""
    if value is None:
        return None
    return value.strftime(Config.OUTPUT_DATETIME_FORMAT)


def format_display_time(value: datetime) -> str:
    return value.strftime(Config.DISPLAY_TIME_FORMAT)


def format_display_date(value: datetime) -> str:
    return value.strftime(Config.DISPLAY_DATE_FORMAT)


def format_time_of_day(value: timedelta) -> str:
    """Render a time-of-day offset (timedelta since midnight) as HH:MM"""
    total_minutes = int(value.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


class Participant:
    """A person who can attend meetings, with a fixed UTC offset timezone"""

    def __init__(self, participant_id: str, name: str, timezone: str = Config.DEFAULT_TIMEZONE):
        self.id = participant_id
        self.name = name
        self.timezone = timezone

    def label(self) -> str:
        return f"{self.name} ({self.timezone})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "timeZone": self.timezone
        }

    def __repr__(self):
        return f"Participant({self.id!r}, {self.name!r}, {self.timezone!r})"


class Meeting:
    """A booked meeting. Start and end are UTC, end is after start."""

    def __init__(self, meeting_id: str, title: str, start_time: datetime,
                 end_time: datetime, participants: List[Participant]):
        self.id = meeting_id
        self.title = title
        self.start_time = start_time
        self.end_time = end_time
        self.participants = list(participants)

    @property
    def participant_ids(self) -> List[str]:
        return [p.id for p in self.participants]

    def overlaps_with(self, other_start: datetime, other_end: datetime) -> bool:
        """Half-open interval overlap with another time range"""
        return self.start_time < other_end and self.end_time > other_start

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "startTime": format_utc(self.start_time),
            "endTime": format_utc(self.end_time),
            "participants": [p.to_dict() for p in self.participants]
        }

    def __repr__(self):
        return f"Meeting({self.id!r}, {self.title!r}, {self.start_time} - {self.end_time})"


class WorkingWindow(NamedTuple):
    """A participant's working hours as UTC times of day"""
    start: timedelta
    end: timedelta
    crosses_midnight: bool


class AvailableSlot(NamedTuple):
    start_time: datetime
    end_time: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startTime": format_utc(self.start_time),
            "endTime": format_utc(self.end_time)
        }


class RecommendationTier(Enum):
    IDEAL = "Ideal"
    GOOD = "Good"
    ACCEPTABLE = "Acceptable"
    NOT_RECOMMENDED = "Not recommended"

    @property
    def score(self) -> int:
        return _TIER_SCORES[self]

    @property
    def icon(self) -> str:
        return _TIER_ICONS[self]

    def display(self) -> str:
        return f"{self.icon} {self.value}"


_TIER_SCORES = {
    RecommendationTier.IDEAL: 4,
    RecommendationTier.GOOD: 3,
    RecommendationTier.ACCEPTABLE: 2,
    RecommendationTier.NOT_RECOMMENDED: 1,
}

_TIER_ICONS = {
    RecommendationTier.IDEAL: "🎯",
    RecommendationTier.GOOD: "✅",
    RecommendationTier.ACCEPTABLE: "⚠️",
    RecommendationTier.NOT_RECOMMENDED: "❌",
}


class ConflictKind(Enum):
    MEETING = "meeting"
    WORKING_HOURS = "working_hours"


class ScheduleResult:
    """Outcome of a schedule request"""

    def __init__(self, success: bool, message: str, meeting: Optional[Meeting] = None,
                 suggestions: Optional[List[AvailableSlot]] = None):
        self.success = success
        self.message = message
        self.meeting = meeting
        self.suggestions = list(suggestions or [])

    @classmethod
    def failure(cls, message: str, suggestions: Optional[List[AvailableSlot]] = None) -> "ScheduleResult":
        return cls(False, message, suggestions=suggestions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isSuccess": self.success,
            "message": self.message,
            "scheduledMeeting": self.meeting.to_dict() if self.meeting else None,
            "suggestedTimeSlots": [slot.to_dict() for slot in self.suggestions]
        }


class ParticipantAnalysis:
    def __init__(self, participant: Participant, local_working_hours: str,
                 utc_working_hours: str, total_meetings: int):
        self.participant = participant
        self.local_working_hours = local_working_hours
        self.utc_working_hours = utc_working_hours
        self.total_meetings = total_meetings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.participant.id,
            "name": self.participant.name,
            "timeZone": self.participant.timezone,
            "localWorkingHours": self.local_working_hours,
            "utcWorkingHours": self.utc_working_hours,
            "totalMeetings": self.total_meetings
        }


class WorkingHoursOverlap:
    def __init__(self, has_overlap: bool = False, overlap_period: str = "",
                 overlap_duration: str = "", participant_local_times: Optional[List[str]] = None):
        self.has_overlap = has_overlap
        self.overlap_period = overlap_period
        self.overlap_duration = overlap_duration
        self.participant_local_times = list(participant_local_times or [])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasOverlap": self.has_overlap,
            "overlapPeriod": self.overlap_period,
            "overlapDuration": self.overlap_duration,
            "participantLocalTimes": list(self.participant_local_times)
        }


class ConflictingMeeting:
    """
    One entry in an analysis conflict list: either a real booked meeting or
    a working-hours violation of the proposed window.
    """

    def __init__(self, kind: ConflictKind, title: str, start_time: datetime, end_time: datetime,
                 conflicting_participants: List[str], meeting_id: Optional[str] = None):
        self.kind = kind
        self.meeting_id = meeting_id
        self.title = title
        self.start_time = start_time
        self.end_time = end_time
        self.conflicting_participants = list(conflicting_participants)

    @property
    def is_working_hours_conflict(self) -> bool:
        return self.kind is ConflictKind.WORKING_HOURS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.meeting_id,
            "kind": self.kind.value,
            "title": self.title,
            "startTime": format_utc(self.start_time),
            "endTime": format_utc(self.end_time),
            "conflictingParticipants": list(self.conflicting_participants)
        }


class ParticipantLocalTime(NamedTuple):
    name: str
    timezone: str
    local_time_range: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "timeZone": self.timezone,
            "localTimeRange": self.local_time_range
        }


class SuggestedSlot:
    def __init__(self, start_time: datetime, end_time: datetime, utc_time_range: str,
                 participant_local_times: List[ParticipantLocalTime],
                 recommendation: RecommendationTier):
        self.start_time = start_time
        self.end_time = end_time
        self.utc_time_range = utc_time_range
        self.participant_local_times = list(participant_local_times)
        self.recommendation = recommendation

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startTimeUtc": format_utc(self.start_time),
            "endTimeUtc": format_utc(self.end_time),
            "utcTimeRange": self.utc_time_range,
            "participantLocalTimes": [p.to_dict() for p in self.participant_local_times],
            "recommendation": self.recommendation.value
        }


class ConflictAnalysis:
    """Multi-participant conflict and overlap report"""

    def __init__(self):
        self.summary = ""
        self.participants: List[ParticipantAnalysis] = []
        self.working_hours_overlap = WorkingHoursOverlap()
        self.conflicting_meetings: List[ConflictingMeeting] = []
        self.suggested_slots: List[SuggestedSlot] = []

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicting_meetings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasConflicts": self.has_conflicts,
            "summary": self.summary,
            "participants": [p.to_dict() for p in self.participants],
            "workingHoursOverlap": self.working_hours_overlap.to_dict(),
            "conflictingMeetings": [c.to_dict() for c in self.conflicting_meetings],
            "suggestedTimeSlots": [s.to_dict() for s in self.suggested_slots]
        }
