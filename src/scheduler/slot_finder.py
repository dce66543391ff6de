"""
Free slot search across a date range
"""
import logging
from datetime import datetime, date, timedelta
from typing import List, Iterable

from config.settings import Config
from src.scheduler.models import Participant, Meeting, AvailableSlot
from src.scheduler.overlap_resolver import OverlapResolver, has_overlap

logger = logging.getLogger(__name__)


class SlotFinder:
    """
    Walks the range day by day and emits slots inside the group's common
    working window that avoid every booked meeting.

    Inside one free span candidates advance by SLOT_STEP_MINUTES rather than
    by the meeting duration, so consecutive suggestions may overlap.
    """

    def __init__(self, overlap_resolver: OverlapResolver = None,
                 step_minutes: int = None, limit: int = None):
        self.overlap_resolver = overlap_resolver or OverlapResolver()
        self.step = timedelta(minutes=step_minutes or Config.SLOT_STEP_MINUTES)
        self.limit = limit or Config.MAX_SUGGESTIONS

    def find_slots(self, participants: List[Participant], search_start: datetime,
                   search_end: datetime, duration_minutes: int,
                   meetings: Iterable[Meeting], limit: int = None) -> List[AvailableSlot]:
        limit = limit or self.limit
        if not participants or duration_minutes <= 0 or search_end <= search_start:
            return []

        duration = timedelta(minutes=duration_minutes)
        ordered_meetings = sorted(meetings, key=lambda m: m.start_time)

        slots: List[AvailableSlot] = []
        day = search_start.date()
        while day <= search_end.date() and len(slots) < limit:
            for slot in self._slots_for_day(participants, day, ordered_meetings,
                                            duration, search_start, search_end):
                slots.append(slot)
                if len(slots) >= limit:
                    break
            if day == date.max:
                break
            day += timedelta(days=1)

        logger.debug(f"Found {len(slots)} slot(s) of {duration_minutes} minutes "
                     f"between {search_start} and {search_end}")
        return slots

    def _slots_for_day(self, participants: List[Participant], day: date,
                       ordered_meetings: List[Meeting], duration: timedelta,
                       search_start: datetime, search_end: datetime) -> List[AvailableSlot]:
        daily_slots: List[AvailableSlot] = []

        common = self.overlap_resolver.common_window(participants, day)
        if not has_overlap(common):
            return daily_slots

        midnight = datetime.combine(day, datetime.min.time())
        day_start = midnight + common[0]
        day_end = midnight + common[1]

        if day == search_start.date() and search_start > day_start:
            day_start = search_start
        if day == search_end.date() and search_end < day_end:
            day_end = search_end

        if day_end - day_start < duration:
            return daily_slots

        day_meetings = [m for m in ordered_meetings if m.start_time < day_end and m.end_time > day_start]

        current = day_start
        for meeting in day_meetings:
            meeting_start = max(meeting.start_time, day_start)

            while meeting_start - current >= duration:
                daily_slots.append(AvailableSlot(current, current + duration))
                if day_end - current < self.step:
                    return daily_slots
                current += self.step

            if meeting.end_time > current:
                current = meeting.end_time

        while day_end - current >= duration:
            daily_slots.append(AvailableSlot(current, current + duration))
            if day_end - current < self.step:
                return daily_slots
            current += self.step

        return daily_slots
