"""Tests for the day-by-day free slot search."""

from datetime import datetime, timedelta

import pytest

from src.scheduler.models import Participant, Meeting, AvailableSlot
from src.scheduler.overlap_resolver import OverlapResolver
from src.scheduler.slot_finder import SlotFinder
from src.scheduler.working_hours import WorkingHoursCalculator


BEN = Participant("ben", "Ben", "UTC")
CHANDRA = Participant("chandra", "Chandra", "UTC+5:30")
ANA = Participant("ana", "Ana", "UTC-3:00")
HIRO = Participant("hiro", "Hiro", "UTC+9:00")

DAY = datetime(2025, 6, 3)


def at(hour, minute=0, day=DAY):
    return day + timedelta(hours=hour, minutes=minute)


def booked(start, end, *participants):
    return Meeting(f"m-{start:%H%M}", "Busy", start, end, list(participants) or [BEN])


@pytest.fixture
def finder():
    return SlotFinder()


class TestFindSlots:
    """Slots inside the common window that avoid meetings."""

    def test_empty_calendar_starts_at_window_start(self, finder):
        slots = finder.find_slots([BEN], DAY, at(23, 59), 30, [])

        assert slots == [
            AvailableSlot(at(8), at(8, 30)),
            AvailableSlot(at(9), at(9, 30)),
            AvailableSlot(at(10), at(10, 30)),
        ]

    def test_skips_booked_meeting(self, finder):
        slots = finder.find_slots([BEN], DAY, at(23, 59), 30, [booked(at(8), at(9, 30))])
        assert [s.start_time for s in slots] == [at(9, 30), at(10, 30), at(11, 30)]

    def test_meeting_starting_before_window(self, finder):
        slots = finder.find_slots([BEN], DAY, at(23, 59), 60, [booked(at(7), at(8, 30))])
        assert [s.start_time for s in slots] == [at(8, 30), at(9, 30), at(10, 30)]

    def test_meeting_from_previous_day_blocks_morning(self, finder):
        overnight = booked(at(22, day=DAY - timedelta(days=1)), at(9))
        slots = finder.find_slots([BEN], DAY, at(23, 59), 60, [overnight])
        assert slots[0].start_time == at(9)

    def test_fills_gaps_between_meetings(self, finder):
        meetings = [booked(at(8), at(10)), booked(at(11), at(17))]
        slots = finder.find_slots([BEN], DAY, at(23, 59), 60, meetings)

        assert [s.start_time for s in slots] == [at(10), at(17)]

    def test_search_start_clips_first_day(self, finder):
        slots = finder.find_slots([BEN], at(16, 30), at(12, day=DAY + timedelta(days=1)), 30, [])

        assert [s.start_time for s in slots] == [
            at(16, 30), at(17, 30), at(8, day=DAY + timedelta(days=1))
        ]

    def test_search_end_clips_last_day(self, finder):
        slots = finder.find_slots([BEN], at(8), at(9, 30), 60, [])
        assert [s.start_time for s in slots] == [at(8)]

    def test_group_uses_common_window(self, finder):
        slots = finder.find_slots([BEN, CHANDRA, ANA], DAY, at(23, 59), 30, [])
        assert [s.start_time for s in slots] == [at(11), at(12)]

    def test_midnight_crosser_alone(self, finder):
        slots = finder.find_slots([HIRO], DAY, at(23, 59), 60, [])
        assert [s.start_time for s in slots] == [at(0), at(1), at(2)]

    def test_no_common_window_means_no_slots(self, finder):
        assert finder.find_slots([ANA, HIRO], DAY, DAY + timedelta(days=7), 30, []) == []

    def test_limit(self, finder):
        assert len(finder.find_slots([BEN], DAY, DAY + timedelta(days=7), 30, [], limit=5)) == 5
        assert len(SlotFinder(limit=1).find_slots([BEN], DAY, DAY + timedelta(days=7), 30, [])) == 1

    @pytest.mark.parametrize("duration", [0, -30])
    def test_non_positive_duration(self, finder, duration):
        assert finder.find_slots([BEN], DAY, DAY + timedelta(days=7), duration, []) == []

    def test_empty_or_inverted_range(self, finder):
        assert finder.find_slots([BEN], at(12), at(12), 30, []) == []
        assert finder.find_slots([BEN], at(12), at(10), 30, []) == []
        assert finder.find_slots([], DAY, DAY + timedelta(days=7), 30, []) == []

    def test_slots_are_exact_ordered_and_conflict_free(self, finder):
        meetings = [booked(at(9, 15), at(10, 45)), booked(at(13), at(18))]
        for duration in (15, 45, 90, 240):
            slots = finder.find_slots([BEN], DAY, DAY + timedelta(days=3), duration, meetings)

            assert len(slots) <= 3
            for slot in slots:
                assert slot.end_time - slot.start_time == timedelta(minutes=duration)
                assert not any(m.overlaps_with(slot.start_time, slot.end_time) for m in meetings)
            assert all(a.start_time < b.start_time for a, b in zip(slots, slots[1:]))


class TestEndOfCalendar:
    """Ranges that run up to the last representable day."""

    def test_range_ending_on_last_day(self, finder):
        slots = finder.find_slots([BEN], datetime(9999, 12, 30), datetime(9999, 12, 31, 23), 60, [], limit=30)

        assert len(slots) == 20
        assert slots[-1] == AvailableSlot(datetime(9999, 12, 31, 17), datetime(9999, 12, 31, 18))

    def test_no_overlap_up_to_last_day(self, finder):
        assert finder.find_slots([ANA, HIRO], datetime(9999, 12, 30), datetime(9999, 12, 31, 23), 60, []) == []

    def test_window_ending_just_before_datetime_max(self):
        """Local 22:00-23:00 at UTC-0:59 is 22:59-23:59 UTC."""
        late_finder = SlotFinder(OverlapResolver(WorkingHoursCalculator(start_hour=22, end_hour=23)))
        late = Participant("late", "Late", "UTC-0:59")

        slots = late_finder.find_slots([late], datetime(9999, 12, 31, 23, 30), datetime.max, 1, [])

        assert slots == [AvailableSlot(datetime(9999, 12, 31, 23, 30), datetime(9999, 12, 31, 23, 31))]
