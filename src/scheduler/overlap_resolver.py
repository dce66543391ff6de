"""
Common working window for a group of participants
"""
import logging
from datetime import date, timedelta
from typing import List, Tuple

from config.settings import Config
from src.scheduler.models import Participant, WorkingWindow
from src.scheduler.working_hours import WorkingHoursCalculator, END_OF_DAY

logger = logging.getLogger(__name__)

TimeRange = Tuple[timedelta, timedelta]

# Zero-width range meaning "no common hours"
NO_OVERLAP: TimeRange = (timedelta(hours=Config.NO_OVERLAP_HOUR), timedelta(hours=Config.NO_OVERLAP_HOUR))


def has_overlap(window: TimeRange) -> bool:
    start, end = window
    return start < end


class OverlapResolver:
    """
    Intersects participants' UTC working windows into one common window.

    Windows that cross UTC midnight are folded in after the normal ones. For
    three or more participants mixing both kinds this is an approximation,
    not exact interval arithmetic.
    """

    def __init__(self, calculator: WorkingHoursCalculator = None):
        self.calculator = calculator or WorkingHoursCalculator()

    def common_window(self, participants: List[Participant], on_date: date) -> TimeRange:
        if not participants:
            default = self.calculator.default_window
            return default.start, default.end

        windows = [self.calculator.window_for(p, on_date) for p in participants]

        normal = [w for w in windows if not w.crosses_midnight]
        crossers = [w for w in windows if w.crosses_midnight]

        if not crossers:
            return self._intersect_normal(normal)
        if not normal:
            return self._overlap_for_crossers(crossers)
        return self._mixed_overlap(normal, crossers)

    def _intersect_normal(self, normal: List[WorkingWindow]) -> TimeRange:
        latest_start = max(w.start for w in normal)
        earliest_end = min(w.end for w in normal)

        if latest_start >= earliest_end:
            return NO_OVERLAP
        return latest_start, earliest_end

    def _overlap_for_crossers(self, crossers: List[WorkingWindow]) -> TimeRange:
        # Only the after-midnight part shared by everyone
        return timedelta(0), min(w.end for w in crossers)

    def _mixed_overlap(self, normal: List[WorkingWindow], crossers: List[WorkingWindow]) -> TimeRange:
        start, end = self._intersect_normal(normal)
        if start >= end:
            return NO_OVERLAP

        for crosser in crossers:
            if crosser.start <= end:
                start = max(start, crosser.start)
                end = min(end, END_OF_DAY)
            elif start <= crosser.end:
                end = min(end, crosser.end)
            else:
                return NO_OVERLAP

        if start >= end:
            return NO_OVERLAP
        return start, end
