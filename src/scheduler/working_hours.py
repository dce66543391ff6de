"""
Working hours calculator

Maps each participant's fixed local working day (08:00-18:00) onto UTC
times of day and checks proposed meeting windows against it.
"""
import logging
from datetime import datetime, date, time, timedelta
from typing import List, NamedTuple

from config.settings import Config
from src.scheduler.models import Participant, WorkingWindow, format_display_time
from src.scheduler.timezone_offset import to_utc, to_local, time_of_day

logger = logging.getLogger(__name__)

END_OF_DAY = timedelta(hours=23, minutes=59, seconds=59)


class WorkingHoursCheck(NamedTuple):
    is_valid: bool
    message: str
    violations: List[str]


class WorkingHoursCalculator:
    """Computes UTC working windows and validates meeting times against them"""

    def __init__(self, start_hour: int = None, end_hour: int = None):
        self.start_hour = Config.WORK_DAY_START_HOUR if start_hour is None else start_hour
        self.end_hour = Config.WORK_DAY_END_HOUR if end_hour is None else end_hour

    @property
    def default_window(self) -> WorkingWindow:
        return WorkingWindow(timedelta(hours=self.start_hour), timedelta(hours=self.end_hour), False)

    def hours_label(self, separator: str = "-") -> str:
        return Config.working_hours_label(self.start_hour, self.end_hour, separator)

    @property
    def local_hours_label(self) -> str:
        return self.hours_label()

    def window_for(self, participant: Participant, reference_date: date) -> WorkingWindow:
        """
        UTC window for the participant's local working hours on reference_date.

        crosses_midnight is set when the UTC end falls on a later calendar
        date than the UTC start. Any conversion failure falls back to the
        local hours read as UTC.
        """
        try:
            local_start = datetime.combine(reference_date, time(self.start_hour))
            local_end = datetime.combine(reference_date, time(self.end_hour))

            utc_start = to_utc(local_start, participant.timezone)
            utc_end = to_utc(local_end, participant.timezone)

            crosses_midnight = utc_end.date() > utc_start.date()
            return WorkingWindow(time_of_day(utc_start), time_of_day(utc_end), crosses_midnight)
        except (OverflowError, ValueError, TypeError) as e:
            logger.warning(f"Could not compute working hours for {participant.name}: {e}")
            return self.default_window

    def validate(self, participants: List[Participant], start_utc: datetime,
                 end_utc: datetime) -> WorkingHoursCheck:
        """Check the literal meeting window against every participant's own hours"""
        violations = []

        for participant in participants:
            window = self.window_for(participant, start_utc.date())

            meeting_start = time_of_day(start_utc)
            meeting_end = time_of_day(end_utc)
            if end_utc.date() > start_utc.date():
                meeting_end = END_OF_DAY

            if window.crosses_midnight:
                is_valid_time = meeting_start >= window.start or meeting_end <= window.end
            else:
                is_valid_time = meeting_start >= window.start and meeting_end <= window.end

            if not is_valid_time:
                local_start = to_local(start_utc, participant.timezone)
                local_end = to_local(end_utc, participant.timezone)
                violations.append(
                    f"{participant.label()}: meeting would be from "
                    f"{format_display_time(local_start)} to {format_display_time(local_end)} "
                    f"(outside working hours {self.local_hours_label})"
                )

        if violations:
            return WorkingHoursCheck(False, f"Outside working hours for: {'; '.join(violations)}", violations)

        return WorkingHoursCheck(True, "", [])
