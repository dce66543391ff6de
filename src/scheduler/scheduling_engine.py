"""
Scheduling Engine - Main orchestrator for booking meetings across timezones
"""
import logging
import math
import uuid
from datetime import datetime, timedelta
from typing import List, Optional, Iterable, Callable

from config.settings import Config
from src.scheduler.conflict_checker import ConflictChecker
from src.scheduler.models import (
    Participant, Meeting, AvailableSlot, ScheduleResult, ConflictAnalysis,
    ParticipantAnalysis, WorkingHoursOverlap, ConflictingMeeting, ConflictKind,
    SuggestedSlot, ParticipantLocalTime, format_time_of_day, format_display_time,
    format_display_date,
)
from src.scheduler.overlap_resolver import OverlapResolver, has_overlap
from src.scheduler.recommendation import RecommendationRanker
from src.scheduler.slot_finder import SlotFinder
from src.scheduler.timezone_offset import ensure_utc, to_local, utc_now, add_clamped
from src.scheduler.working_hours import WorkingHoursCalculator
from src.store.base import SchedulingStore
from utils.meeting_logger import MeetingLogger

logger = logging.getLogger(__name__)

class SchedulingEngine:
    """
    Books meetings, finds free slots and analyses conflicts for a group of
    participants in fixed-offset timezones.

    The engine holds no per-request state. The store and the clock are
    injected so the same inputs always produce the same outputs.
    """

    def __init__(self, store: SchedulingStore, clock: Callable[[], datetime] = None,
                 calculator: WorkingHoursCalculator = None):
        self.config = Config()
        self.store = store
        self.clock = clock or utc_now

        self.calculator = calculator or WorkingHoursCalculator()
        self.overlap_resolver = OverlapResolver(self.calculator)
        self.conflict_checker = ConflictChecker()
        self.slot_finder = SlotFinder(self.overlap_resolver)
        self.ranker = RecommendationRanker()

        logger.info("SchedulingEngine initialized")

    # Scheduling

    def schedule_meeting(self, title: Optional[str], start_time: datetime, end_time: datetime,
                         participant_ids: Iterable[str]) -> ScheduleResult:
        """
        Book a meeting if every participant is inside working hours and free.

        Checks run in order: time ordering, participant list, participant
        lookup, working hours, existing meetings. The last two failures carry
        up to three alternative slots from the following week.
        """
        start_utc = ensure_utc(start_time)
        end_utc = ensure_utc(end_time)

        if end_utc <= start_utc:
            return ScheduleResult.failure("End time must be after start time.")

        participant_ids = list(dict.fromkeys(participant_ids or []))
        if not participant_ids:
            return ScheduleResult.failure("At least one participant is required.")

        participants = []
        for participant_id in participant_ids:
            participant = self.store.get_participant(participant_id)
            if participant is None:
                return ScheduleResult.failure(f"Participant with ID {participant_id} not found.")
            participants.append(participant)

        title = (title or "").strip() or self.config.DEFAULT_MEETING_TITLE
        duration_minutes = max(1, math.ceil((end_utc - start_utc).total_seconds() / 60))

        logger.info(f"🗓️  Schedule request '{title}' {start_utc} - {end_utc} "
                    f"for {len(participants)} participant(s)")

        working_hours = self.calculator.validate(participants, start_utc, end_utc)
        if not working_hours.is_valid:
            suggestions = self._suggest_alternatives(participant_ids, start_utc, duration_minutes)
            result = ScheduleResult.failure(working_hours.message, suggestions)
            MeetingLogger.log_schedule_outcome(title, result)
            return result

        existing = self.store.list_overlapping_meetings(start_utc, end_utc, participant_ids)
        conflicts = self.conflict_checker.overlaps(start_utc, end_utc, existing)

        for participant in participants:
            MeetingLogger.log_member_meetings_before_scheduling(
                participant,
                [m for m in conflicts if participant.id in m.participant_ids],
                self.config.WORK_DAY_START_HOUR,
                self.config.WORK_DAY_END_HOUR
            )

        if conflicts:
            suggestions = self._suggest_alternatives(participant_ids, start_utc, duration_minutes)
            result = ScheduleResult.failure("Time conflict detected for one or more participants.", suggestions)
            MeetingLogger.log_schedule_outcome(title, result)
            return result

        # Not serialised against concurrent requests: two callers can both pass
        # the conflict check above and both insert.
        meeting = self.store.insert_meeting(Meeting(
            meeting_id=str(uuid.uuid4()),
            title=title,
            start_time=start_utc,
            end_time=end_utc,
            participants=participants
        ))

        result = ScheduleResult(True, "Meeting scheduled successfully.", meeting)
        MeetingLogger.log_schedule_outcome(title, result)
        return result

    def _suggest_alternatives(self, participant_ids: List[str], start_utc: datetime,
                              duration_minutes: int) -> List[AvailableSlot]:
        search_end = add_clamped(start_utc, timedelta(days=self.config.SUGGESTION_SEARCH_DAYS))
        slots = self.find_available_time_slots(participant_ids, start_utc, search_end, duration_minutes)
        return slots[:self.config.MAX_SUGGESTIONS]

    def find_available_time_slots(self, participant_ids: Iterable[str], start_date: datetime,
                                  end_date: datetime, duration_minutes: int) -> List[AvailableSlot]:
        """Up to three free slots for the group; unknown participant ids are ignored"""
        participants = self._resolve_participants(participant_ids)
        if not participants:
            return []

        start_utc = ensure_utc(start_date)
        end_utc = ensure_utc(end_date)
        resolved_ids = [p.id for p in participants]

        meetings = self.store.list_overlapping_meetings(start_utc, end_utc, resolved_ids)
        return self.slot_finder.find_slots(participants, start_utc, end_utc, duration_minutes, meetings)

    def list_meetings(self) -> List[Meeting]:
        return sorted(self.store.list_meetings(), key=lambda m: m.start_time)

    def delete_meeting(self, meeting_id: str) -> bool:
        if self.store.get_meeting(meeting_id) is None:
            return False
        deleted = self.store.delete_meeting(meeting_id)
        if deleted:
            logger.info(f"🗑️  Deleted meeting {meeting_id}")
        return deleted

    def _resolve_participants(self, participant_ids: Iterable[str]) -> List[Participant]:
        participants = []
        for participant_id in dict.fromkeys(participant_ids or []):
            participant = self.store.get_participant(participant_id)
            if participant is not None:
                participants.append(participant)
        return participants

    # Conflict analysis

    def analyze_conflicts(self, participant_ids: Iterable[str], start_date: datetime = None,
                          end_date: datetime = None, meeting_start: datetime = None,
                          meeting_end: datetime = None, duration_minutes: int = None) -> ConflictAnalysis:
        """
        Build a conflict and overlap report for a group.

        With both meeting_start and meeting_end, conflicts are reported for
        that exact window, including a working-hours entry when someone
        would be outside their hours. Otherwise every double-booking inside
        the date range is reported.
        """
        analysis = ConflictAnalysis()

        participant_ids = list(participant_ids or [])
        if not participant_ids:
            analysis.summary = "No participants selected for analysis."
            return analysis

        participants = self._resolve_participants(participant_ids)
        if not participants:
            analysis.summary = "No valid participants found."
            return analysis

        now = self.clock()
        start_utc = ensure_utc(start_date) if start_date else now
        default_end = add_clamped(now, timedelta(days=self.config.DEFAULT_ANALYSIS_DAYS))
        end_utc = ensure_utc(end_date) if end_date else default_end
        duration_minutes = duration_minutes or self.config.DEFAULT_ANALYSIS_DURATION

        logger.info(f"🔍 Analyzing conflicts for {len(participants)} participant(s) "
                    f"between {start_utc} and {end_utc}")

        analysis.participants = self._analyze_participants(participants, start_utc, end_utc)
        analysis.working_hours_overlap = self._analyze_working_hours_overlap(participants, start_utc)

        if meeting_start is not None and meeting_end is not None:
            analysis.conflicting_meetings = self._conflicts_for_window(
                participants, ensure_utc(meeting_start), ensure_utc(meeting_end)
            )
        else:
            analysis.conflicting_meetings = self._conflicts_in_range(participants, start_utc, end_utc)

        analysis.suggested_slots = self._intelligent_suggestions(participants, start_utc, end_utc, duration_minutes)
        analysis.summary = self._analysis_summary(analysis, participants)

        logger.info(f"   ⚠️  Conflicts: {len(analysis.conflicting_meetings)}, "
                    f"💡 Suggestions: {len(analysis.suggested_slots)}")
        return analysis

    def _analyze_participants(self, participants: List[Participant], start_utc: datetime,
                              end_utc: datetime) -> List[ParticipantAnalysis]:
        result = []
        local_hours = self.calculator.hours_label(separator=" - ")

        for participant in participants:
            window = self.calculator.window_for(participant, start_utc.date())
            meetings = self.store.list_meetings_for_participant(participant.id)
            meetings_in_period = sum(
                1 for m in meetings if m.start_time >= start_utc and m.end_time <= end_utc
            )

            window_start = format_time_of_day(window.start)
            window_end = format_time_of_day(window.end)
            if window.crosses_midnight:
                utc_hours = f"{window_start} - 00:00 + 00:00 - {window_end} UTC (crosses midnight)"
            else:
                utc_hours = f"{window_start} - {window_end} UTC"

            result.append(ParticipantAnalysis(participant, local_hours, utc_hours, meetings_in_period))

        return result

    def _analyze_working_hours_overlap(self, participants: List[Participant],
                                       reference: datetime) -> WorkingHoursOverlap:
        if len(participants) < 2:
            default = self.calculator.default_window
            return WorkingHoursOverlap(
                has_overlap=True,
                overlap_period=f"{format_time_of_day(default.start)} - {format_time_of_day(default.end)} UTC",
                overlap_duration=_format_duration(default.end - default.start)
            )

        common = self.overlap_resolver.common_window(participants, reference.date())
        if not has_overlap(common):
            return WorkingHoursOverlap(
                has_overlap=False,
                overlap_period="No overlap",
                overlap_duration="0 hours",
                participant_local_times=["❌ No common working hours between participants"]
            )

        start, end = common
        midnight = datetime.combine(reference.date(), datetime.min.time())
        local_times = []
        for participant in participants:
            local_start = to_local(midnight + start, participant.timezone)
            local_end = to_local(midnight + end, participant.timezone)
            local_range = f"{format_display_time(local_start)} - {format_display_time(local_end)}"
            local_times.append(f"{participant.label()}: {local_range}")

        return WorkingHoursOverlap(
            has_overlap=True,
            overlap_period=f"{format_time_of_day(start)} - {format_time_of_day(end)} UTC",
            overlap_duration=_format_duration(end - start),
            participant_local_times=local_times
        )

    def _conflicts_for_window(self, participants: List[Participant], meeting_start: datetime,
                              meeting_end: datetime) -> List[ConflictingMeeting]:
        participant_ids = [p.id for p in participants]
        existing = self.store.list_overlapping_meetings(meeting_start, meeting_end, participant_ids)

        conflicts = [
            self._as_conflicting_meeting(meeting, set(participant_ids))
            for meeting in self.conflict_checker.overlaps(meeting_start, meeting_end, existing)
        ]

        working_hours = self.calculator.validate(participants, meeting_start, meeting_end)
        if not working_hours.is_valid:
            conflicts.append(ConflictingMeeting(
                kind=ConflictKind.WORKING_HOURS,
                title=(f"Working Hours Conflict for {format_display_time(meeting_start)} - "
                       f"{format_display_time(meeting_end)} "
                       f"on {format_display_date(meeting_start)}"),
                start_time=meeting_start,
                end_time=meeting_end,
                conflicting_participants=[working_hours.message]
            ))

        return conflicts

    def _conflicts_in_range(self, participants: List[Participant], start_utc: datetime,
                            end_utc: datetime) -> List[ConflictingMeeting]:
        participant_ids = [p.id for p in participants]
        meetings = self.store.list_overlapping_meetings(start_utc, end_utc, participant_ids)

        result = []
        seen = set()
        for group in self.conflict_checker.conflict_groups(meetings, participant_ids):
            for meeting in group:
                if meeting.id in seen:
                    continue
                seen.add(meeting.id)
                result.append(self._as_conflicting_meeting(meeting, set(participant_ids)))
        return result

    @staticmethod
    def _as_conflicting_meeting(meeting: Meeting, participant_ids: set) -> ConflictingMeeting:
        return ConflictingMeeting(
            kind=ConflictKind.MEETING,
            meeting_id=meeting.id,
            title=meeting.title,
            start_time=meeting.start_time,
            end_time=meeting.end_time,
            conflicting_participants=[p.label() for p in meeting.participants if p.id in participant_ids]
        )

    def _intelligent_suggestions(self, participants: List[Participant], start_utc: datetime,
                                 end_utc: datetime, duration_minutes: int) -> List[SuggestedSlot]:
        slots = self.find_available_time_slots([p.id for p in participants], start_utc, end_utc, duration_minutes)

        suggestions = []
        for slot in slots:
            local_times = []
            for participant in participants:
                local_start = to_local(slot.start_time, participant.timezone)
                local_end = to_local(slot.end_time, participant.timezone)
                local_range = f"{format_display_time(local_start)} - {format_display_time(local_end)}"
                local_times.append(ParticipantLocalTime(participant.name, participant.timezone, local_range))

            suggestions.append(SuggestedSlot(
                start_time=slot.start_time,
                end_time=slot.end_time,
                utc_time_range=(f"{format_display_time(slot.start_time)} - {format_display_time(slot.end_time)} UTC - "
                                f"{format_display_date(slot.start_time)}"),
                participant_local_times=local_times,
                recommendation=self.ranker.score(slot.start_time, participants)
            ))

        return self.ranker.rank(suggestions)[:self.config.MAX_SUGGESTIONS]

    def _analysis_summary(self, analysis: ConflictAnalysis, participants: List[Participant]) -> str:
        lines = [f"📊 Analysis for {len(participants)} participant(s):"]
        for p in analysis.participants:
            lines.append(f"   • {p.participant.label()}: {p.utc_working_hours}")

        overlap = analysis.working_hours_overlap
        if overlap.has_overlap:
            lines.append(f"\n✅ Overlap window: {overlap.overlap_period} ({overlap.overlap_duration})")
            for local_time in overlap.participant_local_times:
                lines.append(f"   • {local_time}")
        else:
            lines.append("\n❌ No working hours overlap")

        if analysis.has_conflicts:
            hours_conflicts = [c for c in analysis.conflicting_meetings if c.is_working_hours_conflict]
            meeting_conflicts = [c for c in analysis.conflicting_meetings if not c.is_working_hours_conflict]

            if hours_conflicts and meeting_conflicts:
                lines.append(f"\n⚠️ {len(hours_conflicts)} working hours conflict(s) and "
                             f"{len(meeting_conflicts)} meeting conflict(s) found")
            elif hours_conflicts:
                conflict = hours_conflicts[0]
                lines.append(f"\n⚠️ Working hours conflict for {format_display_time(conflict.start_time)} - "
                             f"{format_display_time(conflict.end_time)} on {format_display_date(conflict.start_time)}")
            else:
                lines.append(f"\n⚠️ {len(meeting_conflicts)} meeting conflict(s) found")
        else:
            lines.append("\n✅ No conflicts detected")

        if analysis.suggested_slots:
            lines.append(f"\n🎯 {len(analysis.suggested_slots)} suggested time slot(s):")
            for suggestion in analysis.suggested_slots:
                lines.append(f"   • {suggestion.utc_time_range} - {suggestion.recommendation.display()}")

        return "\n".join(lines)


def _format_duration(duration: timedelta) -> str:
    """'10 hours' or '1:30 hours'"""
    hours, minutes = divmod(int(duration.total_seconds() // 60), 60)
    if minutes:
        return f"{hours}:{minutes:02d} hours"
    return f"{hours} hours"
