"""
Specialized logging utilities for meeting scheduling and working-hours tracking
"""
import logging
from typing import List

from src.scheduler.models import Participant, Meeting, AvailableSlot, ScheduleResult
from src.scheduler.timezone_offset import to_local

logger = logging.getLogger(__name__)

class MeetingLogger:
    """Specialized logger for meeting scheduling events"""

    @staticmethod
    def log_member_meetings_before_scheduling(participant: Participant, meetings: List[Meeting],
                                              business_hours_start: int = 8,
                                              business_hours_end: int = 18):
        """Log a participant's overlapping meetings before a booking attempt"""

        logger.info(f"📋 MEMBER ANALYSIS - {participant.label()}")
        logger.info(f"   📊 Existing meetings in window: {len(meetings)}")

        if not meetings:
            logger.info(f"   ✅ No existing meetings found for {participant.name}")
            return

        for i, meeting in enumerate(meetings, 1):
            local_start = to_local(meeting.start_time, participant.timezone)
            local_end = to_local(meeting.end_time, participant.timezone)
            in_hours = business_hours_start <= local_start.hour < business_hours_end
            marker = "🏢" if in_hours else "🌙"

            logger.info(f"      {i}. {marker} {meeting.title}")
            logger.info(f"         UTC: {meeting.start_time:%Y-%m-%d %H:%M} to {meeting.end_time:%H:%M}")
            logger.info(f"         Local: {local_start:%H:%M} to {local_end:%H:%M}")
            logger.info(f"         Attendees: {', '.join(p.name for p in meeting.participants)}")

    @staticmethod
    def log_schedule_outcome(title: str, result: ScheduleResult):
        """Log the final outcome of a schedule request"""

        if result.success and result.meeting:
            meeting = result.meeting
            logger.info(f"📅 FINAL SCHEDULED MEETING:")
            logger.info(f"   📋 Title: {meeting.title}")
            logger.info(f"   ⏰ Time: {meeting.start_time:%Y-%m-%d %H:%M} to {meeting.end_time:%H:%M} UTC")
            logger.info(f"   👥 Attendees: {', '.join(p.name for p in meeting.participants)}")
            return

        logger.info(f"❌ COULD NOT SCHEDULE '{title}': {result.message}")
        if result.suggestions:
            MeetingLogger.log_suggestions(result.suggestions)

    @staticmethod
    def log_suggestions(slots: List[AvailableSlot]):
        """Log alternative slots offered to the caller"""

        logger.info(f"   💡 {len(slots)} alternative slot(s):")
        for i, slot in enumerate(slots, 1):
            logger.info(f"      {i}. {slot.start_time:%Y-%m-%d %H:%M} to {slot.end_time:%H:%M} UTC")
