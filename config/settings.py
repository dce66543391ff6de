"""
Configuration settings for the Meeting Scheduler
"""
import os
from typing import Dict, Any

class Config:
    # Working hours, expressed in each participant's local time
    WORK_DAY_START_HOUR = 8   # 8 AM
    WORK_DAY_END_HOUR = 18    # 6 PM

    # Returned by the overlap resolver when a group has no common hours
    NO_OVERLAP_HOUR = 23

    # Slot search
    MAX_SUGGESTIONS = 3
    SUGGESTION_SEARCH_DAYS = 7
    SLOT_STEP_MINUTES = 60  # slots inside one free span may overlap each other

    # Defaults applied when a request omits the duration
    DEFAULT_ANALYSIS_DURATION = 60  # minutes
    DEFAULT_SLOT_DURATION = 30      # minutes
    DEFAULT_ANALYSIS_DAYS = 7

    DEFAULT_MEETING_TITLE = "Untitled Meeting"
    DEFAULT_TIMEZONE = "UTC"
    MAX_NAME_LENGTH = 200
    MAX_TIMEZONE_LENGTH = 100

    # API Configuration
    API_HOST = os.getenv("SCHEDULER_API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("SCHEDULER_API_PORT", "5000"))
    API_SLOW_REQUEST_SECONDS = 2

    # Logging
    LOG_LEVEL = os.getenv("SCHEDULER_LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("SCHEDULER_LOG_FILE") or None

    # Date/Time Formats
    OUTPUT_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
    DISPLAY_TIME_FORMAT = "%H:%M"
    DISPLAY_DATE_FORMAT = "%d/%m/%Y"

    @classmethod
    def working_hours_label(cls, start_hour: int = None, end_hour: int = None,
                            separator: str = "-") -> str:
        """Local working hours as shown in messages, e.g. '08:00-18:00'"""
        start_hour = cls.WORK_DAY_START_HOUR if start_hour is None else start_hour
        end_hour = cls.WORK_DAY_END_HOUR if end_hour is None else end_hour
        return f"{start_hour:02d}:00{separator}{end_hour:02d}:00"

    @classmethod
    def get_api_config(cls) -> Dict[str, Any]:
        """Get host/port settings for the Flask server"""
        return {
            "host": cls.API_HOST,
            "port": cls.API_PORT,
            "slow_request_seconds": cls.API_SLOW_REQUEST_SECONDS
        }
