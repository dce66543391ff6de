"""
Validation utilities for the Meeting Scheduler API
"""
import re
import uuid
from datetime import datetime
from typing import Dict, Any, List, Optional, Tuple

from config.settings import Config
from src.scheduler.timezone_offset import ensure_utc

class RequestValidator:
    """Validator for incoming scheduling requests"""

    @staticmethod
    def parse_datetime(value: Any) -> datetime:
        """
        Parse an ISO-8601 timestamp into naive UTC.

        Accepts a trailing 'Z'. Offsets are converted to UTC; values without
        an offset are taken to be UTC already. Raises ValueError otherwise.
        """
        if isinstance(value, datetime):
            return ensure_utc(value)
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Invalid datetime: {value!r}")

        text = value.strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        return ensure_utc(datetime.fromisoformat(text))

    @staticmethod
    def validate_datetime(value: Any) -> bool:
        try:
            RequestValidator.parse_datetime(value)
            return True
        except ValueError:
            return False

    @staticmethod
    def validate_uuid(value: Any) -> bool:
        """Validate participant/meeting id format"""
        try:
            uuid.UUID(str(value))
            return True
        except ValueError:
            return False

    @staticmethod
    def parse_participant_ids(raw: Any) -> Tuple[List[str], List[str]]:
        """
        Normalise participant ids from a JSON list or query-string values.

        Comma separated entries are split. Returns (ids, errors).
        """
        if raw is None:
            return [], []
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, list):
            return [], ["'participantIds' must be a list"]

        ids, errors = [], []
        for item in raw:
            for part in str(item).split(","):
                part = part.strip()
                if not part:
                    continue
                if RequestValidator.validate_uuid(part):
                    ids.append(str(uuid.UUID(part)))
                else:
                    errors.append(f"Invalid participant id: {part}")
        return ids, errors

    @staticmethod
    def parse_duration(value: Any, default: int) -> Tuple[int, Optional[str]]:
        if value is None or value == "":
            return default, None
        try:
            duration = int(value)
        except (TypeError, ValueError):
            return default, f"Invalid duration: {value}"
        if duration <= 0:
            return default, f"Duration must be positive: {value}"
        return duration, None

    @staticmethod
    def validate_schedule_request(request_data: Dict[str, Any]) -> List[str]:
        """Validate a schedule request body and return list of errors"""
        errors = []

        for field in ["startTime", "endTime"]:
            if field not in request_data:
                errors.append(f"Missing required field: {field}")
            elif not RequestValidator.validate_datetime(request_data[field]):
                errors.append(f"Invalid datetime format in '{field}': {request_data[field]}")

        if "participantIds" in request_data:
            _, id_errors = RequestValidator.parse_participant_ids(request_data["participantIds"])
            errors.extend(id_errors)

        title = request_data.get("title")
        if title is not None and not isinstance(title, str):
            errors.append("'title' must be a string")

        return errors

    @staticmethod
    def validate_analysis_request(request_data: Dict[str, Any]) -> List[str]:
        """Validate a conflict analysis request body and return list of errors"""
        errors = []

        _, id_errors = RequestValidator.parse_participant_ids(request_data.get("participantIds"))
        errors.extend(id_errors)

        for field in ["startDate", "endDate", "meetingStartTime", "meetingEndTime"]:
            value = request_data.get(field)
            if value is not None and not RequestValidator.validate_datetime(value):
                errors.append(f"Invalid datetime format in '{field}': {value}")

        _, duration_error = RequestValidator.parse_duration(
            request_data.get("durationMinutes"), Config.DEFAULT_ANALYSIS_DURATION
        )
        if duration_error:
            errors.append(duration_error)

        return errors

    @staticmethod
    def validate_user_request(request_data: Dict[str, Any]) -> List[str]:
        """Validate a create/update participant body"""
        errors = []

        name = request_data.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append("Name is required")
        elif len(name) > Config.MAX_NAME_LENGTH:
            errors.append(f"Name cannot exceed {Config.MAX_NAME_LENGTH} characters")

        timezone = request_data.get("timeZone")
        if timezone is not None:
            if not isinstance(timezone, str):
                errors.append("'timeZone' must be a string")
            elif len(timezone) > Config.MAX_TIMEZONE_LENGTH:
                errors.append(f"TimeZone cannot exceed {Config.MAX_TIMEZONE_LENGTH} characters")

        return errors

class DataSanitizer:
    """Sanitize and clean input data"""

    @staticmethod
    def sanitize_text(text: Optional[str]) -> str:
        """Sanitize free text such as meeting titles and names"""
        if not text:
            return ""
        # Remove excessive whitespace
        text = re.sub(r'\s+', ' ', text.strip())
        # Remove potentially harmful characters
        text = re.sub(r'[<>"\']', '', text)
        return text

    @staticmethod
    def sanitize_timezone(timezone: Optional[str]) -> str:
        if not timezone or not timezone.strip():
            return Config.DEFAULT_TIMEZONE
        return re.sub(r'\s+', '', timezone)
