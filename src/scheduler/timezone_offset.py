"""
Fixed UTC offset timezones ("UTC", "UTC+5:30", "UTC-03:00", ...)

Offsets are constant: there is no daylight saving and no political rule
lookup. Anything that cannot be parsed is treated as UTC so that scheduling
always stays computable.
"""
import re
import logging
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)

MAX_OFFSET = timedelta(hours=14)

_OFFSET_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})$')


def parse_timezone_offset(tz: str) -> timedelta:
    """Parse a fixed offset string, returning timedelta(0) for anything invalid"""
    if not tz or tz == "UTC":
        return timedelta(0)

    offset_string = tz.replace("UTC", "").strip()
    if not offset_string:
        return timedelta(0)

    sign = 1
    if offset_string.startswith("+"):
        offset_string = offset_string[1:]
    elif offset_string.startswith("-"):
        sign = -1
        offset_string = offset_string[1:]

    match = _OFFSET_PATTERN.match(offset_string)
    if not match:
        logger.debug(f"Unparseable timezone {tz!r}, using UTC")
        return timedelta(0)

    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes >= 60:
        logger.debug(f"Invalid minutes in timezone {tz!r}, using UTC")
        return timedelta(0)

    offset = timedelta(hours=hours, minutes=minutes)
    if offset > MAX_OFFSET:
        logger.debug(f"Timezone {tz!r} exceeds ±14:00, using UTC")
        return timedelta(0)

    return sign * offset


def to_utc(local_time: datetime, tz: str) -> datetime:
    """Convert a participant-local wall clock time to UTC"""
    return local_time - parse_timezone_offset(tz)


def to_local(utc_time: datetime, tz: str) -> datetime:
    """Convert a UTC time to the participant's local wall clock time"""
    return utc_time + parse_timezone_offset(tz)


def ensure_utc(value: datetime) -> datetime:
    """Normalise a datetime to naive UTC; naive input is taken to be UTC already"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def time_of_day(value: datetime) -> timedelta:
    """Offset of a datetime from its own midnight"""
    return value - datetime.combine(value.date(), datetime.min.time())


def add_clamped(value: datetime, delta: timedelta) -> datetime:
    """value + delta, held at datetime.max instead of overflowing"""
    if datetime.max - value < delta:
        return datetime.max
    return value + delta
