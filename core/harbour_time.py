import re
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from core.config import settings

MINUTES_PER_DAY = 1440

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})")

def harbour_now(utc_now: Optional[datetime] = None) -> datetime:
    """Get the current time in harbour local civil time.

    Args:
        utc_now: Optional aware instant to convert instead of the system clock

    Returns:
        datetime: Aware datetime in the harbour timezone
    """
    instant = utc_now or datetime.now(timezone.utc)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(ZoneInfo(settings.harbour_timezone))

def minute_of_day(moment: datetime) -> int:
    """Minutes elapsed since local midnight."""
    return moment.hour * 60 + moment.minute

def hhmm_to_minutes(text: str) -> Optional[int]:
    """Convert an HH:MM string to minute-of-day, None if it is not a valid time."""
    if not text:
        return None
    match = _HHMM.match(text.strip())
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes

def minutes_to_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"

def year_day(day: date) -> int:
    """Ordinal day of the year, 1 January is day 1."""
    return day.timetuple().tm_yday
