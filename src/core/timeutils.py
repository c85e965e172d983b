"""
Date and time-of-day arithmetic shared by the calendar and the entry forms.

Times of day are "HH:MM" strings (a trailing ":SS" from SQL TIME columns is
accepted). Calendar days are plain `datetime.date` values so grouping never
depends on the server timezone.
"""

import math
import re
from datetime import date, datetime, time, timedelta

MINUTES_PER_DAY = 24 * 60

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_hhmm(value) -> int | None:
    """Parse 'HH:MM' into minutes since midnight, or None if malformed."""
    if not isinstance(value, str):
        return None
    match = _HHMM_RE.match(value.strip())
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def require_hhmm(value: str) -> int:
    """Like parse_hhmm but raises ValueError for malformed input."""
    minutes = parse_hhmm(value)
    if minutes is None:
        raise ValueError(f"Invalid time of day {value!r}, expected HH:MM")
    return minutes


def format_hhmm(minutes: int) -> str:
    """Format minutes since midnight as zero-padded 'HH:MM', wrapping at 24h."""
    minutes = int(minutes) % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def hours_between(start: str, end: str) -> float:
    """
    Hours from start to end on the same day, never negative.

    Example: hours_between("09:00", "11:30") == 2.5
    """
    diff = require_hhmm(end) - require_hhmm(start)
    return max(0.0, diff / 60)


def end_from_start_and_hours(start: str, hours: float) -> str:
    """
    End time of a block of `hours` starting at `start`.

    Wraps past midnight silently: end_from_start_and_hours("23:00", 2) == "01:00".
    """
    # Rounding absorbs float noise from hours produced by hours_between
    total = round(require_hhmm(start) + hours * 60, 6)
    return format_hhmm(math.floor(total))


def parse_hours(value, default: float = 1.0) -> float:
    """Parse an hours field, falling back to `default` for blanks, junk and non-positive values."""
    if isinstance(value, bool):
        return default
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(hours) or math.isinf(hours) or hours <= 0:
        return default
    return hours


def parse_minutes(value, default: int) -> int:
    """Parse a whole-minutes field, falling back to `default` for blanks, junk and negatives."""
    if isinstance(value, bool):
        return default
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(minutes) or math.isinf(minutes) or minutes < 0:
        return default
    return round(minutes)


def to_day(value) -> date | None:
    """
    Normalize a record's date field to a calendar day.

    Accepts date, datetime, 'YYYY-MM-DD' and ISO timestamps; only the date
    part is used, so '2024-06-03T00:00:00.000Z' is 2024-06-03 regardless of
    the local offset.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    date_part = value.strip().split("T")[0].split(" ")[0]
    try:
        return date.fromisoformat(date_part)
    except ValueError:
        return None


def weekday_index(day: date) -> int:
    """Day of week with Sunday = 0."""
    return (day.weekday() + 1) % 7


def week_start(day: date) -> date:
    """Most recent Sunday on or before `day`."""
    return day - timedelta(days=weekday_index(day))


def at_minutes(day: date, minutes: float) -> datetime:
    """Timestamp `minutes` after midnight of `day`; values past 24h roll into later days."""
    return datetime.combine(day, time()) + timedelta(minutes=minutes)
