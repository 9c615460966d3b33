"""
Date parsing and relative-time helpers.

The remote store emits ISO-8601 strings, UNIX seconds and UNIX milliseconds,
sometimes for the same field on different records. Everything is normalized
to timezone-aware UTC datetimes here.
"""

import math
import re
from datetime import date, datetime, timedelta, timezone

from core.config import EPOCH_SECONDS_CUTOFF

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Extended ISO-8601 date prefix (YYYY-MM-DD). Basic-format digit runs like
# "1712345678" are treated as timestamps, not dates.
ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


# =============================================================================
# PARSING
# =============================================================================


def _from_timestamp(value: float) -> datetime | None:
    if not math.isfinite(value):
        return None
    millis = value * 1000 if abs(value) < EPOCH_SECONDS_CUTOFF else value
    try:
        return EPOCH + timedelta(milliseconds=millis)
    except OverflowError:
        return None


def _from_iso(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_external_date(value: str | int | float | None) -> datetime | None:
    """
    Parse a date from a remote store payload.

    Handles:
    1. ISO-8601 strings ("2025-11-18T09:00:00.000Z", "2025-11-18")
    2. UNIX seconds (1700000000) and milliseconds (1700000000000)
    3. Numeric strings ("1700000000")
    4. None / "" / NaN / infinity / garbage -> None
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return _from_timestamp(float(value))

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if ISO_DATE_PREFIX.match(text):
            parsed = _from_iso(text)
            if parsed is not None:
                return parsed
        try:
            number = float(text)
        except ValueError:
            return None
        return _from_timestamp(number)

    return None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: datetime | None) -> str | None:
    """Format a datetime for API requests (UTC, millisecond precision, Z suffix)."""
    if value is None:
        return None
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# RELATIVE TIME
# =============================================================================

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
MONTH = 30 * DAY
YEAR = 365 * DAY


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_relative_time(value: datetime, now: datetime) -> str:
    """
    Describe value relative to now, e.g. "3 hours ago" or "in 2 days".

    Buckets: just now (<60s), minutes, hours, days (<30), months (<12), years.
    """
    delta = (value - now).total_seconds()
    seconds = abs(delta)

    if seconds < MINUTE:
        return "just now"
    if seconds < HOUR:
        text = _plural(int(seconds // MINUTE), "minute")
    elif seconds < DAY:
        text = _plural(int(seconds // HOUR), "hour")
    elif seconds < MONTH:
        text = _plural(int(seconds // DAY), "day")
    elif seconds < YEAR:
        text = _plural(min(int(seconds // MONTH), 11), "month")
    else:
        text = _plural(int(seconds // YEAR), "year")

    return f"in {text}" if delta > 0 else f"{text} ago"


def is_overdue(value: datetime | None, now: datetime) -> bool:
    """True when value is strictly before now."""
    if value is None:
        return False
    return value < now


# =============================================================================
# RANGES
# =============================================================================


def get_duration_days(start: datetime | None, end: datetime | None) -> int:
    """Inclusive day count of a range; at least 1, 0 when either end is missing."""
    if start is None or end is None:
        return 0
    return max(1, (end.date() - start.date()).days + 1)


def get_spanned_dates(start: datetime, end: datetime) -> list[date]:
    """Every calendar day touched by a (multi-day) event."""
    first, last = start.date(), end.date()
    if last < first:
        first, last = last, first
    return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]


def is_date_in_range(value: datetime, start: datetime, end: datetime) -> bool:
    """Day-granular containment check, inclusive of both ends."""
    return start.date() <= value.date() <= end.date()
