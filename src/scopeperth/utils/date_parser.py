"""
Date Parsing Utilities

Parses the date and timestamp shapes returned by the data store and
provides the calendar arithmetic used by the dashboard (days on market,
sale quarters, look-back cutoffs).
"""

import re
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from scopeperth.core.constants import DAYS_PER_MONTH, DEFAULT_TIMEZONE, SOLD_HISTORY_START
from scopeperth.logging_config import get_logger

logger = get_logger(__name__)

DateLike = Union[str, date, datetime, None]

# Common date format patterns
DATE_PATTERNS = [
    # ISO format: 2024-01-15
    (r"^\d{4}-\d{2}-\d{2}$", "%Y-%m-%d"),
    # Australian format: 15/01/2024
    (r"^\d{2}/\d{2}/\d{4}$", "%d/%m/%Y"),
    # Domain format: 15 Jan 2024
    (r"^\d{1,2}\s+[A-Za-z]{3}\s+\d{4}$", "%d %b %Y"),
    # Full month: 15 January 2024
    (r"^\d{1,2}\s+[A-Za-z]+\s+\d{4}$", "%d %B %Y"),
]


def parse_date(date_str: DateLike) -> Optional[datetime]:
    """Parse a date string into a (naive, midnight) datetime.

    Handles ISO dates, ISO timestamps (time part dropped), Australian
    dd/mm/yyyy and "15 Jan 2024" style dates.

    Args:
        date_str: Date string, date or datetime.

    Returns:
        datetime object or None if parsing fails.

    Example:
        >>> parse_date("2024-01-15")
        datetime(2024, 1, 15, 0, 0)
    """
    if date_str is None:
        return None
    if isinstance(date_str, datetime):
        return date_str
    if isinstance(date_str, date):
        return datetime(date_str.year, date_str.month, date_str.day)

    date_str = str(date_str).strip()
    if not date_str:
        return None

    # Handle ISO format with time component
    if "T" in date_str:
        date_str = date_str.split("T")[0]

    for pattern, fmt in DATE_PATTERNS:
        if re.match(pattern, date_str, re.IGNORECASE):
            try:
                return datetime.strptime(date_str, fmt)
            except ValueError:
                continue

    logger.debug("Could not parse date: %s", date_str)
    return None


def parse_timestamp(value: DateLike) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, keeping its UTC offset when present.

    Falls back to :func:`parse_date` for date-only values.

    Example:
        >>> parse_timestamp("2025-03-08T10:00:00+08:00").hour
        10
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return parse_date(value)

    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # Postgres may emit "2025-03-08 10:00:00+08"
    if re.search(r"\d{2}:\d{2}(:\d{2}(\.\d+)?)?[+-]\d{2}$", text):
        text = text + ":00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return parse_date(text)


def get_timezone(name: Optional[str] = None) -> tzinfo:
    """Resolve a timezone name, falling back to Perth."""
    try:
        return ZoneInfo(name or DEFAULT_TIMEZONE)
    except ZoneInfoNotFoundError:
        logger.warning("Unknown timezone %s, using %s", name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def now_in(tz_name: Optional[str] = None) -> datetime:
    """Current time in the dashboard's evaluation timezone."""
    return datetime.now(get_timezone(tz_name))


def align_to(value: datetime, reference: datetime) -> datetime:
    """Express ``value`` so it can be compared with ``reference``.

    Aware values are converted into the reference's timezone. A naive value
    compared with an aware reference is read as wall-clock time in that
    timezone; an aware value compared with a naive reference keeps its own
    wall-clock time.
    """
    if reference.tzinfo is not None:
        if value.tzinfo is None:
            return value.replace(tzinfo=reference.tzinfo)
        return value.astimezone(reference.tzinfo)
    if value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


def days_on_market(first_seen: DateLike, now: datetime) -> Optional[int]:
    """Whole days elapsed since a listing was first observed.

    Args:
        first_seen: Date the listing entered the tracked set.
        now: Evaluation time.

    Returns:
        Floored day count (never negative), or None if the date is unknown.
    """
    seen = parse_timestamp(first_seen)
    if seen is None:
        return None
    elapsed = now - align_to(seen, now)
    return max(0, elapsed.days)


def format_days_on_market(days: Optional[int]) -> str:
    """Human text for a days-on-market count.

    Example:
        >>> format_days_on_market(12)
        "12 days on market"
    """
    if days is None:
        return ""
    if days == 0:
        return "Listed today"
    if days == 1:
        return "1 day on market"
    return f"{days} days on market"


def quarter_label(value: DateLike) -> Optional[str]:
    """Calendar quarter label for a date, e.g. "2024 Q3"."""
    dt = parse_date(value)
    if dt is None:
        return None
    quarter = (dt.month - 1) // 3 + 1
    return f"{dt.year} Q{quarter}"


def quarter_sort_key(label: str) -> tuple:
    """Sort key putting "YYYY Qn" labels in chronological order."""
    year, _, quarter = label.partition(" Q")
    return int(year), int(quarter)


def lookback_cutoff(months: int, now: datetime) -> str:
    """ISO date ``months`` back from ``now``; 0 means the full sold history."""
    if months <= 0:
        return SOLD_HISTORY_START
    cutoff = now - timedelta(days=months * DAYS_PER_MONTH)
    return cutoff.strftime("%Y-%m-%d")
