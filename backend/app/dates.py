"""Date helpers shared by the directive parser and the normalizer."""

from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

# Non-ISO formats people type into descriptions
DATE_FORMATS = ("%Y/%m/%d", "%Y.%m.%d")


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse a date or datetime string into a calendar date.

    Accepts ISO-8601 dates and datetimes (including a trailing ``Z``) and the
    slash/dot separated ``YYYY/MM/DD`` forms. Time-of-day is dropped.

    Returns:
        The parsed date, or None if the value is empty or unparseable
    """
    if not value or not value.strip():
        return None
    text = value.strip()

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    return None


def local_today(timezone: str = "UTC") -> date:
    """Current calendar date in the given IANA timezone."""
    return datetime.now(ZoneInfo(timezone)).date()
