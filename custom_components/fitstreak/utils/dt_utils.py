# File: utils/dt_utils.py
"""Date and time utilities for FitStreak.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

UTILS PURITY: NO `homeassistant.*` imports allowed.
   Uses standard library: datetime, zoneinfo, dateutil.

Functions:
    - dt_today_local: Get today's date in local timezone
    - dt_today_iso: Get today's date as ISO string
    - dt_now_iso: Get current UTC datetime as ISO string
    - dt_parse_date: Parse a YYYY-MM-DD string
    - dt_to_utc: Parse an ISO timestamp and convert to UTC
    - dt_date_offset: Shift an ISO date by whole days
    - dt_week_start: Monday of the week containing an ISO date
    - dt_week_dates: The seven ISO dates of that week
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
import logging
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil import parser as dateutil_parser
from dateutil.relativedelta import MO, relativedelta

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

DAYS_PER_WEEK = 7


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`."""
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


def dt_today_iso(tz: ZoneInfo | None = None) -> str:
    """Return today's date in local timezone as ISO string (YYYY-MM-DD)."""
    return dt_today_local(tz).isoformat()


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def dt_now_iso() -> str:
    """Return the current UTC datetime as an ISO 8601 string.

    Timestamps on records are always UTC so that string comparison and
    parsed comparison agree across devices.
    """
    return dt_now_utc().isoformat()


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a YYYY-MM-DD string into a `datetime.date`.

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        _LOGGER.debug("Unparseable date string: %s", date_str)
        return None


def dt_to_utc(dt_str: str | None) -> datetime | None:
    """Parse an ISO timestamp, apply the default timezone if naive, convert to UTC.

    Example:
        "2025-04-07T14:30:00Z" -> datetime.datetime(2025, 4, 7, 14, 30, tzinfo=UTC)
    """
    if not dt_str or not isinstance(dt_str, str):
        return None
    try:
        parsed = dateutil_parser.isoparse(dt_str)
    except ValueError:
        _LOGGER.debug("Unparseable timestamp: %s", dt_str)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=DEFAULT_TIME_ZONE)
    return parsed.astimezone(UTC)


# ==============================================================================
# Calendar Arithmetic
# ==============================================================================


def dt_date_offset(date_str: str, days: int) -> str:
    """Shift an ISO date by a number of days.

    Example:
        dt_date_offset("2024-03-01", -1) -> "2024-02-29"
    """
    return (date.fromisoformat(date_str) + timedelta(days=days)).isoformat()


def dt_week_start(date_str: str) -> str:
    """Return the Monday that starts the week containing `date_str`.

    Example:
        dt_week_start("2024-01-07") -> "2024-01-01"  (Sunday maps back to Monday)
    """
    day = date.fromisoformat(date_str)
    return (day + relativedelta(weekday=MO(-1))).isoformat()


def dt_week_dates(date_str: str) -> list[str]:
    """Return the seven ISO dates of the Monday-starting week containing `date_str`."""
    week_start = dt_week_start(date_str)
    return [dt_date_offset(week_start, offset) for offset in range(DAYS_PER_WEEK)]
