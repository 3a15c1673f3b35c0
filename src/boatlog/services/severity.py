from __future__ import annotations

import math
from datetime import date, datetime, time
from typing import Any, Optional, Union

from src.boatlog.schemas.common import Severity

# Date-based thresholds (days until due).
URGENT_DAYS = 7
UPCOMING_DAYS = 30

# Hours-based thresholds (running hours until due).
URGENT_HOURS = 10
UPCOMING_HOURS = 50

SEVERITY_RANK = {
    Severity.overdue: 0,
    Severity.urgent: 1,
    Severity.upcoming: 2,
    Severity.info: 3,
}

DateLike = Union[date, datetime, str]


# PUBLIC_INTERFACE
def calculate_severity(days_until_due: float) -> Severity:
    """Map days until a due date to a severity tier."""
    if days_until_due < 0:
        return Severity.overdue
    if days_until_due <= URGENT_DAYS:
        return Severity.urgent
    if days_until_due <= UPCOMING_DAYS:
        return Severity.upcoming
    return Severity.info


# PUBLIC_INTERFACE
def calculate_hours_severity(hours_until_due: float) -> Severity:
    """Map running hours until a due point to a severity tier. Negative values mean the hours have been exceeded."""
    if hours_until_due < 0:
        return Severity.overdue
    if hours_until_due <= URGENT_HOURS:
        return Severity.urgent
    if hours_until_due <= UPCOMING_HOURS:
        return Severity.upcoming
    return Severity.info


# PUBLIC_INTERFACE
def parse_date(value: Any) -> Optional[DateLike]:
    """
    Normalize a stored date value.

    Stored calendar dates are ISO strings ('YYYY-MM-DD'); timestamps may be datetimes or
    ISO datetime strings. Returns a date, a naive datetime, or None for empty/unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        if len(text) <= 10:
            return date.fromisoformat(text)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        return parsed.replace(tzinfo=None) if parsed.tzinfo else parsed
    except ValueError:
        return None


# PUBLIC_INTERFACE
def as_calendar_date(value: Any) -> Optional[date]:
    """Return only the calendar date portion of a stored date/timestamp."""
    parsed = parse_date(value)
    if isinstance(parsed, datetime):
        return parsed.date()
    return parsed


# PUBLIC_INTERFACE
def days_until(value: Any, today: date) -> Optional[int]:
    """
    Whole days from today (midnight) until value, rounded up.

    A plain date yields an exact day difference; a timestamp later in the day counts as the next day.
    """
    parsed = parse_date(value)
    if parsed is None:
        return None
    if isinstance(parsed, datetime):
        delta = parsed - datetime.combine(today, time.min)
        return int(math.ceil(delta.total_seconds() / 86400.0))
    return (parsed - today).days


# PUBLIC_INTERFACE
def format_due_in(days_until_due: int) -> str:
    """Human-readable distance to a due date."""
    if days_until_due < 0:
        overdue = abs(days_until_due)
        return "1 day overdue" if overdue == 1 else f"{overdue} days overdue"
    if days_until_due == 0:
        return "Today"
    if days_until_due == 1:
        return "Tomorrow"
    if days_until_due < 7:
        return f"{days_until_due} days"
    if days_until_due < 30:
        weeks = days_until_due // 7
        return "1 week" if weeks == 1 else f"{weeks} weeks"
    months = days_until_due // 30
    return "1 month" if months == 1 else f"{months} months"


def _fmt_hours(v: float) -> str:
    return f"{v:g}"


# PUBLIC_INTERFACE
def format_hours_due(hours_until_due: float, current_hours: Optional[float] = None) -> str:
    """Human-readable distance to an hours-based due point."""
    if hours_until_due < 0:
        return f"{_fmt_hours(abs(hours_until_due))} hrs overdue"
    if current_hours is not None:
        return f"{_fmt_hours(hours_until_due)} hrs remaining"
    return f"Due at {_fmt_hours(hours_until_due)} hrs"
