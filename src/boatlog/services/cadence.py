"""Service cadences tracked on a component.

A component carries two independent cadences: one on the calendar and one on running
hours. Each is projected, dismissed and completed on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, Optional

from src.boatlog.services.severity import as_calendar_date


def _num(v: Any) -> Optional[float]:
    if v is None or v == "":
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None


def _clean_number(v: float) -> float | int:
    # Keep whole-hour counters as ints so stored/returned values stay tidy.
    return int(v) if float(v).is_integer() else v


@dataclass(frozen=True)
class DateCadence:
    """Calendar cadence: next due date, interval in days, last service date."""

    next_due: Optional[date]
    interval_days: Optional[int]
    last_done: Optional[date]

    @classmethod
    def from_component(cls, doc: Dict[str, Any]) -> "DateCadence":
        interval = _num(doc.get("service_interval_days"))
        return cls(
            next_due=as_calendar_date(doc.get("next_service_date")),
            interval_days=int(interval) if interval else None,
            last_done=as_calendar_date(doc.get("last_service_date")),
        )

    def project_from(self, today: date) -> Optional[date]:
        """Next due date counted forward from today, or None when no interval is configured."""
        if not self.interval_days:
            return None
        return today + timedelta(days=self.interval_days)


@dataclass(frozen=True)
class HoursCadence:
    """Running-hours cadence: next due hours, interval, last service hours and the current counter."""

    next_due: Optional[float]
    interval_hours: Optional[float]
    last_done: Optional[float]
    current: Optional[float]

    @classmethod
    def from_component(cls, doc: Dict[str, Any]) -> "HoursCadence":
        interval = _num(doc.get("service_interval_hours"))
        return cls(
            next_due=_num(doc.get("next_service_hours")),
            interval_hours=interval if interval else None,
            last_done=_num(doc.get("last_service_hours")),
            current=_num(doc.get("current_hours")),
        )

    def hours_until_due(self) -> Optional[float]:
        if self.next_due is None or self.current is None:
            return None
        return self.next_due - self.current

    def project_from_current(self) -> Optional[float | int]:
        """Next due hours counted forward from the current counter, or None if either is unknown."""
        if not self.interval_hours or self.current is None:
            return None
        return _clean_number(self.current + self.interval_hours)


# PUBLIC_INTERFACE
def dismiss_updates(component: Dict[str, Any], alert_type: str, today: date) -> Dict[str, Any]:
    """
    Compute the component fields written when an alert is dismissed.

    The targeted cadence is pushed forward by its interval from today (date) or from the
    current hours (hours). Without a usable interval the next-due field is cleared.
    """
    if alert_type == "maintenance_date":
        next_date = DateCadence.from_component(component).project_from(today)
        return {"next_service_date": next_date.isoformat() if next_date else None}
    if alert_type == "maintenance_hours":
        return {"next_service_hours": HoursCadence.from_component(component).project_from_current()}
    raise ValueError(f"unsupported alert type for dismiss: {alert_type!r}")


# PUBLIC_INTERFACE
def completion_updates(component: Dict[str, Any], today: date) -> Dict[str, Any]:
    """
    Compute the component fields written when a service is recorded as done today.

    Both cadences are refreshed whenever their interval is configured, regardless of which
    alert prompted the completion.
    """
    date_cadence = DateCadence.from_component(component)
    hours_cadence = HoursCadence.from_component(component)

    current = hours_cadence.current
    updates: Dict[str, Any] = {
        "last_service_date": today.isoformat(),
        "last_service_hours": _clean_number(current) if current is not None else None,
    }

    next_date = date_cadence.project_from(today)
    if next_date is not None:
        updates["next_service_date"] = next_date.isoformat()

    next_hours = hours_cadence.project_from_current()
    if next_hours is not None:
        updates["next_service_hours"] = next_hours

    return updates
