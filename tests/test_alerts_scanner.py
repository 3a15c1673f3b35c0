from __future__ import annotations

from datetime import date, timedelta

from src.boatlog.schemas.alerts import AlertOut
from src.boatlog.schemas.common import Severity
from src.boatlog.services.alerts_scanner import (
    scan_components,
    scan_documents,
    scan_safety_equipment,
    sort_alerts,
)

TODAY = date(2024, 6, 1)
BOATS = {"b1": "Sea Breeze"}


def _in(days: int) -> str:
    return (TODAY + timedelta(days=days)).isoformat()


def _component(**fields):
    doc = {"id": "c1", "boat_id": "b1", "name": "Port Engine"}
    doc.update(fields)
    return doc


def _alert(alert_id: str, severity: Severity, due: str | None = None) -> AlertOut:
    return AlertOut(
        id=alert_id,
        type="maintenance_date" if due else "maintenance_hours",
        severity=severity,
        title=alert_id,
        description="",
        dueDate=due,
        boatId="b1",
    )


def test_component_due_in_30_days_alerts_but_31_does_not():
    assert scan_components([_component(next_service_date=_in(31))], BOATS, TODAY) == []

    alerts = scan_components([_component(next_service_date=_in(30))], BOATS, TODAY)
    assert len(alerts) == 1
    alert = alerts[0]
    assert alert.id == "comp-date-c1"
    assert alert.type == "maintenance_date"
    assert alert.severity == Severity.upcoming
    assert alert.due_date == TODAY + timedelta(days=30)
    assert alert.boat_name == "Sea Breeze"
    assert alert.component_name == "Port Engine"
    assert alert.title == "Port Engine service due"


def test_overdue_component_date():
    alerts = scan_components([_component(next_service_date=_in(-3))], BOATS, TODAY)
    assert [a.severity for a in alerts] == [Severity.overdue]
    assert alerts[0].due_text == "3 days overdue"


def test_hours_alert_uses_distance_to_next_service_hours():
    alerts = scan_components([_component(next_service_hours=500, current_hours=495)], BOATS, TODAY)
    assert len(alerts) == 1
    alert = alerts[0]
    assert alert.id == "comp-hours-c1"
    assert alert.type == "maintenance_hours"
    assert alert.severity == Severity.urgent
    assert alert.due_hours == 500
    assert alert.current_hours == 495
    assert alert.due_date is None


def test_hours_beyond_50_and_incomplete_hours_pairs_are_skipped():
    comps = [
        _component(id="far", next_service_hours=600, current_hours=549),
        _component(id="no-current", next_service_hours=100),
        _component(id="no-next", current_hours=100),
    ]
    assert scan_components(comps, BOATS, TODAY) == []


def test_hours_past_due_are_overdue():
    alerts = scan_components([_component(next_service_hours=500, current_hours=520)], BOATS, TODAY)
    assert alerts[0].severity == Severity.overdue


def test_component_can_emit_both_date_and_hours_alerts():
    alerts = scan_components(
        [_component(next_service_date=_in(5), next_service_hours=100, current_hours=80)],
        BOATS,
        TODAY,
    )
    assert sorted(a.id for a in alerts) == ["comp-date-c1", "comp-hours-c1"]


def test_component_without_schedule_is_silently_skipped():
    assert scan_components([_component()], BOATS, TODAY) == []


def test_document_custom_reminder_window_extends_alerting():
    doc = {"id": "d1", "boat_id": "b1", "name": "Insurance", "category": "insurance", "expiry_date": _in(45)}
    assert scan_documents([doc], BOATS, TODAY) == []

    alerts = scan_documents([dict(doc, reminder_days=60)], BOATS, TODAY)
    assert len(alerts) == 1
    alert = alerts[0]
    assert alert.id == "doc-d1"
    assert alert.type == "document_expiry"
    assert alert.severity == Severity.info
    assert alert.title == "Insurance expires"
    assert alert.description == "Insurance"
    assert alert.document_id == "d1"


def test_document_without_expiry_is_skipped():
    doc = {"id": "d1", "boat_id": "b1", "name": "Manual", "category": "manual", "expiry_date": None}
    assert scan_documents([doc], BOATS, TODAY) == []


def test_expired_document_is_overdue():
    doc = {"id": "d1", "boat_id": "b1", "name": "Registration", "category": "registration", "expiry_date": _in(-1)}
    assert scan_documents([doc], BOATS, TODAY)[0].severity == Severity.overdue


def test_safety_equipment_expiry_and_service_alerts():
    items = [
        {"id": "s1", "boat_id": "b1", "type": "flares", "expiry_date": _in(10), "next_service_date": _in(40)},
        {"id": "s2", "boat_id": "b1", "type": "other", "type_other": "Liferaft cradle", "next_service_date": _in(-2)},
    ]
    alerts = scan_safety_equipment(items, BOATS, TODAY)
    by_id = {a.id: a for a in alerts}
    assert set(by_id) == {"safety-exp-s1", "safety-svc-s2"}
    assert by_id["safety-exp-s1"].title == "Flares expires"
    assert by_id["safety-exp-s1"].type == "document_expiry"
    assert by_id["safety-svc-s2"].title == "Liferaft cradle service due"
    assert by_id["safety-svc-s2"].severity == Severity.overdue


def test_sort_by_severity_then_due_date():
    alerts = [
        _alert("a", Severity.urgent, "2024-02-01"),
        _alert("b", Severity.overdue, "2024-03-01"),
        _alert("c", Severity.urgent, "2024-01-01"),
    ]
    assert [a.id for a in sort_alerts(alerts)] == ["b", "c", "a"]


def test_alerts_without_due_date_keep_arrival_order_within_severity():
    alerts = [
        _alert("h1", Severity.upcoming),
        _alert("h2", Severity.upcoming),
        _alert("i1", Severity.info),
        _alert("o1", Severity.overdue),
    ]
    assert [a.id for a in sort_alerts(alerts)] == ["o1", "h1", "h2", "i1"]
