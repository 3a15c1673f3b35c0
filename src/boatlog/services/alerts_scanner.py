from __future__ import annotations

import logging
from datetime import date
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Mapping, Optional

from fastapi import Request

from src.boatlog.db.mongo import MongoCollections
from src.boatlog.schemas.alerts import AlertOut
from src.boatlog.services.cadence import DateCadence, HoursCadence
from src.boatlog.services.severity import (
    SEVERITY_RANK,
    UPCOMING_DAYS,
    UPCOMING_HOURS,
    as_calendar_date,
    calculate_hours_severity,
    calculate_severity,
    days_until,
    format_due_in,
    format_hours_due,
)
from src.boatlog.state import get_state

logger = logging.getLogger(__name__)

# Reminder window used for documents that do not carry their own.
DEFAULT_REMINDER_DAYS = 30

SAFETY_TYPE_LABELS = {
    "fire_extinguisher": "Fire Extinguishers",
    "engine_room_fire_system": "Engine Room Fire System",
    "life_jacket": "Life Jackets",
    "life_raft": "Life Raft",
    "flares": "Flares",
    "epirb": "EPIRB",
    "first_aid_kit": "First Aid Kit",
    "life_ring": "Life Ring",
    "fire_blanket": "Fire Blanket",
    "other": "Safety Equipment",
}


def _category_label(category: Optional[str]) -> str:
    if not category:
        return ""
    return category[:1].upper() + category[1:]


# PUBLIC_INTERFACE
def scan_components(components: Iterable[dict], boat_names: Mapping[str, str], today: date) -> List[AlertOut]:
    """
    Emit date- and hours-based service alerts for components.

    A component yields up to two alerts; the two cadences trigger independently. Components
    with neither a next service date nor a complete hours pair are skipped.
    """
    alerts: List[AlertOut] = []
    for comp in components:
        comp_id = comp["id"]
        boat_id = comp["boat_id"]
        name = comp.get("name") or "Component"

        date_cadence = DateCadence.from_component(comp)
        if date_cadence.next_due is not None:
            days = days_until(date_cadence.next_due, today)
            if days is not None and days <= UPCOMING_DAYS:
                alerts.append(
                    AlertOut(
                        id=f"comp-date-{comp_id}",
                        type="maintenance_date",
                        severity=calculate_severity(days),
                        title=f"{name} service due",
                        description="Scheduled maintenance",
                        dueDate=date_cadence.next_due,
                        dueText=format_due_in(days),
                        componentId=comp_id,
                        componentName=name,
                        boatId=boat_id,
                        boatName=boat_names.get(boat_id),
                    )
                )

        hours_cadence = HoursCadence.from_component(comp)
        hours = hours_cadence.hours_until_due()
        if hours is not None and hours <= UPCOMING_HOURS:
            alerts.append(
                AlertOut(
                    id=f"comp-hours-{comp_id}",
                    type="maintenance_hours",
                    severity=calculate_hours_severity(hours),
                    title=f"{name} service due",
                    description="Based on running hours",
                    dueHours=hours_cadence.next_due,
                    currentHours=hours_cadence.current,
                    dueText=format_hours_due(hours, hours_cadence.current),
                    componentId=comp_id,
                    componentName=name,
                    boatId=boat_id,
                    boatName=boat_names.get(boat_id),
                )
            )
    return alerts


# PUBLIC_INTERFACE
def scan_documents(documents: Iterable[dict], boat_names: Mapping[str, str], today: date) -> List[AlertOut]:
    """Emit expiry alerts for documents inside their own reminder window (default 30 days)."""
    alerts: List[AlertOut] = []
    for doc in documents:
        expiry = as_calendar_date(doc.get("expiry_date"))
        if expiry is None:
            continue
        days = days_until(expiry, today)
        window = doc.get("reminder_days") or DEFAULT_REMINDER_DAYS
        if days is None or days > int(window):
            continue
        boat_id = doc["boat_id"]
        alerts.append(
            AlertOut(
                id=f"doc-{doc['id']}",
                type="document_expiry",
                severity=calculate_severity(days),
                title=f"{doc.get('name') or 'Document'} expires",
                description=_category_label(doc.get("category")),
                dueDate=expiry,
                dueText=format_due_in(days),
                documentId=doc["id"],
                boatId=boat_id,
                boatName=boat_names.get(boat_id),
            )
        )
    return alerts


def _safety_label(item: dict) -> str:
    item_type = item.get("type") or "other"
    if item_type == "other" and item.get("type_other"):
        return str(item["type_other"])
    return SAFETY_TYPE_LABELS.get(item_type, item_type)


# PUBLIC_INTERFACE
def scan_safety_equipment(items: Iterable[dict], boat_names: Mapping[str, str], today: date) -> List[AlertOut]:
    """Emit expiry and inspection alerts for safety equipment within 30 days."""
    alerts: List[AlertOut] = []
    for item in items:
        label = _safety_label(item)
        boat_id = item["boat_id"]

        expiry = as_calendar_date(item.get("expiry_date"))
        if expiry is not None:
            days = days_until(expiry, today)
            if days is not None and days <= UPCOMING_DAYS:
                alerts.append(
                    AlertOut(
                        id=f"safety-exp-{item['id']}",
                        type="document_expiry",
                        severity=calculate_severity(days),
                        title=f"{label} expires",
                        description="Safety equipment",
                        dueDate=expiry,
                        dueText=format_due_in(days),
                        boatId=boat_id,
                        boatName=boat_names.get(boat_id),
                    )
                )

        service = as_calendar_date(item.get("next_service_date"))
        if service is not None:
            days = days_until(service, today)
            if days is not None and days <= UPCOMING_DAYS:
                alerts.append(
                    AlertOut(
                        id=f"safety-svc-{item['id']}",
                        type="maintenance_date",
                        severity=calculate_severity(days),
                        title=f"{label} service due",
                        description="Safety equipment inspection",
                        dueDate=service,
                        dueText=format_due_in(days),
                        boatId=boat_id,
                        boatName=boat_names.get(boat_id),
                    )
                )
    return alerts


def _compare_alerts(a: AlertOut, b: AlertOut) -> int:
    rank_diff = SEVERITY_RANK[a.severity] - SEVERITY_RANK[b.severity]
    if rank_diff != 0:
        return rank_diff
    # Due dates only order alerts when both carry one; everything else keeps arrival order.
    if a.due_date is not None and b.due_date is not None:
        return (a.due_date > b.due_date) - (a.due_date < b.due_date)
    return 0


# PUBLIC_INTERFACE
def sort_alerts(alerts: Iterable[AlertOut]) -> List[AlertOut]:
    """Order alerts by severity (overdue first), then by due date where both alerts have one."""
    return sorted(alerts, key=cmp_to_key(_compare_alerts))


def _find_in_boats(collection, boat_ids: List[str], extra: Optional[Dict[str, Any]] = None) -> List[dict]:
    q: Dict[str, Any] = {"boat_id": {"$in": boat_ids}}
    if extra:
        q.update(extra)
    return list(collection.find(q, projection={"_id": 0}))


# PUBLIC_INTERFACE
def collect_account_alerts(cols: MongoCollections, boats: List[dict], today: date) -> List[AlertOut]:
    """Scan components and documents across the given boats and return the sorted feed."""
    if not boats:
        return []
    boat_ids = [b["id"] for b in boats]
    boat_names = {b["id"]: b.get("name") for b in boats}

    components = _find_in_boats(cols.components, boat_ids)
    documents = _find_in_boats(cols.documents, boat_ids, {"expiry_date": {"$ne": None}})

    candidates = scan_components(components, boat_names, today)
    candidates.extend(scan_documents(documents, boat_names, today))
    return sort_alerts(candidates)


# PUBLIC_INTERFACE
def list_account_alerts(request: Request, boats: List[dict], today: date) -> List[AlertOut]:
    """Alert feed across an account's owned boats."""
    cols = get_state(request.app).mongo.collections()
    alerts = collect_account_alerts(cols, boats, today)
    logger.debug("Computed %s alerts across %s boats", len(alerts), len(boats))
    return alerts


# PUBLIC_INTERFACE
def list_boat_alerts(request: Request, boat: dict, today: date) -> List[AlertOut]:
    """Alert feed for one boat, including its safety equipment."""
    cols = get_state(request.app).mongo.collections()
    boat_ids = [boat["id"]]
    boat_names = {boat["id"]: boat.get("name")}

    candidates = scan_components(_find_in_boats(cols.components, boat_ids), boat_names, today)
    candidates.extend(
        scan_documents(_find_in_boats(cols.documents, boat_ids, {"expiry_date": {"$ne": None}}), boat_names, today)
    )
    candidates.extend(scan_safety_equipment(_find_in_boats(cols.safety_equipment, boat_ids), boat_names, today))
    return sort_alerts(candidates)
