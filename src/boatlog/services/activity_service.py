from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping

from fastapi import Request
from pymongo import DESCENDING

from src.boatlog.db.mongo import MongoCollections
from src.boatlog.schemas.activity import ActivityItemOut
from src.boatlog.services.severity import as_calendar_date
from src.boatlog.state import get_state

logger = logging.getLogger(__name__)

RECENT_LOGS_LIMIT = 20
RECENT_CHECKS_LIMIT = 10
RECENT_UPLOADS_LIMIT = 10
DEFAULT_FEED_LIMIT = 15


def _component_names(cols: MongoCollections, rows: Iterable[dict]) -> Dict[str, str]:
    """Look up names for the components referenced by rows (one query, not one per row)."""
    ids = sorted({r["component_id"] for r in rows if r.get("component_id")})
    if not ids:
        return {}
    cursor = cols.components.find({"id": {"$in": ids}}, projection={"_id": 0, "id": 1, "name": 1})
    return {c["id"]: c.get("name") for c in cursor}


def _log_items(logs: List[dict], boat_names: Mapping[str, str], component_names: Mapping[str, str]) -> List[ActivityItemOut]:
    items: List[ActivityItemOut] = []
    for log in logs:
        when = as_calendar_date(log.get("date"))
        if when is None:
            continue
        component_id = log.get("component_id") or None
        items.append(
            ActivityItemOut(
                id=f"log-{log['id']}",
                type="maintenance",
                title=log.get("maintenance_item") or "Maintenance",
                description=log.get("description") or None,
                date=when,
                boatId=log["boat_id"],
                boatName=boat_names.get(log["boat_id"]),
                componentId=component_id,
                componentName=component_names.get(component_id) if component_id else None,
                cost=log.get("cost") or None,
                currency=log.get("currency") or None,
            )
        )
    return items


def _check_items(checks: List[dict], boat_names: Mapping[str, str], component_names: Mapping[str, str]) -> List[ActivityItemOut]:
    items: List[ActivityItemOut] = []
    for check in checks:
        when = as_calendar_date(check.get("date"))
        if when is None:
            continue
        component_id = check.get("component_id") or None
        quantity = check.get("quantity")
        items.append(
            ActivityItemOut(
                id=f"check-{check['id']}",
                type="health_check",
                title=check.get("title") or "Health check",
                description=f"Quantity: {quantity}" if quantity else None,
                date=when,
                boatId=check["boat_id"],
                boatName=boat_names.get(check["boat_id"]),
                componentId=component_id,
                componentName=component_names.get(component_id) if component_id else None,
            )
        )
    return items


def _upload_items(docs: List[dict], boat_names: Mapping[str, str]) -> List[ActivityItemOut]:
    items: List[ActivityItemOut] = []
    for doc in docs:
        # Uploads are timestamps; the feed only keeps the calendar day.
        when = as_calendar_date(doc.get("uploaded_at"))
        if when is None:
            continue
        category = doc.get("category") or ""
        items.append(
            ActivityItemOut(
                id=f"doc-{doc['id']}",
                type="document",
                title=f"Uploaded: {doc.get('name')}",
                description=(category[:1].upper() + category[1:]) or None,
                date=when,
                boatId=doc["boat_id"],
                boatName=boat_names.get(doc["boat_id"]),
            )
        )
    return items


# PUBLIC_INTERFACE
def merge_activity(groups: Iterable[List[ActivityItemOut]], limit: int = DEFAULT_FEED_LIMIT) -> List[ActivityItemOut]:
    """
    Merge activity lists into one feed, newest first, capped at limit.

    Items sharing a date keep their input order (logs, then checks, then uploads).
    """
    merged: List[ActivityItemOut] = []
    for group in groups:
        merged.extend(group)
    # sorted() is stable with reverse=True as well.
    merged = sorted(merged, key=lambda item: item.date, reverse=True)
    return merged[: max(0, int(limit))]


# PUBLIC_INTERFACE
def collect_activity(cols: MongoCollections, boats: List[dict], limit: int = DEFAULT_FEED_LIMIT) -> List[ActivityItemOut]:
    """Recent log entries, health checks and document uploads across the given boats."""
    if not boats:
        return []
    boat_ids = [b["id"] for b in boats]
    boat_names = {b["id"]: b.get("name") for b in boats}
    in_boats = {"boat_id": {"$in": boat_ids}}

    logs = list(cols.log_entries.find(in_boats, projection={"_id": 0}).sort("date", DESCENDING).limit(RECENT_LOGS_LIMIT))
    checks = list(
        cols.health_checks.find(in_boats, projection={"_id": 0}).sort("date", DESCENDING).limit(RECENT_CHECKS_LIMIT)
    )
    uploads = list(
        cols.documents.find(in_boats, projection={"_id": 0}).sort("uploaded_at", DESCENDING).limit(RECENT_UPLOADS_LIMIT)
    )

    component_names = _component_names(cols, logs + checks)
    return merge_activity(
        [
            _log_items(logs, boat_names, component_names),
            _check_items(checks, boat_names, component_names),
            _upload_items(uploads, boat_names),
        ],
        limit=limit,
    )


# PUBLIC_INTERFACE
def list_account_activity(request: Request, boats: List[dict]) -> List[ActivityItemOut]:
    """Activity feed across an account's owned boats."""
    state = get_state(request.app)
    return collect_activity(state.mongo.collections(), boats, limit=state.config.activity_feed_limit)
