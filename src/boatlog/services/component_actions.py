from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional

from fastapi import Request

from src.boatlog.db.mongo import MongoCollections
from src.boatlog.services.cadence import completion_updates, dismiss_updates
from src.boatlog.schemas.common import new_id, utc_now
from src.boatlog.state import get_state

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "Service"
QUICK_COMPLETE_DESCRIPTION = "Quick completed from alerts"


# PUBLIC_INTERFACE
def apply_dismiss(cols: MongoCollections, component: dict, alert_type: str, today: date) -> Dict[str, Any]:
    """Push the targeted cadence of an ownership-checked component forward (or clear it) and persist."""
    updates = dismiss_updates(component, alert_type, today)
    cols.components.update_one({"id": component["id"]}, {"$set": dict(updates, updated_at=utc_now())})
    logger.info("Dismissed %s alert for componentId=%s updates=%s", alert_type, component["id"], updates)
    return updates


# PUBLIC_INTERFACE
def apply_quick_complete(
    cols: MongoCollections,
    component: dict,
    account_id: str,
    today: date,
    service_name: Optional[str] = None,
    currency: str = "AED",
) -> Dict[str, Any]:
    """
    Record a completed service on an ownership-checked component.

    Inserts one log entry, then refreshes last/next service fields on the component.
    The two writes are not transactional: if the second fails the log entry remains.
    """
    current_hours = component.get("current_hours")
    title = component.get("scheduled_service_name") or (service_name or "").strip() or DEFAULT_SERVICE_NAME
    cols.log_entries.insert_one(
        {
            "id": new_id(),
            "boat_id": component["boat_id"],
            "component_id": component["id"],
            "maintenance_item": title,
            "date": today.isoformat(),
            "description": QUICK_COMPLETE_DESCRIPTION,
            "hours_at_service": current_hours,
            "cost": None,
            "currency": currency,
            "created_by": account_id,
            "created_at": utc_now(),
        }
    )

    updates = completion_updates(component, today)
    cols.components.update_one({"id": component["id"]}, {"$set": dict(updates, updated_at=utc_now())})
    logger.info("Quick-completed '%s' for componentId=%s updates=%s", title, component["id"], updates)
    return updates


# PUBLIC_INTERFACE
def dismiss_alert(request: Request, component: dict, alert_type: str, today: date) -> Dict[str, Any]:
    """Request-scoped wrapper around apply_dismiss."""
    return apply_dismiss(get_state(request.app).mongo.collections(), component, alert_type, today)


# PUBLIC_INTERFACE
def quick_complete(
    request: Request, component: dict, account_id: str, today: date, service_name: Optional[str] = None
) -> Dict[str, Any]:
    """Request-scoped wrapper around apply_quick_complete."""
    state = get_state(request.app)
    return apply_quick_complete(
        state.mongo.collections(),
        component,
        account_id,
        today,
        service_name=service_name,
        currency=state.config.default_currency,
    )
