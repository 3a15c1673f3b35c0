from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import Request
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from src.boatlog.db.mongo import MongoCollections
from src.boatlog.schemas.boats import (
    BoatCreate,
    ComponentCreate,
    ComponentUpdate,
    CrewCreate,
    DocumentCreate,
    HealthCheckCreate,
    LogEntryCreate,
    PartCreate,
    PartUpdate,
    SafetyEquipmentCreate,
)
from src.boatlog.schemas.common import new_id, utc_now, utc_today
from src.boatlog.state import get_state

logger = logging.getLogger(__name__)

_NO_ID = {"_id": 0}


class InvalidReference(ValueError):
    """A payload points at an entity that does not belong to the target boat."""


def _cols(request: Request) -> MongoCollections:
    return get_state(request.app).mongo.collections()


# ---- Accounts ----


# PUBLIC_INTERFACE
def get_account_by_auth_id(request: Request, auth_id: str) -> Optional[dict]:
    """Resolve an identity-provider subject to the internal account record."""
    return _cols(request).users.find_one({"auth_id": auth_id}, projection=_NO_ID)


# PUBLIC_INTERFACE
def upsert_account(request: Request, auth_id: str, email: Optional[str], name: Optional[str]) -> dict:
    """Create the caller's account on first sight, or refresh its profile fields."""
    cols = _cols(request)
    existing = cols.users.find_one({"auth_id": auth_id}, projection=_NO_ID)
    if existing:
        changes = {k: v for k, v in (("email", email), ("name", name)) if v is not None}
        if changes:
            cols.users.update_one({"auth_id": auth_id}, {"$set": changes})
            existing.update(changes)
        return existing

    doc = {"id": new_id(), "auth_id": auth_id, "email": email, "name": name, "created_at": utc_now()}
    try:
        cols.users.insert_one(dict(doc))
    except DuplicateKeyError:
        # Concurrent first request for the same subject; the other insert won.
        return cols.users.find_one({"auth_id": auth_id}, projection=_NO_ID) or doc
    logger.info("Created account id=%s for auth subject", doc["id"])
    return doc


# ---- Boat access ----


# PUBLIC_INTERFACE
def list_owned_boats(request: Request, account_id: str) -> List[dict]:
    """Boats owned by the account (crew access excluded)."""
    return list(_cols(request).boats.find({"owner_id": account_id}, projection=_NO_ID).sort("created_at", 1))


# PUBLIC_INTERFACE
def list_accessible_boats(request: Request, account_id: str) -> List[dict]:
    """Boats the account owns or crews on."""
    cols = _cols(request)
    crew_boat_ids = [g["boat_id"] for g in cols.boat_users.find({"user_id": account_id}, projection=_NO_ID)]
    q: Dict[str, Any] = {"$or": [{"owner_id": account_id}, {"id": {"$in": crew_boat_ids}}]}
    return list(cols.boats.find(q, projection=_NO_ID).sort("created_at", 1))


# PUBLIC_INTERFACE
def get_owned_boat(request: Request, account_id: str, boat_id: str) -> Optional[dict]:
    """Return the boat only if the account owns it."""
    return _cols(request).boats.find_one({"id": boat_id, "owner_id": account_id}, projection=_NO_ID)


# PUBLIC_INTERFACE
def get_accessible_boat(request: Request, account_id: str, boat_id: str) -> Optional[dict]:
    """Return the boat if the account owns it or has crew access; None otherwise (existence is not leaked)."""
    cols = _cols(request)
    boat = cols.boats.find_one({"id": boat_id}, projection=_NO_ID)
    if not boat:
        return None
    if boat.get("owner_id") == account_id:
        return boat
    if cols.boat_users.find_one({"boat_id": boat_id, "user_id": account_id}):
        return boat
    return None


# PUBLIC_INTERFACE
def get_owned_component(request: Request, account_id: str, component_id: str) -> Optional[dict]:
    """Return the component only if its boat is owned by the account."""
    cols = _cols(request)
    component = cols.components.find_one({"id": component_id}, projection=_NO_ID)
    if not component:
        return None
    if not cols.boats.find_one({"id": component.get("boat_id"), "owner_id": account_id}):
        return None
    return component


# ---- Boats ----


# PUBLIC_INTERFACE
def create_boat(request: Request, account_id: str, payload: BoatCreate) -> dict:
    """Create a boat owned by the account."""
    now = utc_now()
    doc = payload.model_dump(mode="json")
    doc.update({"id": new_id(), "name": payload.name.strip(), "owner_id": account_id, "created_at": now, "updated_at": now})
    _cols(request).boats.insert_one(dict(doc))
    return doc


# PUBLIC_INTERFACE
def delete_boat(request: Request, account_id: str, boat_id: str) -> bool:
    """Delete an owned boat and everything scoped to it. Returns False if not found/not owned."""
    cols = _cols(request)
    res = cols.boats.delete_one({"id": boat_id, "owner_id": account_id})
    if res.deleted_count == 0:
        return False
    for child in (
        cols.components,
        cols.documents,
        cols.log_entries,
        cols.health_checks,
        cols.safety_equipment,
        cols.parts,
        cols.boat_users,
    ):
        child.delete_many({"boat_id": boat_id})
    logger.info("Deleted boat id=%s with its children", boat_id)
    return True


# ---- Crew ----


# PUBLIC_INTERFACE
def add_crew(request: Request, boat_id: str, payload: CrewCreate) -> Optional[dict]:
    """Grant crew access to an existing account. Returns None if the account does not exist."""
    cols = _cols(request)
    if not cols.users.find_one({"id": payload.user_id}):
        return None
    existing = cols.boat_users.find_one({"boat_id": boat_id, "user_id": payload.user_id}, projection=_NO_ID)
    if existing:
        return existing
    doc = {"id": new_id(), "boat_id": boat_id, "user_id": payload.user_id, "role": payload.role, "created_at": utc_now()}
    cols.boat_users.insert_one(dict(doc))
    return doc


# ---- Components ----


# PUBLIC_INTERFACE
def list_components(request: Request, boat_id: str) -> List[dict]:
    """Components of a boat in creation order."""
    return list(_cols(request).components.find({"boat_id": boat_id}, projection=_NO_ID).sort("created_at", 1))


# PUBLIC_INTERFACE
def create_component(request: Request, boat_id: str, payload: ComponentCreate) -> dict:
    """Create a component on a boat."""
    now = utc_now()
    doc = payload.model_dump(mode="json")
    doc.update({"id": new_id(), "boat_id": boat_id, "name": payload.name.strip(), "created_at": now, "updated_at": now})
    _cols(request).components.insert_one(dict(doc))
    return doc


# PUBLIC_INTERFACE
def update_component(request: Request, component: dict, payload: ComponentUpdate) -> dict:
    """Apply a partial update to a component already resolved through an ownership check."""
    changes = payload.model_dump(mode="json", include=payload.model_fields_set)
    if "name" in changes and changes["name"] is not None:
        changes["name"] = changes["name"].strip()
    changes["updated_at"] = utc_now()
    _cols(request).components.update_one({"id": component["id"]}, {"$set": changes})
    updated = dict(component)
    updated.update(changes)
    return updated


def _check_component_on_boat(cols: MongoCollections, boat_id: str, component_id: Optional[str]) -> None:
    if component_id and not cols.components.find_one({"id": component_id, "boat_id": boat_id}):
        raise InvalidReference("component_id does not belong to this boat")


# ---- Documents ----


# PUBLIC_INTERFACE
def list_documents(request: Request, boat_id: str) -> List[dict]:
    """Documents of a boat, newest upload first."""
    return list(_cols(request).documents.find({"boat_id": boat_id}, projection=_NO_ID).sort("uploaded_at", DESCENDING))


# PUBLIC_INTERFACE
def create_document(request: Request, account_id: str, boat_id: str, payload: DocumentCreate) -> dict:
    """Register document metadata on a boat."""
    doc = payload.model_dump(mode="json")
    doc.update(
        {"id": new_id(), "boat_id": boat_id, "name": payload.name.strip(), "uploaded_by": account_id, "uploaded_at": utc_now()}
    )
    _cols(request).documents.insert_one(dict(doc))
    return doc


# ---- Log entries ----


# PUBLIC_INTERFACE
def list_log_entries(request: Request, boat_id: str) -> List[dict]:
    """Log entries of a boat, most recent service date first."""
    return list(_cols(request).log_entries.find({"boat_id": boat_id}, projection=_NO_ID).sort("date", DESCENDING))


# PUBLIC_INTERFACE
def create_log_entry(request: Request, account_id: str, boat_id: str, payload: LogEntryCreate) -> dict:
    """Append an immutable log entry. Raises InvalidReference for a component from another boat."""
    cols = _cols(request)
    _check_component_on_boat(cols, boat_id, payload.component_id)
    doc = payload.model_dump(mode="json")
    doc.update(
        {
            "id": new_id(),
            "boat_id": boat_id,
            "maintenance_item": payload.maintenance_item.strip(),
            "date": (payload.date or utc_today()).isoformat(),
            "currency": payload.currency or get_state(request.app).config.default_currency,
            "created_by": account_id,
            "created_at": utc_now(),
        }
    )
    cols.log_entries.insert_one(dict(doc))
    return doc


# ---- Health checks ----


# PUBLIC_INTERFACE
def list_health_checks(request: Request, boat_id: str) -> List[dict]:
    """Health checks of a boat, most recent first."""
    return list(_cols(request).health_checks.find({"boat_id": boat_id}, projection=_NO_ID).sort("date", DESCENDING))


# PUBLIC_INTERFACE
def create_health_check(request: Request, account_id: str, boat_id: str, payload: HealthCheckCreate) -> dict:
    """Record an immutable health check. Raises InvalidReference for a component from another boat."""
    cols = _cols(request)
    _check_component_on_boat(cols, boat_id, payload.component_id)
    doc = payload.model_dump(mode="json")
    doc.update(
        {
            "id": new_id(),
            "boat_id": boat_id,
            "title": payload.title.strip(),
            "date": (payload.date or utc_today()).isoformat(),
            "created_by": account_id,
            "created_at": utc_now(),
        }
    )
    cols.health_checks.insert_one(dict(doc))
    return doc


# ---- Safety equipment ----


# PUBLIC_INTERFACE
def list_safety_equipment(request: Request, boat_id: str) -> List[dict]:
    """Safety equipment on a boat in creation order."""
    return list(_cols(request).safety_equipment.find({"boat_id": boat_id}, projection=_NO_ID).sort("created_at", 1))


# PUBLIC_INTERFACE
def create_safety_equipment(request: Request, account_id: str, boat_id: str, payload: SafetyEquipmentCreate) -> dict:
    """Add a safety equipment item to a boat."""
    doc = payload.model_dump(mode="json")
    doc.update({"id": new_id(), "boat_id": boat_id, "created_by": account_id, "created_at": utc_now()})
    _cols(request).safety_equipment.insert_one(dict(doc))
    return doc


# ---- Parts ----


def _with_component_names(cols: MongoCollections, parts: List[dict]) -> List[dict]:
    ids = sorted({p["component_id"] for p in parts if p.get("component_id")})
    names: Dict[str, str] = {}
    if ids:
        cursor = cols.components.find({"id": {"$in": ids}}, projection={"_id": 0, "id": 1, "name": 1})
        names = {c["id"]: c.get("name") for c in cursor}
    return [dict(p, component_name=names.get(p.get("component_id"))) for p in parts]


# PUBLIC_INTERFACE
def list_parts(request: Request, boat_id: str) -> List[dict]:
    """Parts on a boat ordered by name, each with its component's name flattened in."""
    cols = _cols(request)
    parts = list(cols.parts.find({"boat_id": boat_id}, projection=_NO_ID).sort("name", 1))
    return _with_component_names(cols, parts)


# PUBLIC_INTERFACE
def get_owned_part(request: Request, account_id: str, part_id: str) -> Optional[dict]:
    """Return the part only if its boat is owned by the account."""
    cols = _cols(request)
    part = cols.parts.find_one({"id": part_id}, projection=_NO_ID)
    if not part:
        return None
    if not cols.boats.find_one({"id": part.get("boat_id"), "owner_id": account_id}):
        return None
    return part


# PUBLIC_INTERFACE
def create_part(request: Request, account_id: str, boat_id: str, payload: PartCreate) -> dict:
    """Record a part on a boat. Raises InvalidReference for a component from another boat."""
    cols = _cols(request)
    _check_component_on_boat(cols, boat_id, payload.component_id)
    doc = payload.model_dump(mode="json")
    doc.update(
        {"id": new_id(), "boat_id": boat_id, "name": payload.name.strip(), "created_by": account_id, "created_at": utc_now()}
    )
    cols.parts.insert_one(dict(doc))
    return _with_component_names(cols, [doc])[0]


# PUBLIC_INTERFACE
def update_part(request: Request, part: dict, payload: PartUpdate) -> dict:
    """Apply a partial update to an ownership-checked part. Raises InvalidReference like create_part."""
    cols = _cols(request)
    changes = payload.model_dump(mode="json", include=payload.model_fields_set)
    if "name" in changes:
        # A blank or null name keeps the current one.
        changes["name"] = (changes["name"] or "").strip() or part["name"]
    if "component_id" in changes:
        changes["component_id"] = changes["component_id"] or None
        _check_component_on_boat(cols, part["boat_id"], changes["component_id"])
    if changes:
        cols.parts.update_one({"id": part["id"]}, {"$set": changes})
    updated = dict(part)
    updated.update(changes)
    return _with_component_names(cols, [updated])[0]


# PUBLIC_INTERFACE
def delete_part(request: Request, part: dict) -> None:
    """Delete an ownership-checked part."""
    _cols(request).parts.delete_one({"id": part["id"]})


# ---- Admin ----


# PUBLIC_INTERFACE
def collection_counts(request: Request) -> Dict[str, int]:
    """Document counts per collection for the admin dashboard."""
    cols = _cols(request)
    return {
        "users": int(cols.users.count_documents({})),
        "boats": int(cols.boats.count_documents({})),
        "components": int(cols.components.count_documents({})),
        "documents": int(cols.documents.count_documents({})),
        "log_entries": int(cols.log_entries.count_documents({})),
        "health_checks": int(cols.health_checks.count_documents({})),
        "safety_equipment": int(cols.safety_equipment.count_documents({})),
        "parts": int(cols.parts.count_documents({})),
    }
