from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


APP_DB_NAME = "boatlog"


@dataclass(frozen=True)
class MongoCollections:
    """Convenience wrapper for app collections."""

    users: Collection
    boats: Collection
    # Crew access grants (boat_id, user_id).
    boat_users: Collection

    components: Collection
    documents: Collection
    log_entries: Collection
    health_checks: Collection
    safety_equipment: Collection
    # Spare/installed parts, optionally tied to a component.
    parts: Collection


class MongoManager:
    """
    MongoDB connection manager.

    Maintains one MongoClient for the app's storage DB. A pre-built client can be
    handed in (tests pass a mongomock client); otherwise one is created lazily.
    """

    def __init__(self, app_mongo_uri: str, db_name: str = APP_DB_NAME, client: Optional[MongoClient] = None):
        self._app_mongo_uri = app_mongo_uri
        self._db_name = db_name
        self._app_client: Optional[MongoClient] = client
        self._lock = RLock()

    def connect_app(self) -> None:
        """Initialize app Mongo client if needed."""
        with self._lock:
            if self._app_client is not None:
                return
            # MongoClient is thread-safe and manages internal pooling.
            self._app_client = MongoClient(self._app_mongo_uri, connect=True)

    # PUBLIC_INTERFACE
    def ping(self) -> bool:
        """Ping the configured MongoDB to validate connectivity."""
        try:
            if self._app_client is None:
                self.connect_app()
            assert self._app_client is not None
            self._app_client.admin.command("ping")
            return True
        except PyMongoError:
            logger.exception("Mongo ping failed (PyMongoError)")
            return False

    def close(self) -> None:
        """Close the app Mongo client."""
        with self._lock:
            if self._app_client is not None:
                try:
                    self._app_client.close()
                except Exception:
                    logger.exception("Error closing app MongoClient")
                self._app_client = None

    def app_db(self) -> Database:
        """Return the app database handle."""
        if self._app_client is None:
            self.connect_app()
        assert self._app_client is not None
        return self._app_client[self._db_name]

    def collections(self) -> MongoCollections:
        """Return app collections."""
        db = self.app_db()
        return MongoCollections(
            users=db["users"],
            boats=db["boats"],
            boat_users=db["boat_users"],
            components=db["boat_components"],
            documents=db["documents"],
            log_entries=db["log_entries"],
            health_checks=db["health_checks"],
            safety_equipment=db["safety_equipment"],
            parts=db["parts"],
        )

    def init_indexes(self) -> None:
        """Create required indexes (idempotent)."""
        cols = self.collections()

        # ---- Accounts ----
        cols.users.create_index([("id", ASCENDING)], unique=True, name="idx_users_id")
        cols.users.create_index([("auth_id", ASCENDING)], unique=True, name="idx_users_auth_id")

        # ---- Boats / crew ----
        cols.boats.create_index([("id", ASCENDING)], unique=True, name="idx_boats_id")
        cols.boats.create_index([("owner_id", ASCENDING)], name="idx_boats_owner")
        cols.boat_users.create_index(
            [("boat_id", ASCENDING), ("user_id", ASCENDING)], unique=True, name="idx_boat_users_boat_user"
        )

        # ---- Boat-scoped children ----
        cols.components.create_index([("id", ASCENDING)], unique=True, name="idx_components_id")
        cols.components.create_index([("boat_id", ASCENDING)], name="idx_components_boat")

        cols.documents.create_index([("id", ASCENDING)], unique=True, name="idx_documents_id")
        # Common queries: expiring docs per boat, recent uploads per boat.
        cols.documents.create_index([("boat_id", ASCENDING), ("expiry_date", ASCENDING)], name="idx_documents_boat_expiry")
        cols.documents.create_index([("boat_id", ASCENDING), ("uploaded_at", DESCENDING)], name="idx_documents_boat_uploaded")

        cols.log_entries.create_index([("id", ASCENDING)], unique=True, name="idx_logs_id")
        cols.log_entries.create_index([("boat_id", ASCENDING), ("date", DESCENDING)], name="idx_logs_boat_date")

        cols.health_checks.create_index([("id", ASCENDING)], unique=True, name="idx_checks_id")
        cols.health_checks.create_index([("boat_id", ASCENDING), ("date", DESCENDING)], name="idx_checks_boat_date")

        cols.safety_equipment.create_index([("id", ASCENDING)], unique=True, name="idx_safety_id")
        cols.safety_equipment.create_index([("boat_id", ASCENDING)], name="idx_safety_boat")

        cols.parts.create_index([("id", ASCENDING)], unique=True, name="idx_parts_id")
        cols.parts.create_index([("boat_id", ASCENDING), ("name", ASCENDING)], name="idx_parts_boat_name")
