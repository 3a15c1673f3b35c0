from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import FastAPI

from src.boatlog.config import BackendConfig
from src.boatlog.db.mongo import MongoManager


@dataclass
class AppState:
    """Typed app.state container for shared singletons."""

    config: BackendConfig
    mongo: MongoManager


# PUBLIC_INTERFACE
def init_state(app: FastAPI, config: BackendConfig, mongo: Optional[MongoManager] = None) -> None:
    """Initialize app.state with Mongo manager and config."""
    if mongo is None:
        mongo = MongoManager(config.mongo_uri, db_name=config.mongo_db_name)
    app.state.state = AppState(config=config, mongo=mongo)


# PUBLIC_INTERFACE
def get_state(app: FastAPI) -> AppState:
    """Fetch typed AppState from a FastAPI app."""
    return app.state.state  # type: ignore[attr-defined]
