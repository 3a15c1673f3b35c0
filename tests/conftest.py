from __future__ import annotations

import os
from collections.abc import AsyncIterator, Callable, Iterator
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import httpx
import jwt
import mongomock
import pytest
from pymongo import MongoClient

# The app module reads its config at import time.
os.environ.setdefault("BACKEND_MONGO_URI", "mongodb://localhost:27017")
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["ADMIN_USER_IDS"] = "admin-subject"

TEST_DB_NAME = "boatlog_test"
OWNER_SUBJECT = "owner-subject"
OTHER_SUBJECT = "other-subject"


@pytest.fixture
def mongo_client() -> Iterator[Any]:
    """
    Store client for one test.

    Uses an in-memory mongomock client unless BACKEND_TEST_MONGO_URI points at a real MongoDB,
    in which case the test database is dropped afterwards.
    """
    real_uri = os.getenv("BACKEND_TEST_MONGO_URI")
    if real_uri:
        client = MongoClient(real_uri, connect=True)
        try:
            yield client
        finally:
            client.drop_database(TEST_DB_NAME)
            client.close()
    else:
        yield mongomock.MongoClient()


@pytest.fixture
def app(mongo_client):
    """FastAPI app with its state re-pointed at the per-test store."""
    from src.boatlog.db.mongo import MongoManager
    from src.boatlog.main import app as fastapi_app
    from src.boatlog.state import get_state, init_state

    config = get_state(fastapi_app).config
    init_state(
        fastapi_app,
        config,
        mongo=MongoManager(config.mongo_uri, db_name=TEST_DB_NAME, client=mongo_client),
    )
    return fastapi_app


@pytest.fixture
def cols(app):
    """Direct collection handles for seeding and inspecting the store."""
    from src.boatlog.state import get_state

    return get_state(app).mongo.collections()


@pytest.fixture
async def async_client(app) -> AsyncIterator[httpx.AsyncClient]:
    """Async HTTP client bound to the FastAPI ASGI app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Mint identity-provider style bearer tokens signed with the test secret."""

    def _make(subject: str, email: Optional[str] = None, expires_in: int = 3600, secret: str = "test-secret") -> str:
        claims: Dict[str, Any] = {
            "sub": subject,
            "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        }
        if email:
            claims["email"] = email
        return jwt.encode(claims, secret, algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token) -> Callable[[str], Dict[str, str]]:
    """Build Authorization headers for a subject."""

    def _headers(subject: str = OWNER_SUBJECT) -> Dict[str, str]:
        return {"Authorization": f"Bearer {make_token(subject)}"}

    return _headers


@pytest.fixture
async def owner(async_client: httpx.AsyncClient, auth_headers) -> Dict[str, Any]:
    """Account record for the default test subject (created through the API)."""
    res = await async_client.put("/api/account", headers=auth_headers(OWNER_SUBJECT))
    assert res.status_code == 200, res.text
    return res.json()


@pytest.fixture
async def other(async_client: httpx.AsyncClient, auth_headers) -> Dict[str, Any]:
    """A second, unrelated account."""
    res = await async_client.put("/api/account", headers=auth_headers(OTHER_SUBJECT))
    assert res.status_code == 200, res.text
    return res.json()


@pytest.fixture
async def create_boat(async_client: httpx.AsyncClient, auth_headers) -> Callable[..., Any]:
    """Helper to create a boat via the API and return its JSON."""

    async def _create(name: str = "Sea Breeze", subject: str = OWNER_SUBJECT) -> Dict[str, Any]:
        res = await async_client.post("/api/boats", json={"name": name}, headers=auth_headers(subject))
        assert res.status_code == 201, res.text
        return res.json()

    return _create


@pytest.fixture
async def create_component(async_client: httpx.AsyncClient, auth_headers) -> Callable[..., Any]:
    """Helper to create a component on a boat via the API and return its JSON."""

    async def _create(boat_id: str, subject: str = OWNER_SUBJECT, **fields: Any) -> Dict[str, Any]:
        payload = {"name": "Port Engine"}
        payload.update(fields)
        res = await async_client.post(f"/api/boats/{boat_id}/components", json=payload, headers=auth_headers(subject))
        assert res.status_code == 201, res.text
        return res.json()

    return _create
