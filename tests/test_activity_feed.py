from __future__ import annotations

from datetime import date, timedelta

import httpx
import pytest

from src.boatlog.schemas.activity import ActivityItemOut
from src.boatlog.schemas.common import utc_today
from src.boatlog.services.activity_service import merge_activity

OTHER_SUBJECT = "other-subject"


def _item(item_id: str, when: date, kind: str = "maintenance") -> ActivityItemOut:
    return ActivityItemOut(id=item_id, type=kind, title=item_id, date=when, boatId="b1")


def test_merge_activity_orders_newest_first_and_caps():
    logs = [_item(f"log-{i}", date(2024, 1, 1) + timedelta(days=i)) for i in range(20)]
    checks = [_item(f"check-{i}", date(2024, 2, 1) + timedelta(days=i), "health_check") for i in range(10)]

    merged = merge_activity([logs, checks], limit=15)

    assert len(merged) == 15
    assert merged[0].id == "check-9"
    dates = [m.date for m in merged]
    assert dates == sorted(dates, reverse=True)


def test_merge_activity_keeps_group_order_on_equal_dates():
    same_day = date(2024, 3, 3)
    merged = merge_activity(
        [
            [_item("log-a", same_day), _item("log-b", same_day)],
            [_item("check-a", same_day, "health_check")],
            [_item("doc-a", same_day, "document")],
        ]
    )
    assert [m.id for m in merged] == ["log-a", "log-b", "check-a", "doc-a"]


def test_merge_activity_with_no_input():
    assert merge_activity([[], [], []]) == []


@pytest.mark.anyio
async def test_activity_is_capped_and_mixes_sources(
    async_client: httpx.AsyncClient, auth_headers, owner, create_boat, create_component
):
    boat = await create_boat("Sea Breeze")
    engine = await create_component(boat["id"], name="Port Engine")
    headers = auth_headers()
    today = utc_today()

    for i in range(12):
        res = await async_client.post(
            f"/api/boats/{boat['id']}/logs",
            json={
                "maintenance_item": f"Job {i}",
                "date": (today - timedelta(days=i + 1)).isoformat(),
                "component_id": engine["id"],
                "cost": 100,
            },
            headers=headers,
        )
        assert res.status_code == 201, res.text
    for i in range(5):
        res = await async_client.post(
            f"/api/boats/{boat['id']}/health-checks",
            json={
                "title": f"Oil level {i}",
                "check_type": "oil_level",
                "date": (today - timedelta(days=2 * i + 1)).isoformat(),
                "quantity": "3L",
            },
            headers=headers,
        )
        assert res.status_code == 201, res.text
    res = await async_client.post(
        f"/api/boats/{boat['id']}/documents", json={"name": "Registration", "category": "registration"}, headers=headers
    )
    assert res.status_code == 201

    res = await async_client.get("/api/activity", headers=headers)
    assert res.status_code == 200
    activity = res.json()["activity"]

    assert len(activity) == 15
    dates = [a["date"] for a in activity]
    assert dates == sorted(dates, reverse=True)

    upload = activity[0]
    assert upload["type"] == "document"
    assert upload["title"] == "Uploaded: Registration"
    assert upload["description"] == "Registration"
    assert upload["date"] == today.isoformat()

    latest_log = next(a for a in activity if a["type"] == "maintenance")
    assert latest_log["title"] == "Job 0"
    assert latest_log["componentName"] == "Port Engine"
    assert latest_log["boatName"] == "Sea Breeze"
    assert latest_log["cost"] == 100
    assert latest_log["currency"] == "AED"

    check = next(a for a in activity if a["type"] == "health_check")
    assert check["description"] == "Quantity: 3L"
    assert check["id"].startswith("check-")


@pytest.mark.anyio
async def test_activity_only_covers_owned_boats(
    async_client: httpx.AsyncClient, auth_headers, owner, other, create_boat
):
    theirs = await create_boat("Theirs", subject=OTHER_SUBJECT)
    res = await async_client.post(
        f"/api/boats/{theirs['id']}/logs", json={"maintenance_item": "Hull clean"}, headers=auth_headers(OTHER_SUBJECT)
    )
    assert res.status_code == 201

    res = await async_client.get("/api/activity", headers=auth_headers())
    assert res.status_code == 200
    assert res.json() == {"activity": []}

    res = await async_client.get("/api/activity", headers=auth_headers(OTHER_SUBJECT))
    assert [a["title"] for a in res.json()["activity"]] == ["Hull clean"]


@pytest.mark.anyio
async def test_activity_requires_auth(async_client: httpx.AsyncClient):
    res = await async_client.get("/api/activity")
    assert res.status_code == 401


@pytest.mark.anyio
async def test_health_check_without_quantity_has_no_description(
    async_client: httpx.AsyncClient, auth_headers, cols, owner, create_boat
):
    boat = await create_boat()
    headers = auth_headers()
    res = await async_client.post(f"/api/boats/{boat['id']}/health-checks", json={"title": "Bilge dry"}, headers=headers)
    assert res.status_code == 201, res.text
    assert res.json()["quantity"] is None
    assert cols.health_checks.find_one({"boat_id": boat["id"]})["quantity"] is None

    res = await async_client.get("/api/activity", headers=headers)
    [check] = res.json()["activity"]
    assert check["type"] == "health_check"
    assert check["description"] is None
