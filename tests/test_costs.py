from __future__ import annotations

from datetime import date, timedelta

import httpx
import pytest

from src.boatlog.schemas.common import utc_today
from src.boatlog.services.costs_service import (
    category_for_item,
    component_costs,
    recent_expenses,
    summarize_costs,
)

TODAY = date(2024, 3, 15)


def _log(log_id: str, when: str, cost, item: str = "Oil change", **fields):
    doc = {"id": log_id, "boat_id": "b1", "date": when, "cost": cost, "maintenance_item": item}
    doc.update(fields)
    return doc


@pytest.mark.parametrize(
    "item,expected",
    [
        ("Port engine oil change", "Engine Service"),
        ("Engine fuel filter", "Engine Service"),
        ("Generator service", "Generator Service"),
        ("AC filter clean", "A/C Service"),
        ("Chiller gas top-up", "A/C Service"),
        ("Annual haul out", "Dry Docking"),
        ("Antifoul", "Hull Cleaning"),
        ("Radar repair", "Electronics"),
        ("Life raft service", "Safety Equipment"),
        ("Replace zincs", "Parts & Supplies"),
        ("Varnish teak", "General Maintenance"),
        (None, "General Maintenance"),
    ],
)
def test_category_for_item(item, expected):
    assert category_for_item(item) == expected


def test_summary_buckets_by_calendar_year_and_month():
    logs = [
        _log("l1", "2024-03-01", 100),
        _log("l2", "2024-02-29", 50),
        _log("l3", "2024-01-01", 25),
        _log("l4", "2023-12-31", 200),
        _log("l5", "2023-03-15", 10),
        _log("l6", "2022-06-01", 1000),
    ]

    summary = summarize_costs(logs, TODAY)

    assert summary.total_all_time == 1385
    assert summary.total_this_year == 175
    assert summary.total_this_month == 100
    assert summary.total_last_month == 50
    assert summary.total_last_year == 210
    assert summary.entry_count == 6
    assert summary.average_per_month == pytest.approx(1385 / 6)


def test_last_month_in_january_is_previous_december():
    logs = [_log("l1", "2023-12-20", 80), _log("l2", "2024-01-05", 20)]

    summary = summarize_costs(logs, date(2024, 1, 10))

    assert summary.total_last_month == 80
    assert summary.total_this_month == 20
    assert summary.total_this_year == 20
    assert summary.total_last_year == 80


def test_monthly_series_covers_last_twelve_months_oldest_first():
    logs = [_log("l1", "2024-03-01", 100), _log("l2", "2023-04-30", 40), _log("l3", "2023-03-31", 999)]

    series = summarize_costs(logs, TODAY).by_month

    assert len(series) == 12
    assert series[0].month == "2023-04"
    assert series[0].label == "Apr 23"
    assert series[0].total == 40
    assert series[-1].month == "2024-03"
    assert series[-1].total == 100
    # March 2023 is outside the window.
    assert sum(m.total for m in series) == 140


def test_uncosted_entries_are_ignored_and_categories_sorted_by_total():
    logs = [
        _log("l1", "2024-03-01", 30, "Hull clean"),
        _log("l2", "2024-03-02", 120, "Engine service"),
        _log("l3", "2024-03-03", 0, "Engine service"),
        _log("l4", "2024-03-04", None, "Engine service"),
        _log("l5", "2024-03-05", 45, "Antifoul"),
    ]

    summary = summarize_costs(logs, TODAY)

    assert summary.entry_count == 3
    assert [(c.name, c.total, c.count) for c in summary.by_category] == [
        ("Engine Service", 120, 1),
        ("Hull Cleaning", 75, 2),
    ]
    assert summary.by_category[0].color == "#3B82F6"


def test_currency_is_the_most_frequent_one():
    logs = [
        _log("l1", "2024-03-01", 10, currency="EUR"),
        _log("l2", "2024-03-02", 10, currency="AED"),
        _log("l3", "2024-03-03", 10, currency="EUR"),
    ]
    assert summarize_costs(logs, TODAY).currency == "EUR"
    assert summarize_costs([], TODAY, default_currency="USD").currency == "USD"


def test_empty_summary():
    summary = summarize_costs([], TODAY)
    assert summary.total_all_time == 0
    assert summary.entry_count == 0
    assert summary.by_category == []
    assert [m.total for m in summary.by_month] == [0] * 12


def test_component_costs_and_cost_per_hour():
    components = {
        "c1": {"id": "c1", "name": "Port Engine", "current_hours": 500},
        "c2": {"id": "c2", "name": "Windlass", "current_hours": None},
    }
    logs = [
        _log("l1", "2024-03-01", 200, component_id="c1"),
        _log("l2", "2024-02-01", 300, component_id="c1"),
        _log("l3", "2024-02-01", 50, component_id="c2"),
        _log("l4", "2024-02-01", 70),
    ]

    rows = component_costs(logs, components)

    assert [(r.id, r.total_cost, r.entry_count) for r in rows] == [("c1", 500, 2), ("c2", 50, 1)]
    assert rows[0].cost_per_hour == 1
    assert rows[1].cost_per_hour is None


def test_recent_expenses_keep_input_order_and_cap():
    components = {"c1": {"id": "c1", "name": "Port Engine"}}
    logs = [_log(f"l{i}", f"2024-02-{28 - i:02d}", 10 + i, component_id="c1") for i in range(12)]

    recent = recent_expenses(logs, components)

    assert len(recent) == 10
    assert recent[0].id == "l0"
    assert recent[0].component_name == "Port Engine"
    assert recent[0].currency == "AED"


@pytest.mark.anyio
async def test_cost_summary_across_owned_boats(async_client: httpx.AsyncClient, auth_headers, owner, create_boat):
    today = utc_today()
    headers = auth_headers()
    first = await create_boat("First")
    second = await create_boat("Second")
    for boat_id, item, cost in ((first["id"], "Engine oil change", 300), (second["id"], "Antifoul", 1200), (second["id"], "Washdown", None)):
        res = await async_client.post(
            f"/api/boats/{boat_id}/logs",
            json={"maintenance_item": item, "cost": cost, "date": today.isoformat()},
            headers=headers,
        )
        assert res.status_code == 201, res.text

    res = await async_client.get("/api/costs", headers=headers)
    assert res.status_code == 200
    summary = res.json()["summary"]
    assert summary["totalAllTime"] == 1500
    assert summary["totalThisMonth"] == 1500
    assert summary["entryCount"] == 2
    assert summary["currency"] == "AED"
    assert [c["name"] for c in summary["byCategory"]] == ["Hull Cleaning", "Engine Service"]
    assert summary["byMonth"][-1]["total"] == 1500


@pytest.mark.anyio
async def test_cost_summary_is_empty_without_boats(async_client: httpx.AsyncClient, auth_headers, owner):
    res = await async_client.get("/api/costs", headers=auth_headers())
    assert res.status_code == 200
    summary = res.json()["summary"]
    assert summary["totalAllTime"] == 0
    assert summary["byCategory"] == []
    assert len(summary["byMonth"]) == 12


@pytest.mark.anyio
async def test_boat_costs_break_down_by_component(
    async_client: httpx.AsyncClient, auth_headers, owner, other, create_boat, create_component
):
    boat = await create_boat("Sea Breeze")
    engine = await create_component(boat["id"], name="Port Engine", current_hours=400)
    headers = auth_headers()
    yesterday = (utc_today() - timedelta(days=1)).isoformat()
    for item, cost, component_id in (("Oil change", 200, engine["id"]), ("Impeller", 200, engine["id"]), ("Fenders", 60, None)):
        res = await async_client.post(
            f"/api/boats/{boat['id']}/logs",
            json={"maintenance_item": item, "cost": cost, "component_id": component_id, "date": yesterday},
            headers=headers,
        )
        assert res.status_code == 201, res.text

    res = await async_client.get(f"/api/boats/{boat['id']}/costs", headers=headers)
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["boat"] == {"id": boat["id"], "name": "Sea Breeze"}
    assert body["summary"]["totalAllTime"] == 460
    assert body["byComponent"] == [
        {
            "id": engine["id"],
            "name": "Port Engine",
            "type": None,
            "category": None,
            "totalCost": 400,
            "entryCount": 2,
            "currentHours": 400,
            "costPerHour": 1,
        }
    ]
    assert len(body["recentExpenses"]) == 3
    assert {e["componentName"] for e in body["recentExpenses"]} == {"Port Engine", None}

    res = await async_client.get(f"/api/boats/{boat['id']}/costs", headers=auth_headers("other-subject"))
    assert res.status_code == 404


@pytest.mark.anyio
async def test_cost_summary_excludes_crewed_boats(async_client: httpx.AsyncClient, auth_headers, owner, other, create_boat):
    boat = await create_boat("Sea Breeze")
    res = await async_client.post(f"/api/boats/{boat['id']}/crew", json={"user_id": other["id"]}, headers=auth_headers())
    assert res.status_code == 201, res.text
    res = await async_client.post(
        f"/api/boats/{boat['id']}/logs", json={"maintenance_item": "Haul out", "cost": 900}, headers=auth_headers()
    )
    assert res.status_code == 201, res.text

    crew = auth_headers("other-subject")
    res = await async_client.get("/api/costs", headers=crew)
    assert res.json()["summary"]["totalAllTime"] == 0

    res = await async_client.get(f"/api/boats/{boat['id']}/costs", headers=crew)
    assert res.status_code == 200
    assert res.json()["summary"]["totalAllTime"] == 900
