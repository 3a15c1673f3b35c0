"""Spend summaries over costed maintenance log entries.

Only entries with a positive cost count. Year and month buckets are calendar buckets
relative to `today`; the monthly series always covers the last 12 months, oldest first.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from fastapi import Request
from pymongo import DESCENDING

from src.boatlog.db.mongo import MongoCollections
from src.boatlog.schemas.costs import (
    ComponentCostOut,
    CostCategoryOut,
    CostMonthOut,
    CostSummaryOut,
    RecentExpenseOut,
)
from src.boatlog.services.severity import as_calendar_date
from src.boatlog.state import get_state

logger = logging.getLogger(__name__)

RECENT_EXPENSES_LIMIT = 10
MONTHS_IN_SERIES = 12

CATEGORY_COLORS = {
    "Engine Service": "#3B82F6",
    "Generator Service": "#10B981",
    "A/C Service": "#06B6D4",
    "General Maintenance": "#8B5CF6",
    "Dry Docking": "#F59E0B",
    "Hull Cleaning": "#6366F1",
    "Electronics": "#EC4899",
    "Safety Equipment": "#EF4444",
    "Parts & Supplies": "#14B8A6",
    "Other": "#6B7280",
}

# First match wins, so the order matters ("engine filter" is engine service, not parts).
_CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Engine Service", ("engine", "oil change", "impeller")),
    ("Generator Service", ("generator",)),
    ("A/C Service", ("a/c", "ac ", "air con", "chiller")),
    ("Dry Docking", ("dry dock", "drydock", "haul")),
    ("Hull Cleaning", ("hull", "antifoul", "bottom")),
    ("Electronics", ("electronic", "radar", "gps", "radio")),
    ("Safety Equipment", ("safety", "life", "fire", "flare")),
    ("Parts & Supplies", ("part", "filter", "belt", "zinc")),
)


# PUBLIC_INTERFACE
def category_for_item(maintenance_item: Optional[str]) -> str:
    """Infer a spend category from free-text maintenance item wording."""
    text = (maintenance_item or "Other").lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(k in text for k in keywords):
            return category
    return "General Maintenance"


def _month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def _shift_month(d: date, months: int) -> date:
    """First day of the month `months` away from d's month (negative goes back)."""
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def _costed(logs: Iterable[dict]) -> List[Tuple[dict, date, float]]:
    rows = []
    for log in logs:
        try:
            cost = float(log.get("cost") or 0)
        except (TypeError, ValueError):
            continue
        when = as_calendar_date(log.get("date"))
        if cost <= 0 or when is None:
            continue
        rows.append((log, when, cost))
    return rows


# PUBLIC_INTERFACE
def summarize_costs(logs: Iterable[dict], today: date, default_currency: str = "AED") -> CostSummaryOut:
    """Totals, category split and a 12-month series for the given log entries."""
    rows = _costed(logs)
    last_month = _shift_month(today, -1)

    totals = {"all": 0.0, "year": 0.0, "last_year": 0.0, "month": 0.0, "last_month": 0.0}
    by_category: Dict[str, List[float]] = {}
    by_month: Dict[str, float] = {}
    currencies: Counter = Counter()

    for log, when, cost in rows:
        currencies[log.get("currency") or default_currency] += 1
        totals["all"] += cost
        if when.year == today.year:
            totals["year"] += cost
            if when.month == today.month:
                totals["month"] += cost
        elif when.year == today.year - 1:
            totals["last_year"] += cost
        if (when.year, when.month) == (last_month.year, last_month.month):
            totals["last_month"] += cost

        bucket = by_category.setdefault(category_for_item(log.get("maintenance_item")), [0.0, 0])
        bucket[0] += cost
        bucket[1] += 1

        key = _month_key(when)
        by_month[key] = by_month.get(key, 0.0) + cost

    categories = sorted(
        (
            CostCategoryOut(name=name, total=total, count=count, color=CATEGORY_COLORS.get(name, CATEGORY_COLORS["Other"]))
            for name, (total, count) in by_category.items()
        ),
        key=lambda c: c.total,
        reverse=True,
    )

    series = []
    for offset in range(MONTHS_IN_SERIES - 1, -1, -1):
        first = _shift_month(today, -offset)
        key = _month_key(first)
        series.append(CostMonthOut(month=key, label=first.strftime("%b %y"), total=by_month.get(key, 0.0)))

    # Counter.most_common keeps first-seen order on ties.
    currency = currencies.most_common(1)[0][0] if currencies else default_currency

    return CostSummaryOut(
        totalAllTime=totals["all"],
        totalThisYear=totals["year"],
        totalLastYear=totals["last_year"],
        totalThisMonth=totals["month"],
        totalLastMonth=totals["last_month"],
        currency=currency,
        averagePerMonth=totals["all"] / max(len(by_month), 1),
        entryCount=len(rows),
        byCategory=categories,
        byMonth=series,
    )


# PUBLIC_INTERFACE
def component_costs(logs: Iterable[dict], components: Mapping[str, dict]) -> List[ComponentCostOut]:
    """Spend per linked component, largest first, with cost per running hour where hours are known."""
    acc: Dict[str, List[float]] = {}
    for log, _when, cost in _costed(logs):
        component_id = log.get("component_id")
        if not component_id or component_id not in components:
            continue
        bucket = acc.setdefault(component_id, [0.0, 0])
        bucket[0] += cost
        bucket[1] += 1

    out = []
    for component_id, (total, count) in acc.items():
        comp = components[component_id]
        hours = comp.get("current_hours")
        out.append(
            ComponentCostOut(
                id=component_id,
                name=comp.get("name"),
                type=comp.get("type"),
                category=comp.get("category"),
                totalCost=total,
                entryCount=count,
                currentHours=hours,
                costPerHour=total / hours if hours else None,
            )
        )
    return sorted(out, key=lambda c: c.total_cost, reverse=True)


# PUBLIC_INTERFACE
def recent_expenses(
    logs: Iterable[dict], components: Mapping[str, dict], default_currency: str = "AED", limit: int = RECENT_EXPENSES_LIMIT
) -> List[RecentExpenseOut]:
    """The first `limit` costed entries, in input order (callers pass newest first)."""
    out = []
    for log, when, cost in _costed(logs)[:limit]:
        comp = components.get(log.get("component_id") or "")
        out.append(
            RecentExpenseOut(
                id=log["id"],
                date=when,
                maintenanceItem=log.get("maintenance_item") or "",
                cost=cost,
                currency=log.get("currency") or default_currency,
                componentName=comp.get("name") if comp else None,
            )
        )
    return out


def _costed_logs(cols: MongoCollections, boat_ids: List[str]) -> List[dict]:
    q: Dict[str, Any] = {"boat_id": {"$in": boat_ids}, "cost": {"$gt": 0}}
    return list(cols.log_entries.find(q, projection={"_id": 0}).sort("date", DESCENDING))


# PUBLIC_INTERFACE
def list_account_costs(request: Request, boats: List[dict], today: date) -> CostSummaryOut:
    """Cost summary across an account's owned boats."""
    state = get_state(request.app)
    logs = _costed_logs(state.mongo.collections(), [b["id"] for b in boats]) if boats else []
    return summarize_costs(logs, today, default_currency=state.config.default_currency)


# PUBLIC_INTERFACE
def boat_costs(
    request: Request, boat: dict, today: date
) -> Tuple[CostSummaryOut, List[ComponentCostOut], List[RecentExpenseOut]]:
    """Summary, per-component split and recent expenses for one boat."""
    state = get_state(request.app)
    cols = state.mongo.collections()
    currency = state.config.default_currency

    logs = _costed_logs(cols, [boat["id"]])
    ids = sorted({log["component_id"] for log in logs if log.get("component_id")})
    components = {c["id"]: c for c in cols.components.find({"id": {"$in": ids}}, projection={"_id": 0})} if ids else {}
    logger.debug("Cost breakdown for boatId=%s over %s entries", boat["id"], len(logs))

    return (
        summarize_costs(logs, today, default_currency=currency),
        component_costs(logs, components),
        recent_expenses(logs, components, default_currency=currency),
    )
