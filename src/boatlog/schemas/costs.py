from __future__ import annotations

from datetime import date as date_type
from typing import List, Optional

from pydantic import BaseModel, Field


class CostCategoryOut(BaseModel):
    """Spend grouped by a category inferred from the log entry's maintenance item."""

    name: str
    total: float
    count: int
    color: str = Field(..., description="Chart color for the category (hex).")


class CostMonthOut(BaseModel):
    """Spend in one calendar month."""

    month: str = Field(..., description="'YYYY-MM'.")
    label: str = Field(..., description="Short label, e.g. 'Mar 24'.")
    total: float


class CostSummaryOut(BaseModel):
    """Totals over log entries with a positive cost."""

    total_all_time: float = Field(..., alias="totalAllTime")
    total_this_year: float = Field(..., alias="totalThisYear")
    total_last_year: float = Field(..., alias="totalLastYear")
    total_this_month: float = Field(..., alias="totalThisMonth")
    total_last_month: float = Field(..., alias="totalLastMonth")
    currency: str = Field(..., description="Most frequent currency among the counted entries.")
    average_per_month: float = Field(..., alias="averagePerMonth", description="Total over months that have spend.")
    entry_count: int = Field(..., alias="entryCount")
    by_category: List[CostCategoryOut] = Field(..., alias="byCategory", description="Largest total first.")
    by_month: List[CostMonthOut] = Field(..., alias="byMonth", description="Last 12 months, oldest first.")


class ComponentCostOut(BaseModel):
    """Spend attributed to one component."""

    id: str
    name: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    total_cost: float = Field(..., alias="totalCost")
    entry_count: int = Field(..., alias="entryCount")
    current_hours: Optional[float] = Field(default=None, alias="currentHours")
    cost_per_hour: Optional[float] = Field(default=None, alias="costPerHour")


class RecentExpenseOut(BaseModel):
    """One of the most recent costed log entries."""

    id: str
    date: date_type
    maintenance_item: str = Field(..., alias="maintenanceItem")
    cost: float
    currency: str
    component_name: Optional[str] = Field(default=None, alias="componentName")


class CostBoatRef(BaseModel):
    id: str
    name: str


class AccountCostsResponse(BaseModel):
    """Cost summary across the caller's owned boats."""

    summary: CostSummaryOut


class BoatCostsResponse(BaseModel):
    """Cost breakdown for one boat."""

    boat: CostBoatRef
    summary: CostSummaryOut
    by_component: List[ComponentCostOut] = Field(..., alias="byComponent")
    recent_expenses: List[RecentExpenseOut] = Field(..., alias="recentExpenses")
