"""Result types — the contract between generator, HTTP boundary, export and dashboard.

Field names are snake_case in Python and camelCase on the wire
(``margin_pct`` ↔ ``marginPct``).  Dump with ``model_dump(by_alias=True)``
whenever the data leaves the process.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for every model that is serialised into an API payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ═══════════════════════════════════════════════════════════════════════════
# Generator outputs
# ═══════════════════════════════════════════════════════════════════════════

class KpiSnapshot(WireModel):
    """Aggregate monthly figures."""

    revenue: int
    costs: int
    profit: int
    """revenue − costs, exactly."""
    margin_pct: float
    """100 × profit / revenue, rounded to one decimal (0 when revenue is 0)."""


class VehicleMetrics(WireModel):
    """One vehicle's monthly profitability."""

    plate: str
    model: str
    profit: int
    margin_pct: float


class DriverMetrics(WireModel):
    """One driver's monthly performance."""

    name: str
    vehicle: str
    """Plate of the assigned vehicle."""
    experience: int
    profit: int
    efficiency: int
    """Percent, 60..94."""
    fuel_consumption: int
    """Litres per 100 km, 25..34."""
    safety_rating: int
    """Stars, 3..5."""
    score: int
    status: Literal["active", "attention", "critical"]


class ProfitTrendPoint(WireModel):
    """Profit of a single month in a trailing series."""

    month: str
    label: str
    """Display label, e.g. ``Aug 2023``."""
    profit: int


class TrendIndicator(WireModel):
    """Direction and magnitude of a month-over-month change."""

    type: Literal["up", "down", "stable"]
    value: str
    """Signed percentage with one decimal, e.g. ``+8.9%``."""


# ═══════════════════════════════════════════════════════════════════════════
# Charts
# ═══════════════════════════════════════════════════════════════════════════

class ChartSeries(WireModel):
    """Labelled numeric series plus the trend of its headline value."""

    labels: list[str]
    data: list[int]
    trend: TrendIndicator


class ChartsSummary(WireModel):
    total_revenue: int
    total_costs: int
    avg_margin: float
    best_vehicle: str


class ChartsData(WireModel):
    """All chart series for one month."""

    profit_trend: ChartSeries
    expenses_breakdown: ChartSeries
    vehicles_performance: ChartSeries
    summary: ChartsSummary


# ═══════════════════════════════════════════════════════════════════════════
# Analytics
# ═══════════════════════════════════════════════════════════════════════════

class Insight(WireModel):
    icon: str
    title: str
    description: str
    type: Literal["success", "warning"]


class Recommendation(WireModel):
    icon: str
    title: str
    description: str
    category: str


class Alert(WireModel):
    icon: str
    message: str
    severity: Literal["critical", "warning"]


class AnalyticsReport(WireModel):
    """Template-driven insights, static recommendations and threshold alerts."""

    insights: list[Insight]
    recommendations: list[Recommendation]
    alerts: list[Alert] = Field(default_factory=list)
