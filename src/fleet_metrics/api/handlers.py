"""Action routing table — maps ``action`` names to generator calls.

Every handler takes the parsed :class:`ActionQuery` plus the service
settings and returns a payload model; :func:`envelope` turns it into the
``{"ok": true, ...}`` response body.  Handlers never touch the request.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from operator import attrgetter
from typing import Any, Literal

from pydantic import BaseModel, Field

from fleet_metrics.api.errors import ApiError, bad_month, month_required
from fleet_metrics.api.insights import build_analytics
from fleet_metrics.config.settings import ApiSettings
from fleet_metrics.engine.charts import build_charts
from fleet_metrics.engine.drivers import compute_drivers, rank_drivers
from fleet_metrics.engine.kpi import compute_kpi
from fleet_metrics.engine.months import is_valid_month
from fleet_metrics.engine.vehicles import compute_vehicles
from fleet_metrics.models.results import (
    AnalyticsReport,
    ChartsData,
    DriverMetrics,
    KpiSnapshot,
    VehicleMetrics,
    WireModel,
)

# Wire name → attribute on VehicleMetrics.
VEHICLE_SORT_FIELDS: dict[str, str] = {
    "profit": "profit",
    "marginPct": "margin_pct",
}


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


# ═══════════════════════════════════════════════════════════════════════════
# Query
# ═══════════════════════════════════════════════════════════════════════════

class ActionQuery(BaseModel):
    """Normalised query parameters shared by all actions."""

    month: str | None = None
    sort: str = "profit"
    order: Literal["asc", "desc"] = "desc"
    limit: int = Field(default=50, ge=1)
    offset: int = Field(default=0, ge=0)

    @classmethod
    def from_params(
        cls,
        settings: ApiSettings,
        month: str | None = None,
        sort: str | None = None,
        order: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> ActionQuery:
        """Validate the month and clamp paging to the configured bounds."""
        month = month or None
        if month is not None and not is_valid_month(month):
            raise bad_month()

        page_size = settings.default_page_size if limit is None else limit
        return cls(
            month=month,
            sort=sort or "profit",
            order="asc" if (order or "").lower() == "asc" else "desc",
            limit=max(1, min(page_size, settings.max_page_size)),
            offset=max(0, offset or 0),
        )

    def require_month(self) -> str:
        if self.month is None:
            raise month_required()
        return self.month


# ═══════════════════════════════════════════════════════════════════════════
# Payloads
# ═══════════════════════════════════════════════════════════════════════════

class HealthPayload(WireModel):
    status: str
    version: str
    timestamp: str
    services: dict[str, str]


class ReadinessPayload(WireModel):
    status: Literal["ready"]
    version: str
    timestamp: str
    services: dict[str, str]


class DashboardPayload(WireModel):
    kpi: KpiSnapshot
    vehicles: list[VehicleMetrics]
    period: str
    generated_at: str = Field(alias="generated_at")


class Pagination(WireModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class SortSpec(WireModel):
    field: str
    order: str


class VehiclesPayload(WireModel):
    vehicles: list[VehicleMetrics]
    pagination: Pagination
    sort: SortSpec
    period: str


class ChartsPayload(ChartsData):
    period: str


class AnalyticsPayload(AnalyticsReport):
    period: str


class DriversPayload(WireModel):
    drivers: list[DriverMetrics]
    top_performers: list[DriverMetrics]
    period: str


# ═══════════════════════════════════════════════════════════════════════════
# Handlers
# ═══════════════════════════════════════════════════════════════════════════

def handle_health(query: ActionQuery, settings: ApiSettings) -> HealthPayload:
    return HealthPayload(
        status="healthy",
        version=settings.version,
        timestamp=utc_timestamp(),
        services={name: "operational" for name in DATA_ACTIONS},
    )


def handle_readiness(query: ActionQuery, settings: ApiSettings) -> ReadinessPayload:
    # The generator has no external dependencies, so it is ready once imported.
    return ReadinessPayload(
        status="ready",
        version=settings.version,
        timestamp=utc_timestamp(),
        services={"coordinator": "online", "generator": "online"},
    )


def handle_dashboard(query: ActionQuery, settings: ApiSettings) -> DashboardPayload:
    month = query.require_month()
    return DashboardPayload(
        kpi=compute_kpi(month),
        vehicles=compute_vehicles(month),
        period=month,
        generated_at=utc_timestamp(),
    )


def handle_vehicles(query: ActionQuery, settings: ApiSettings) -> VehiclesPayload:
    month = query.require_month()
    if query.sort not in VEHICLE_SORT_FIELDS:
        raise ApiError(400, "bad_sort", f"Sort by one of: {', '.join(VEHICLE_SORT_FIELDS)}")

    vehicles = sorted(
        compute_vehicles(month),
        key=attrgetter(VEHICLE_SORT_FIELDS[query.sort]),
        reverse=query.order == "desc",
    )
    total = len(vehicles)
    page = vehicles[query.offset:query.offset + query.limit]

    return VehiclesPayload(
        vehicles=page,
        pagination=Pagination(
            total=total,
            limit=query.limit,
            offset=query.offset,
            has_more=query.offset + query.limit < total,
        ),
        sort=SortSpec(field=query.sort, order=query.order),
        period=month,
    )


def handle_charts(query: ActionQuery, settings: ApiSettings) -> ChartsPayload:
    month = query.require_month()
    charts = build_charts(month)
    return ChartsPayload(**dict(charts), period=month)


def handle_analytics(query: ActionQuery, settings: ApiSettings) -> AnalyticsPayload:
    month = query.require_month()
    report = build_analytics(month)
    return AnalyticsPayload(**dict(report), period=month)


def handle_drivers(query: ActionQuery, settings: ApiSettings) -> DriversPayload:
    month = query.require_month()
    ranked = rank_drivers(compute_drivers(month))
    return DriversPayload(drivers=ranked, top_performers=ranked[:3], period=month)


# ═══════════════════════════════════════════════════════════════════════════
# Routing table
# ═══════════════════════════════════════════════════════════════════════════

ActionHandler = Callable[[ActionQuery, ApiSettings], BaseModel]


@dataclass(frozen=True)
class Action:
    name: str
    handler: ActionHandler
    description: str


ACTIONS: dict[str, Action] = {
    action.name: action
    for action in (
        Action("health", handle_health, "Liveness and service status"),
        Action("readiness", handle_readiness, "Readiness of backing services"),
        Action("dashboard", handle_dashboard, "KPI snapshot and vehicle ranking"),
        Action("vehicles", handle_vehicles, "Sortable, paginated vehicle list"),
        Action("charts", handle_charts, "Profit trend, expenses and vehicle charts"),
        Action("analytics", handle_analytics, "Insights, recommendations and alerts"),
        Action("drivers", handle_drivers, "Driver roster and top performers"),
    )
}

DATA_ACTIONS = ("dashboard", "vehicles", "charts", "analytics", "drivers")


def resolve_action(name: str | None) -> Action:
    action = ACTIONS.get(name or "")
    if action is None:
        raise ApiError(404, "unknown_action", f"Available actions: {', '.join(ACTIONS)}")
    return action


def envelope(payload: BaseModel | dict[str, Any]) -> dict[str, Any]:
    """Success body: ``{"ok": true, **payload}`` with camelCase keys."""
    body = payload.model_dump(mode="json", by_alias=True) if isinstance(payload, BaseModel) else dict(payload)
    return {"ok": True, **body}
