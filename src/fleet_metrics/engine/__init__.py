"""Engine — deterministic, month-seeded metrics generation."""

from fleet_metrics.engine.months import (
    is_valid_month,
    month_label,
    month_seed,
    previous_month,
    shift_month,
    trailing_months,
)
from fleet_metrics.engine.kpi import compute_kpi, margin_pct, previous_month_kpi, seasonal_factor
from fleet_metrics.engine.vehicles import compute_vehicles
from fleet_metrics.engine.drivers import compute_drivers, driver_score, driver_status, rank_drivers, top_performers
from fleet_metrics.engine.trend import compute_trend, profit_trend
from fleet_metrics.engine.charts import build_charts

__all__ = [
    "is_valid_month",
    "month_seed",
    "month_label",
    "shift_month",
    "previous_month",
    "trailing_months",
    "seasonal_factor",
    "margin_pct",
    "compute_kpi",
    "previous_month_kpi",
    "compute_vehicles",
    "compute_drivers",
    "driver_score",
    "driver_status",
    "rank_drivers",
    "top_performers",
    "compute_trend",
    "profit_trend",
    "build_charts",
]
