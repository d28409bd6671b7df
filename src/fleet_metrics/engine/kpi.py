"""Monthly KPI derivation.

Pure arithmetic: month key → seed → seasonal revenue / costs → KpiSnapshot.
"""

from __future__ import annotations

import math

from fleet_metrics.config.kpi import KpiConfig
from fleet_metrics.engine.months import month_seed, previous_month, split_month
from fleet_metrics.engine.rounding import round_half_up, round_int
from fleet_metrics.models.results import KpiSnapshot


def seasonal_factor(month_number: int, amplitude: float = 0.2) -> float:
    """Multiplier for calendar month 1..12 — a sine wave, 1.0 in January."""
    return 1 + math.sin((month_number - 1) * math.pi / 6) * amplitude


def margin_pct(profit: float, revenue: float) -> float:
    """Profit as a percentage of revenue, one decimal; 0 when revenue is 0."""
    if revenue == 0:
        return 0.0
    return round_half_up(100 * profit / revenue, 1)


def compute_kpi(month: str, config: KpiConfig | None = None) -> KpiSnapshot:
    """Revenue, costs, profit and margin for *month*."""
    cfg = config or KpiConfig()
    seed = month_seed(month)
    _, month_number = split_month(month)
    factor = seasonal_factor(month_number, cfg.seasonal_amplitude)

    revenue = round_int((cfg.base_revenue + seed % cfg.revenue_spread) * factor)
    costs = round_int((cfg.base_costs + seed % cfg.costs_spread) * factor)
    profit = revenue - costs

    return KpiSnapshot(
        revenue=revenue,
        costs=costs,
        profit=profit,
        margin_pct=margin_pct(profit, revenue),
    )


def previous_month_kpi(month: str, config: KpiConfig | None = None) -> KpiSnapshot:
    """KPI snapshot of the calendar month before *month*."""
    return compute_kpi(previous_month(month), config)
