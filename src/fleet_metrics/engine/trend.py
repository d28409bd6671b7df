"""Month-over-month trend indicators and the trailing profit series."""

from __future__ import annotations

from fleet_metrics.config.kpi import KpiConfig
from fleet_metrics.engine.kpi import compute_kpi
from fleet_metrics.engine.months import month_label, trailing_months
from fleet_metrics.engine.rounding import round_half_up
from fleet_metrics.models.results import ProfitTrendPoint, TrendIndicator


def compute_trend(current: float, previous: float) -> TrendIndicator:
    """Percentage change from *previous* to *current*.

    A zero baseline has no meaningful percentage and reports ``stable``.
    """
    if previous == 0:
        return TrendIndicator(type="stable", value="0.0%")

    percent = (current - previous) / abs(previous) * 100
    shown = round_half_up(abs(percent), 1)
    if percent > 0:
        return TrendIndicator(type="up", value=f"+{shown:.1f}%")
    if percent < 0:
        return TrendIndicator(type="down", value=f"-{shown:.1f}%")
    return TrendIndicator(type="stable", value="0.0%")


def profit_trend(month: str, periods: int = 6, config: KpiConfig | None = None) -> list[ProfitTrendPoint]:
    """Monthly profit for the *periods* months ending at *month*, oldest first."""
    return [
        ProfitTrendPoint(
            month=key,
            label=month_label(key),
            profit=compute_kpi(key, config).profit,
        )
        for key in trailing_months(month, periods)
    ]


def series_trend(points: list[ProfitTrendPoint]) -> TrendIndicator:
    """Trend between the last two points of a series."""
    if len(points) < 2:
        return TrendIndicator(type="stable", value="0.0%")
    return compute_trend(points[-1].profit, points[-2].profit)
