"""Chart series for the dashboard — profit trend, expenses, vehicle performance."""

from __future__ import annotations

from fleet_metrics.engine.kpi import compute_kpi, previous_month_kpi
from fleet_metrics.engine.months import previous_month
from fleet_metrics.engine.rounding import round_int
from fleet_metrics.engine.trend import compute_trend, profit_trend, series_trend
from fleet_metrics.engine.vehicles import compute_vehicles, total_vehicle_profit
from fleet_metrics.models.results import ChartSeries, ChartsData, ChartsSummary

# Share of total monthly costs per expense category.
EXPENSE_SHARES: tuple[tuple[str, float], ...] = (
    ("Топливо", 0.45),
    ("Зарплата", 0.30),
    ("Дороги", 0.15),
    ("Прочее", 0.10),
)


def expenses_breakdown(month: str) -> ChartSeries:
    kpi = compute_kpi(month)
    prev = previous_month_kpi(month)
    return ChartSeries(
        labels=[label for label, _ in EXPENSE_SHARES],
        data=[round_int(kpi.costs * share) for _, share in EXPENSE_SHARES],
        trend=compute_trend(kpi.costs, prev.costs),
    )


def vehicles_performance(month: str) -> ChartSeries:
    vehicles = compute_vehicles(month)
    prev_total = total_vehicle_profit(compute_vehicles(previous_month(month)))
    return ChartSeries(
        labels=[v.plate for v in vehicles],
        data=[v.profit for v in vehicles],
        trend=compute_trend(total_vehicle_profit(vehicles), prev_total),
    )


def build_charts(month: str) -> ChartsData:
    """Every chart series for *month*."""
    kpi = compute_kpi(month)
    vehicles = compute_vehicles(month)
    points = profit_trend(month)

    return ChartsData(
        profit_trend=ChartSeries(
            labels=[p.label for p in points],
            data=[p.profit for p in points],
            trend=series_trend(points),
        ),
        expenses_breakdown=expenses_breakdown(month),
        vehicles_performance=vehicles_performance(month),
        summary=ChartsSummary(
            total_revenue=kpi.revenue,
            total_costs=kpi.costs,
            avg_margin=kpi.margin_pct,
            best_vehicle=vehicles[0].plate if vehicles else "N/A",
        ),
    )
