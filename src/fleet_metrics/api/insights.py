"""Analytics text — insights, recommendations and alerts for a month.

The texts are fixed Russian templates filled from the generated numbers;
there is no analytics model behind them.
"""

from __future__ import annotations

from fleet_metrics.engine.kpi import compute_kpi, previous_month_kpi
from fleet_metrics.engine.rounding import round_half_up
from fleet_metrics.engine.vehicles import compute_vehicles
from fleet_metrics.models.results import Alert, AnalyticsReport, Insight, KpiSnapshot, Recommendation, VehicleMetrics

LOW_VEHICLE_MARGIN_PCT = 50.0
CRITICAL_MARGIN_PCT = 40.0
COST_OVERRUN_RATIO = 1.2

RECOMMENDATIONS: tuple[Recommendation, ...] = (
    Recommendation(
        icon="🔧",
        title="Техническое обслуживание",
        description="Провести диагностику ТС с низкой эффективностью для выявления технических проблем",
        category="maintenance",
    ),
    Recommendation(
        icon="🗺️",
        title="Оптимизация маршрутов",
        description="Внедрить систему планирования маршрутов для снижения расхода топлива на 10-15%",
        category="optimization",
    ),
    Recommendation(
        icon="🎓",
        title="Обучение водителей",
        description="Организовать курсы экономичного вождения для повышения эффективности",
        category="training",
    ),
    Recommendation(
        icon="📊",
        title="Мониторинг в реальном времени",
        description="Установить GPS-трекеры для контроля расхода топлива и стиля вождения",
        category="monitoring",
    ),
)


def _percent_change(current: float, previous: float) -> float:
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def _best_vehicle_insight(vehicles: list[VehicleMetrics]) -> Insight:
    if not vehicles:
        description = "Нет данных по ТС за период"
    else:
        best = vehicles[0]
        description = f"ТС {best.plate} показало прибыль {best.profit} руб. с маржой {best.margin_pct}%"
    return Insight(icon="🏆", title="Лучшая машина месяца", description=description, type="success")


def _low_margin_insight(vehicles: list[VehicleMetrics]) -> Insight:
    plates = [v.plate for v in vehicles if v.margin_pct < LOW_VEHICLE_MARGIN_PCT]
    return Insight(
        icon="⚠️",
        title="Требует внимания",
        description="ТС с низкой маржой: " + (", ".join(plates) if plates else "нет"),
        type="warning",
    )


def _profit_trend_insight(kpi: KpiSnapshot, prev: KpiSnapshot) -> Insight:
    grew = kpi.profit > prev.profit
    change = abs(round_half_up(_percent_change(kpi.profit, prev.profit), 1))
    return Insight(
        icon="📈",
        title="Общий тренд",
        description=(
            f"Прибыль {'выросла' if grew else 'снизилась'} на {change}% "
            f"по сравнению с прошлым месяцем"
        ),
        type="success" if grew else "warning",
    )


def build_alerts(kpi: KpiSnapshot, prev: KpiSnapshot) -> list[Alert]:
    """Threshold alerts: critically low margin, month-over-month cost overrun."""
    alerts: list[Alert] = []

    if kpi.margin_pct < CRITICAL_MARGIN_PCT:
        alerts.append(Alert(
            icon="🚨",
            message=f"Критически низкая маржа: {kpi.margin_pct}%",
            severity="critical",
        ))

    if kpi.costs > prev.costs * COST_OVERRUN_RATIO:
        overrun = round_half_up(_percent_change(kpi.costs, prev.costs), 1)
        alerts.append(Alert(
            icon="⚠️",
            message=f"Превышение расходов на {overrun}%",
            severity="warning",
        ))

    return alerts


def build_analytics(month: str) -> AnalyticsReport:
    """Insights, recommendations and alerts for *month*."""
    kpi = compute_kpi(month)
    prev = previous_month_kpi(month)
    vehicles = compute_vehicles(month)

    return AnalyticsReport(
        insights=[
            _best_vehicle_insight(vehicles),
            _low_margin_insight(vehicles),
            _profit_trend_insight(kpi, prev),
        ],
        recommendations=list(RECOMMENDATIONS),
        alerts=build_alerts(kpi, prev),
    )
