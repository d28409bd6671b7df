"""Result models — generator output contracts."""

from fleet_metrics.models.results import (
    Alert,
    AnalyticsReport,
    ChartSeries,
    ChartsData,
    ChartsSummary,
    DriverMetrics,
    Insight,
    KpiSnapshot,
    ProfitTrendPoint,
    Recommendation,
    TrendIndicator,
    VehicleMetrics,
)

__all__ = [
    "KpiSnapshot",
    "VehicleMetrics",
    "DriverMetrics",
    "ProfitTrendPoint",
    "TrendIndicator",
    "ChartSeries",
    "ChartsSummary",
    "ChartsData",
    "Insight",
    "Recommendation",
    "Alert",
    "AnalyticsReport",
]
