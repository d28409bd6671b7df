"""Driver roster derivation — indicators, performance score and status."""

from __future__ import annotations

from collections.abc import Sequence

from fleet_metrics.config.drivers import DEFAULT_DRIVERS, DriverScoring, DriverSpec
from fleet_metrics.engine.months import month_seed
from fleet_metrics.engine.rounding import round_int
from fleet_metrics.models.results import DriverMetrics


def driver_score(
    efficiency: int,
    fuel_consumption: int,
    safety_rating: int,
    scoring: DriverScoring | None = None,
) -> int:
    """Weighted performance score, rounded to an integer."""
    sc = scoring or DriverScoring()
    return round_int(
        efficiency * sc.efficiency_weight
        + (sc.fuel_reference - fuel_consumption) * 2 * sc.fuel_weight
        + safety_rating * 20 * sc.safety_weight
    )


def driver_status(efficiency: int, safety_rating: int, scoring: DriverScoring | None = None) -> str:
    """Three-way classification: ``active`` / ``attention`` / ``critical``."""
    sc = scoring or DriverScoring()
    if efficiency >= sc.active_min_efficiency and safety_rating >= sc.active_min_safety:
        return "active"
    if efficiency >= sc.attention_min_efficiency and safety_rating >= sc.attention_min_safety:
        return "attention"
    return "critical"


def compute_drivers(
    month: str,
    roster: Sequence[DriverSpec] = DEFAULT_DRIVERS,
    scoring: DriverScoring | None = None,
) -> list[DriverMetrics]:
    """Drivers for *month* in roster order."""
    sc = scoring or DriverScoring()
    seed = month_seed(month)

    drivers: list[DriverMetrics] = []
    for i, spec in enumerate(roster):
        driver_seed = seed + i * sc.seed_step
        efficiency = sc.base_efficiency + driver_seed % sc.efficiency_spread
        fuel = sc.base_fuel_consumption + driver_seed % sc.fuel_consumption_spread
        safety = sc.base_safety_rating + driver_seed % sc.safety_rating_spread

        drivers.append(DriverMetrics(
            name=spec.name,
            vehicle=spec.vehicle,
            experience=spec.experience,
            profit=sc.base_profit + driver_seed % sc.profit_spread,
            efficiency=efficiency,
            fuel_consumption=fuel,
            safety_rating=safety,
            score=driver_score(efficiency, fuel, safety, sc),
            status=driver_status(efficiency, safety, sc),
        ))

    return drivers


def rank_drivers(drivers: Sequence[DriverMetrics]) -> list[DriverMetrics]:
    """Best score first; equal scores keep roster order."""
    return sorted(drivers, key=lambda d: d.score, reverse=True)


def top_performers(drivers: Sequence[DriverMetrics], count: int = 3) -> list[DriverMetrics]:
    return rank_drivers(drivers)[:count]
