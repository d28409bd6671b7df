"""Vehicle roster derivation — per-vehicle profit and margin."""

from __future__ import annotations

from collections.abc import Sequence

from fleet_metrics.config.vehicles import DEFAULT_VEHICLES, VehicleEconomics, VehicleSpec
from fleet_metrics.engine.kpi import margin_pct
from fleet_metrics.engine.months import month_seed
from fleet_metrics.models.results import VehicleMetrics


def compute_vehicles(
    month: str,
    catalog: Sequence[VehicleSpec] = DEFAULT_VEHICLES,
    economics: VehicleEconomics | None = None,
) -> list[VehicleMetrics]:
    """Vehicles for *month*, most profitable first.

    Each catalog entry ``i`` is driven by ``seed + i × seed_step``.  The sort
    is stable, so equal profits keep catalog order.
    """
    eco = economics or VehicleEconomics()
    seed = month_seed(month)

    vehicles: list[VehicleMetrics] = []
    for i, spec in enumerate(catalog):
        vehicle_seed = seed + i * eco.seed_step
        profit = eco.base_profit + vehicle_seed % eco.profit_spread
        revenue = profit + eco.revenue_overhead + vehicle_seed % eco.revenue_overhead_spread
        vehicles.append(VehicleMetrics(
            plate=spec.plate,
            model=spec.model,
            profit=profit,
            margin_pct=margin_pct(profit, revenue),
        ))

    return sorted(vehicles, key=lambda v: v.profit, reverse=True)


def total_vehicle_profit(vehicles: Sequence[VehicleMetrics]) -> int:
    return sum(v.profit for v in vehicles)
