"""Configuration models — generator constants, catalogs and service settings."""

from fleet_metrics.config.kpi import KpiConfig
from fleet_metrics.config.vehicles import DEFAULT_VEHICLES, VehicleEconomics, VehicleSpec
from fleet_metrics.config.drivers import DEFAULT_DRIVERS, DriverScoring, DriverSpec
from fleet_metrics.config.settings import ApiSettings

__all__ = [
    "KpiConfig",
    "VehicleSpec",
    "VehicleEconomics",
    "DEFAULT_VEHICLES",
    "DriverSpec",
    "DriverScoring",
    "DEFAULT_DRIVERS",
    "ApiSettings",
]
