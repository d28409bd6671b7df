"""Driver catalog and performance scoring."""

from pydantic import BaseModel, Field


class DriverSpec(BaseModel):
    """One driver in the fixed roster."""

    name: str
    vehicle: str = Field(description="Plate of the assigned vehicle (by value, not by reference)")
    experience: int = Field(ge=0, description="Years of driving experience")


class DriverScoring(BaseModel):
    """Seed ranges, score weights and status thresholds for drivers.

    score = efficiency × w_eff
          + (fuel_reference − fuel) × 2 × w_fuel
          + safety × 20 × w_safety
    """

    seed_step: int = Field(default=500, ge=1)
    base_profit: int = Field(default=150_000, ge=0)
    profit_spread: int = Field(default=100_000, gt=0)

    # --- Raw indicators -----------------------------------------------------
    base_efficiency: int = Field(default=60, description="Efficiency floor (%)")
    efficiency_spread: int = Field(default=35, gt=0, description="Efficiency range → 60..94")
    base_fuel_consumption: int = Field(default=25, description="Fuel floor (l/100 km)")
    fuel_consumption_spread: int = Field(default=10, gt=0, description="Fuel range → 25..34")
    base_safety_rating: int = Field(default=3, description="Safety floor (stars)")
    safety_rating_spread: int = Field(default=3, gt=0, description="Safety range → 3..5")

    # --- Score ----------------------------------------------------------------
    efficiency_weight: float = Field(default=0.4, ge=0)
    fuel_weight: float = Field(default=0.3, ge=0)
    safety_weight: float = Field(default=0.3, ge=0)
    fuel_reference: int = Field(default=40, description="Consumption that scores zero fuel points")

    # --- Status thresholds ------------------------------------------------------
    active_min_efficiency: int = 80
    active_min_safety: int = 4
    attention_min_efficiency: int = 60
    attention_min_safety: int = 3


DEFAULT_DRIVERS: tuple[DriverSpec, ...] = (
    DriverSpec(name="Иванов А.С.", vehicle="А123БВ77", experience=8),
    DriverSpec(name="Петров В.И.", vehicle="В456ГД78", experience=12),
    DriverSpec(name="Сидоров М.П.", vehicle="Е789ЖЗ99", experience=5),
    DriverSpec(name="Козлов Д.А.", vehicle="К012ИЙ50", experience=15),
    DriverSpec(name="Морозов С.В.", vehicle="М345КЛ77", experience=7),
    DriverSpec(name="Волков Н.Р.", vehicle="Н678МН78", experience=10),
)
