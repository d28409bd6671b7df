"""Vehicle catalog and per-vehicle economics."""

from pydantic import BaseModel, Field


class VehicleSpec(BaseModel):
    """One truck in the fixed fleet catalog."""

    plate: str = Field(description="Registration plate; also the vehicle identifier")
    model: str = Field(description="Make / model label")


class VehicleEconomics(BaseModel):
    """Constants turning a vehicle seed into profit and revenue."""

    seed_step: int = Field(default=1_000, ge=1, description="Seed offset between consecutive catalog entries")
    base_profit: int = Field(default=180_000, ge=0)
    profit_spread: int = Field(default=120_000, gt=0)
    revenue_overhead: int = Field(
        default=50_000, ge=0,
        description="Minimum gap between vehicle revenue and vehicle profit",
    )
    revenue_overhead_spread: int = Field(default=30_000, gt=0)


DEFAULT_VEHICLES: tuple[VehicleSpec, ...] = (
    VehicleSpec(plate="А123БВ77", model="МАЗ-6312"),
    VehicleSpec(plate="В456ГД78", model="КАМАЗ-65117"),
    VehicleSpec(plate="Е789ЖЗ99", model="Volvo FH"),
    VehicleSpec(plate="К012ИЙ50", model="Scania R450"),
    VehicleSpec(plate="М345КЛ77", model="Mercedes Actros"),
    VehicleSpec(plate="Н678МН78", model="MAN TGX"),
)
