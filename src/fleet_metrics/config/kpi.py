"""Monthly KPI generation constants."""

from pydantic import BaseModel, Field


class KpiConfig(BaseModel):
    """Base levels and seasonality for the monthly revenue / costs figures."""

    base_revenue: int = Field(default=1_200_000, ge=0, description="Revenue floor before seed perturbation")
    revenue_spread: int = Field(default=400_000, gt=0, description="Seed modulus added on top of base revenue")
    base_costs: int = Field(default=860_000, ge=0, description="Costs floor before seed perturbation")
    costs_spread: int = Field(default=200_000, gt=0, description="Seed modulus added on top of base costs")
    seasonal_amplitude: float = Field(
        default=0.2, ge=0, lt=1.0,
        description="Peak seasonal swing (0.2 = ±20%). Follows a 12-month sine "
                    "starting at zero in January.",
    )
