"""
Per-location and per-vessel forecast models.

Produced by the demand and capability forecast services from the
historical series; immutable once produced.
"""

from enum import Enum

from pydantic import Field

from models.base import FrozenSchema
from models.history import FacilityType


class TrendDirection(str, Enum):
    """Direction of a demand trend."""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class PerformanceTrend(str, Enum):
    """Direction of a vessel's delivery performance."""
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class TrendFit(FrozenSchema):
    """Ordinary least-squares fit over index positions 1..n."""

    slope: float = 0.0
    intercept: float = 0.0
    r_squared: float = Field(0.0, ge=0, le=1)
    sample_count: int = Field(0, ge=0)

    def predict(self, index: int) -> float:
        return self.intercept + self.slope * index


class ForecastDemand(FrozenSchema):
    """Demand forecast for a single location."""

    location: str
    facility_type: FacilityType = FacilityType.DRILLING
    monthly_forecast: dict[str, float] = Field(
        default_factory=dict, description="Future YYYY-MM -> predicted deliveries (>= 0)"
    )
    confidence: dict[str, float] = Field(
        default_factory=dict, description="Future YYYY-MM -> confidence (0-1, non-increasing)"
    )
    trend_direction: TrendDirection = TrendDirection.STABLE
    seasonal_pattern: dict[str, float] = Field(
        default_factory=dict, description="Q1..Q4 -> multiplier"
    )
    growth_rate: float = Field(0.0, description="Slope relative to historical mean, per month")
    historical_average: float = 0.0
    trend: TrendFit = Field(default_factory=TrendFit)
    notes: str = ""


class VesselCapabilityForecast(FrozenSchema):
    """Capability forecast for a single vessel."""

    vessel_name: str
    monthly_capability: dict[str, float] = Field(
        default_factory=dict, description="Future YYYY-MM -> deliveries after maintenance derate"
    )
    planned_maintenance: dict[str, float] = Field(
        default_factory=dict, description="YYYY-MM -> deliveries lost to planned maintenance"
    )
    utilization_forecast: dict[str, float] = Field(
        default_factory=dict, description="YYYY-MM -> utilization target"
    )
    performance_trend: PerformanceTrend = PerformanceTrend.STABLE
    average_capability: float = 0.0
    trend: TrendFit = Field(default_factory=TrendFit)
    notes: str = ""
