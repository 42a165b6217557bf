"""
Scenario configuration and per-scenario forecast results.
"""

from enum import Enum

from pydantic import Field

from models.base import FrozenSchema
from models.forecast import ForecastDemand, VesselCapabilityForecast
from models.validation import ValidationWarning


class ScenarioType(str, Enum):
    """Scenario family."""
    BASE_CASE = "base_case"
    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"
    CUSTOM = "custom"


class ForecastScenario(FrozenSchema):
    """Named growth assumptions plus the injects active under them."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    scenario_type: ScenarioType = ScenarioType.CUSTOM
    description: str = ""
    demand_growth_rate: float = Field(0.0, description="Linear monthly demand growth")
    capability_growth_rate: float = Field(0.0, description="Linear monthly capability growth")
    active_injects: list[str] = Field(default_factory=list, description="Inject ids, in order")
    time_horizon: int = Field(..., ge=1, le=120, description="Forecast months")
    confidence_threshold: float = Field(0.6, ge=0, le=1)
    assumptions: list[str] = Field(default_factory=list)


class ForecastPeriod(FrozenSchema):
    start_month: str = ""
    end_month: str = ""
    total_months: int = 0


class ScenarioResult(FrozenSchema):
    """
    Complete forecast for one scenario.

    vessel_gap_by_month is relative to the fleet implied by the capability
    forecast; the baseline-relative gap used for recommendations lives in
    FleetGapAnalysis.
    """

    scenario: ForecastScenario
    forecast_period: ForecastPeriod

    # Demand
    location_forecasts: list[ForecastDemand] = Field(default_factory=list)
    total_demand_forecast: dict[str, float] = Field(default_factory=dict)
    drilling_demand_forecast: dict[str, float] = Field(default_factory=dict)
    production_demand_forecast: dict[str, float] = Field(default_factory=dict)

    # Capability
    vessel_capability_forecasts: list[VesselCapabilityForecast] = Field(default_factory=list)
    total_capability_forecast: dict[str, float] = Field(default_factory=dict)
    average_vessel_capability: float = 0.0

    # Vessel requirements
    vessel_requirements_by_month: dict[str, int] = Field(default_factory=dict)
    current_vessels_implied_by_month: dict[str, int] = Field(default_factory=dict)
    vessel_gap_by_month: dict[str, int] = Field(default_factory=dict)

    # Injects
    applied_injects: list[str] = Field(default_factory=list)
    inject_impact_by_month: dict[str, float] = Field(default_factory=dict)
    capability_impact_by_month: dict[str, float] = Field(default_factory=dict)

    # Analysis
    average_utilization: float = 0.0
    peak_demand_month: str = ""
    max_vessel_gap: int = 0
    recommended_fleet_size: int = 0
    confidence_score: float = 0.0
    meets_confidence_threshold: bool = False

    warnings: list[ValidationWarning] = Field(default_factory=list)

    @property
    def months(self) -> list[str]:
        return list(self.total_demand_forecast)
