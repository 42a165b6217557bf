"""
Forecast request and aggregate result schemas.

VesselForecastResult is what presentation and reporting collaborators
consume: every scenario, the designated base scenario, cross-scenario
ranges, recommendations, risk months and a flat export projection.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from config.forecasting import BASE_SCENARIO_ID
from models.base import FrozenSchema, ValueRange
from models.fleet import CoreFleetBaseline, FleetGapAnalysis, create_default_core_fleet_baseline
from models.history import LocationDemandSeries, VesselCapabilitySeries
from models.inject import Inject
from models.recommendation import ManagementRecommendation
from models.scenario import ForecastScenario, ScenarioResult
from models.validation import ValidationWarning
from utils.month_utils import MONTH_KEY_PATTERN


class ForecastStatus(str, Enum):
    COMPLETED = "completed"
    INPUT_TOO_LARGE = "input_too_large"


class ComputationBudget(FrozenSchema):
    """Caller-configured upper bounds, checked before any computation."""

    max_scenarios: int = Field(10, ge=1)
    max_locations: int = Field(200, ge=1)
    max_vessels: int = Field(100, ge=1)
    max_horizon_months: int = Field(36, ge=1)
    max_cells: int = Field(200_000, ge=1, description="scenarios × (locations + vessels) × horizon")


class BudgetViolation(FrozenSchema):
    limit: str
    allowed: int
    requested: int


class ForecastRequest(FrozenSchema):
    """Everything one forecast run needs. analysis_date is the caller's 'now'."""

    analysis_date: date
    location_demands: list[LocationDemandSeries] = Field(default_factory=list)
    vessel_capabilities: list[VesselCapabilitySeries] = Field(default_factory=list)
    injects: list[Inject] = Field(default_factory=list)
    scenarios: list[ForecastScenario] = Field(default_factory=list)
    core_fleet_baseline: CoreFleetBaseline = Field(default_factory=create_default_core_fleet_baseline)
    base_scenario_id: str = BASE_SCENARIO_ID
    forecast_start_month: Optional[str] = Field(None, pattern=MONTH_KEY_PATTERN)
    seasonal_adjustment: Optional[bool] = Field(
        None, description="Override Settings.seasonal_adjustment_enabled"
    )
    budget: Optional[ComputationBudget] = None


class SensitivityAnalysis(FrozenSchema):
    """Change in base peak vessel requirement per 1% change of an input."""

    demand_sensitivity: float = 0.0
    capability_sensitivity: float = 0.0


class DecisionPoint(FrozenSchema):
    month: str
    decision: str
    rationale: str


class ScenarioSummaryRow(FrozenSchema):
    scenario_id: str
    scenario: str
    recommended_fleet_size: int
    max_gap: int
    average_utilization: float
    core_fleet_baseline: int
    plus_up_months: int
    shed_opportunities: int
    confidence_score: float
    estimated_charter_cost: Decimal


class MonthlyBreakdownRow(FrozenSchema):
    month: str
    total_demand: float
    total_capability: float
    required_vessels: int
    core_fleet_baseline: int
    gap: int
    utilization_pct: float
    inject_impact: float
    confidence: float
    recommendation: str


class RecommendationRow(FrozenSchema):
    id: str
    type: str
    priority: str
    title: str
    target_month: str
    vessel_impact: int
    cost_impact: Optional[Decimal] = None
    confidence: float


class ForecastExport(FrozenSchema):
    """Flat tabular projection for reporting layers."""

    forecast_summary: list[ScenarioSummaryRow] = Field(default_factory=list)
    monthly_breakdown: list[MonthlyBreakdownRow] = Field(default_factory=list)
    recommendations: list[RecommendationRow] = Field(default_factory=list)


class VesselForecastResult(FrozenSchema):
    """Aggregate output of one forecast run."""

    status: ForecastStatus = ForecastStatus.COMPLETED
    analysis_date: date
    historical_months: int = 0
    forecast_months: int = 0
    core_fleet_baseline: CoreFleetBaseline

    scenarios: list[ScenarioResult] = Field(default_factory=list)
    base_scenario: Optional[ScenarioResult] = None
    gap_analyses: list[FleetGapAnalysis] = Field(default_factory=list)

    # Cross-scenario analysis
    demand_range: ValueRange = Field(default_factory=ValueRange)
    vessel_requirement_range: ValueRange = Field(default_factory=ValueRange)
    recommendations: list[ManagementRecommendation] = Field(default_factory=list)

    # Risk analysis
    high_risk_months: list[str] = Field(default_factory=list)
    low_utilization_months: list[str] = Field(default_factory=list)
    sensitivity_analysis: SensitivityAnalysis = Field(default_factory=SensitivityAnalysis)
    decision_points: list[DecisionPoint] = Field(default_factory=list)

    # Audit surface
    validation_warnings: list[ValidationWarning] = Field(default_factory=list)
    budget_violations: list[BudgetViolation] = Field(default_factory=list)

    export_data: ForecastExport = Field(default_factory=ForecastExport)

    def gap_analysis_for(self, scenario_id: str) -> Optional[FleetGapAnalysis]:
        return next((g for g in self.gap_analyses if g.scenario_id == scenario_id), None)
