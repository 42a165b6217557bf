"""
Pydantic models for validation and serialization.
"""

from models.base import (
    FrozenSchema,
    ValueRange,
)
from models.history import (
    FacilityType,
    LocationDemandSeries,
    VesselCapabilitySeries,
)
from models.forecast import (
    TrendDirection,
    PerformanceTrend,
    TrendFit,
    ForecastDemand,
    VesselCapabilityForecast,
)
from models.inject import (
    InjectImpact,
    InjectType,
    Inject,
    InjectApplication,
)
from models.validation import (
    WarningCode,
    ValidationWarning,
)
from models.scenario import (
    ScenarioType,
    ForecastScenario,
    ForecastPeriod,
    ScenarioResult,
)
from models.fleet import (
    DayRateStructure,
    CoreFleetBaseline,
    FleetGapAnalysis,
    create_default_core_fleet_baseline,
)
from models.recommendation import (
    RecommendationType,
    RecommendationPriority,
    RecommendationStatus,
    Timeframe,
    ManagementRecommendation,
)
from models.result import (
    ForecastStatus,
    ComputationBudget,
    BudgetViolation,
    ForecastRequest,
    SensitivityAnalysis,
    DecisionPoint,
    ScenarioSummaryRow,
    MonthlyBreakdownRow,
    RecommendationRow,
    ForecastExport,
    VesselForecastResult,
)

__all__ = [
    # Base
    "FrozenSchema",
    "ValueRange",

    # History
    "FacilityType",
    "LocationDemandSeries",
    "VesselCapabilitySeries",

    # Forecast
    "TrendDirection",
    "PerformanceTrend",
    "TrendFit",
    "ForecastDemand",
    "VesselCapabilityForecast",

    # Injects
    "InjectImpact",
    "InjectType",
    "Inject",
    "InjectApplication",

    # Validation
    "WarningCode",
    "ValidationWarning",

    # Scenario
    "ScenarioType",
    "ForecastScenario",
    "ForecastPeriod",
    "ScenarioResult",

    # Fleet
    "DayRateStructure",
    "CoreFleetBaseline",
    "FleetGapAnalysis",
    "create_default_core_fleet_baseline",

    # Recommendation
    "RecommendationType",
    "RecommendationPriority",
    "RecommendationStatus",
    "Timeframe",
    "ManagementRecommendation",

    # Result
    "ForecastStatus",
    "ComputationBudget",
    "BudgetViolation",
    "ForecastRequest",
    "SensitivityAnalysis",
    "DecisionPoint",
    "ScenarioSummaryRow",
    "MonthlyBreakdownRow",
    "RecommendationRow",
    "ForecastExport",
    "VesselForecastResult",
]
