"""
Business logic services.

Each service handles one stage of the fleet forecast.
"""

from services.demand_forecast_service import DemandForecastService, get_demand_forecast_service
from services.capability_forecast_service import (
    CapabilityForecastService,
    get_capability_forecast_service,
)
from services.inject_service import InjectService, get_inject_service
from services.scenario_service import (
    ScenarioService,
    get_scenario_service,
    create_default_scenarios,
)
from services.gap_analysis_service import GapAnalysisService, get_gap_analysis_service
from services.recommendation_service import RecommendationService, get_recommendation_service
from services.export_service import ExportService, get_export_service
from services.vessel_forecast_service import VesselForecastService, get_vessel_forecast_service

__all__ = [
    "DemandForecastService",
    "get_demand_forecast_service",
    "CapabilityForecastService",
    "get_capability_forecast_service",
    "InjectService",
    "get_inject_service",
    "ScenarioService",
    "get_scenario_service",
    "create_default_scenarios",
    "GapAnalysisService",
    "get_gap_analysis_service",
    "RecommendationService",
    "get_recommendation_service",
    "ExportService",
    "get_export_service",
    "VesselForecastService",
    "get_vessel_forecast_service",
]
