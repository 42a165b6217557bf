"""
Scenario calculation service.

Turns shared per-location and per-vessel forecasts into one scenario's
vessel requirement series. Each call reads its inputs and returns a new
ScenarioResult; nothing is shared between scenarios, so callers may run
scenarios in any order or in parallel.
"""

import math
from typing import Optional

import structlog

from config import settings
from config.forecasting import DEFAULT_SCENARIO_DEFINITIONS
from models.forecast import ForecastDemand, VesselCapabilityForecast
from models.history import FacilityType
from models.inject import Inject
from models.scenario import ForecastPeriod, ForecastScenario, ScenarioResult
from models.validation import ValidationWarning, WarningCode
from services.capability_forecast_service import CapabilityForecastService
from services.inject_service import InjectService

logger = structlog.get_logger(__name__)


def vessels_needed(deliveries: float, average_capability: float) -> int:
    """
    Vessels needed to cover a delivery volume.

    ceil(deliveries / average_capability); 0 when capability is 0.
    """
    if average_capability <= 0:
        return 0
    return math.ceil(deliveries / average_capability)


def growth_factor(rate: float, month_index: int) -> float:
    """Linear growth: 1 + rate × i, with i starting at 1."""
    return 1 + rate * month_index


def create_default_scenarios(
    time_horizon: Optional[int] = None,
    active_injects: Optional[list[str]] = None,
) -> list[ForecastScenario]:
    """
    Base case, optimistic and conservative planning scenarios.

    Args:
        time_horizon: Forecast months (default: settings.default_forecast_months)
        active_injects: Inject ids activated in every default scenario
    """
    horizon = time_horizon or settings.default_forecast_months
    return [
        ForecastScenario(
            **definition,
            time_horizon=horizon,
            active_injects=list(active_injects or []),
        )
        for definition in DEFAULT_SCENARIO_DEFINITIONS
    ]


class ScenarioService:
    """
    Per-scenario aggregation and vessel requirement calculation.

    demand(i)      = Σ location forecasts × (1 + demand_growth × i), then demand injects
    capability(i)  = Σ vessel forecasts × (1 + capability_growth × i), then reductions
    required(i)    = ceil(demand(i) / average vessel capability)
    gap(i)         = required(i) - ceil(capability(i) / average vessel capability)
    """

    def __init__(
        self,
        inject_service: Optional[InjectService] = None,
        capability_service: Optional[CapabilityForecastService] = None,
        log=None,
    ):
        self.logger = log or logger
        self.inject_service = inject_service or InjectService(log=self.logger)
        self.capability_service = capability_service or CapabilityForecastService(log=self.logger)

    def calculate_scenario(
        self,
        scenario: ForecastScenario,
        location_forecasts: list[ForecastDemand],
        capability_forecasts: list[VesselCapabilityForecast],
        injects: list[Inject],
        forecast_months: list[str],
    ) -> ScenarioResult:
        """
        Calculate one scenario over its own horizon.

        Args:
            scenario: Growth assumptions and active inject ids
            location_forecasts: Demand forecasts built over this scenario's horizon,
                so confidence decays to the floor at its last month
            capability_forecasts: Shared vessel forecasts
            injects: Every known inject; only scenario.active_injects are used
            forecast_months: Month keys available; the first time_horizon are used

        Returns:
            ScenarioResult
        """
        months = forecast_months[:scenario.time_horizon]
        warnings: list[ValidationWarning] = []

        # Demand aggregation with linear growth
        base_demand: dict[str, float] = {}
        drilling_demand: dict[str, float] = {}
        production_demand: dict[str, float] = {}
        for i, month_key in enumerate(months, start=1):
            factor = growth_factor(scenario.demand_growth_rate, i)
            base_demand[month_key] = max(0.0, self._sum_month(location_forecasts, month_key) * factor)
            drilling_demand[month_key] = round(max(0.0, self._sum_month(
                location_forecasts, month_key, FacilityType.DRILLING) * factor), 3)
            production_demand[month_key] = round(max(0.0, self._sum_month(
                location_forecasts, month_key, FacilityType.PRODUCTION) * factor), 3)

        # Capability aggregation with linear growth
        base_capability: dict[str, float] = {}
        for i, month_key in enumerate(months, start=1):
            total = sum(f.monthly_capability.get(month_key, 0.0) for f in capability_forecasts)
            base_capability[month_key] = max(0.0, total * growth_factor(scenario.capability_growth_rate, i))

        # Injects
        scenario_injects, resolve_warnings = self.inject_service.resolve_scenario_injects(scenario, injects)
        warnings.extend(resolve_warnings)

        demand_application = self.inject_service.apply(base_demand, scenario_injects, scenario_id=scenario.id)
        capability_application = self.capability_service.apply_capability_reductions(
            base_capability, scenario_injects, scenario_id=scenario.id
        )
        warnings.extend(demand_application.warnings)
        warnings.extend(capability_application.warnings)

        total_demand = {m: round(v, 3) for m, v in demand_application.adjusted_forecast.items()}
        total_capability = {m: round(v, 3) for m, v in capability_application.adjusted_forecast.items()}

        # Vessel requirements
        capabilities = [f.average_capability for f in capability_forecasts]
        average_capability = round(sum(capabilities) / len(capabilities), 3) if capabilities else 0.0

        required = {m: vessels_needed(d, average_capability) for m, d in total_demand.items()}
        implied = {m: vessels_needed(c, average_capability) for m, c in total_capability.items()}
        gaps = {m: required[m] - implied[m] for m in months}

        utilization = [
            total_demand[m] / total_capability[m] if total_capability[m] > 0 else 0.0
            for m in months
        ]
        average_utilization = round(sum(utilization) / len(utilization), 4) if utilization else 0.0

        peak_demand_month = ""
        if total_demand:
            peak_value = max(total_demand.values())
            peak_demand_month = next(m for m in months if total_demand[m] == peak_value)

        confidence_score = self._confidence_score(location_forecasts, months)
        meets_threshold = confidence_score >= scenario.confidence_threshold
        if not meets_threshold:
            warnings.append(ValidationWarning(
                code=WarningCode.BELOW_CONFIDENCE_THRESHOLD,
                message=(
                    f"Scenario '{scenario.id}' confidence {confidence_score:.2f} "
                    f"is below its threshold {scenario.confidence_threshold:.2f}"
                ),
                scenario_id=scenario.id,
                details={
                    "confidence_score": confidence_score,
                    "confidence_threshold": scenario.confidence_threshold,
                },
            ))

        result = ScenarioResult(
            scenario=scenario,
            forecast_period=ForecastPeriod(
                start_month=months[0] if months else "",
                end_month=months[-1] if months else "",
                total_months=len(months),
            ),
            location_forecasts=location_forecasts,
            total_demand_forecast=total_demand,
            drilling_demand_forecast=drilling_demand,
            production_demand_forecast=production_demand,
            vessel_capability_forecasts=capability_forecasts,
            total_capability_forecast=total_capability,
            average_vessel_capability=average_capability,
            vessel_requirements_by_month=required,
            current_vessels_implied_by_month=implied,
            vessel_gap_by_month=gaps,
            applied_injects=self._merge_ids(
                demand_application.applied_inject_ids,
                capability_application.applied_inject_ids,
            ),
            inject_impact_by_month=demand_application.impact_by_month,
            capability_impact_by_month=capability_application.impact_by_month,
            average_utilization=average_utilization,
            peak_demand_month=peak_demand_month,
            max_vessel_gap=max(gaps.values()) if gaps else 0,
            recommended_fleet_size=max(required.values()) if required else 0,
            confidence_score=confidence_score,
            meets_confidence_threshold=meets_threshold,
            warnings=warnings,
        )

        self.logger.info(
            "scenario_calculated",
            scenario_id=scenario.id,
            months=len(months),
            recommended_fleet_size=result.recommended_fleet_size,
            max_vessel_gap=result.max_vessel_gap,
            applied_injects=len(result.applied_injects),
            warnings=len(warnings),
        )
        return result

    @staticmethod
    def _sum_month(
        location_forecasts: list[ForecastDemand],
        month_key: str,
        facility_type: Optional[FacilityType] = None,
    ) -> float:
        return sum(
            f.monthly_forecast.get(month_key, 0.0)
            for f in location_forecasts
            if facility_type is None or f.facility_type == facility_type
        )

    @staticmethod
    def _confidence_score(location_forecasts: list[ForecastDemand], months: list[str]) -> float:
        """Mean confidence across every location and scenario month; 0 with no locations."""
        values = [
            f.confidence[m]
            for f in location_forecasts
            for m in months
            if m in f.confidence
        ]
        if not values:
            return 0.0
        return round(sum(values) / len(values), 4)

    @staticmethod
    def _merge_ids(first: list[str], second: list[str]) -> list[str]:
        return first + [inject_id for inject_id in second if inject_id not in first]


# Singleton instance
_scenario_service: Optional[ScenarioService] = None


def get_scenario_service() -> ScenarioService:
    """Get or create ScenarioService instance."""
    global _scenario_service
    if _scenario_service is None:
        _scenario_service = ScenarioService()
    return _scenario_service
