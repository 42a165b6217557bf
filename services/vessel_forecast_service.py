"""
Vessel forecast service — runs a complete fleet forecast.

Flow:
1. Validate the scenario set (only invalid call patterns raise)
2. Check the computation budget; oversize input returns a structured
   input_too_large result without computing anything
3. Forecast demand and capability once at the longest scenario horizon
4. Calculate every scenario, measure gaps against the core fleet
5. Recommendations, cross-scenario ranges, sensitivity, decision points
6. Flat export projection
"""

from typing import Optional

import structlog

from config import settings
from config.forecasting import (
    DECISION_POINT_CHANGE_THRESHOLD,
    REVIEW_CHECKPOINT_MONTHS,
    SENSITIVITY_STEP,
)
from exceptions import ForecastConfigurationError, ScenarioNotFoundError
from models.base import ValueRange
from models.fleet import CoreFleetBaseline, FleetGapAnalysis
from models.forecast import ForecastDemand, VesselCapabilityForecast
from models.history import LocationDemandSeries, VesselCapabilitySeries
from models.result import (
    BudgetViolation,
    ComputationBudget,
    DecisionPoint,
    ForecastRequest,
    ForecastStatus,
    SensitivityAnalysis,
    VesselForecastResult,
)
from models.scenario import ScenarioResult
from models.validation import ValidationWarning, WarningCode
from services.capability_forecast_service import CapabilityForecastService
from services.demand_forecast_service import DemandForecastService
from services.export_service import ExportService
from services.gap_analysis_service import GapAnalysisService
from services.inject_service import InjectService
from services.recommendation_service import RecommendationService
from services.scenario_service import ScenarioService
from utils.month_utils import (
    add_months,
    latest_month,
    missing_months,
    month_key_for_date,
    month_range,
)

logger = structlog.get_logger(__name__)


def default_budget() -> ComputationBudget:
    """Budget from settings, used when the request does not carry one."""
    return ComputationBudget(
        max_scenarios=settings.max_scenarios,
        max_locations=settings.max_locations,
        max_vessels=settings.max_vessels,
        max_horizon_months=settings.max_horizon_months,
        max_cells=settings.max_cells,
    )


def check_budget(request: ForecastRequest, budget: ComputationBudget) -> list[BudgetViolation]:
    """
    Compare request size against the budget.

    cells = scenarios × (locations + vessels) × longest horizon
    """
    scenarios = len(request.scenarios)
    locations = len(request.location_demands)
    vessels = len(request.vessel_capabilities)
    horizon = max((s.time_horizon for s in request.scenarios), default=0)
    cells = scenarios * (locations + vessels) * horizon

    checks = [
        ("max_scenarios", budget.max_scenarios, scenarios),
        ("max_locations", budget.max_locations, locations),
        ("max_vessels", budget.max_vessels, vessels),
        ("max_horizon_months", budget.max_horizon_months, horizon),
        ("max_cells", budget.max_cells, cells),
    ]
    return [
        BudgetViolation(limit=name, allowed=allowed, requested=requested)
        for name, allowed, requested in checks
        if requested > allowed
    ]


def resolve_start_month(request: ForecastRequest) -> str:
    """
    First forecast month.

    Explicit start month, else the month after the latest history,
    else the month after the analysis date.
    """
    if request.forecast_start_month:
        return request.forecast_start_month

    history_months = [
        m
        for series in [*request.location_demands, *request.vessel_capabilities]
        for m in series.monthly_deliveries
    ]
    latest = latest_month(history_months)
    if latest:
        return add_months(latest, 1)
    return add_months(month_key_for_date(request.analysis_date), 1)


def history_warnings(
    location_demands: list[LocationDemandSeries],
    vessel_capabilities: list[VesselCapabilitySeries],
) -> list[ValidationWarning]:
    """Data-quality findings on the input history."""
    warnings: list[ValidationWarning] = []

    if not any(s.monthly_deliveries for s in location_demands):
        warnings.append(ValidationWarning(
            code=WarningCode.NO_DEMAND_DATA,
            message="No location demand history supplied; demand forecasts are zero",
            details={"locations": len(location_demands)},
        ))

    if not any(s.monthly_deliveries for s in vessel_capabilities):
        warnings.append(ValidationWarning(
            code=WarningCode.NO_VESSEL_DATA,
            message="No vessel capability history supplied; vessel requirements are zero",
            details={"vessels": len(vessel_capabilities)},
        ))

    named_series = [("location", s.location, s) for s in location_demands] + [
        ("vessel", s.vessel_name, s) for s in vessel_capabilities
    ]
    for kind, name, series in named_series:
        if not series.is_contiguous:
            gaps = missing_months(series.monthly_deliveries)
            warnings.append(ValidationWarning(
                code=WarningCode.NON_CONTIGUOUS_HISTORY,
                message=f"{kind.title()} '{name}' history is missing {len(gaps)} month(s)",
                details={kind: name, "missing_months": gaps},
            ))

    return warnings


class VesselForecastService:
    """
    Fleet forecast orchestration.

    Every collaborator can be injected; by default each one is built
    around this service's logger.
    """

    def __init__(
        self,
        demand_service: Optional[DemandForecastService] = None,
        capability_service: Optional[CapabilityForecastService] = None,
        scenario_service: Optional[ScenarioService] = None,
        gap_service: Optional[GapAnalysisService] = None,
        recommendation_service: Optional[RecommendationService] = None,
        export_service: Optional[ExportService] = None,
        log=None,
    ):
        self.logger = log or logger
        self.demand_service = demand_service or DemandForecastService(log=self.logger)
        self.capability_service = capability_service or CapabilityForecastService(log=self.logger)
        self.scenario_service = scenario_service or ScenarioService(
            inject_service=InjectService(log=self.logger),
            capability_service=self.capability_service,
            log=self.logger,
        )
        self.gap_service = gap_service or GapAnalysisService(log=self.logger)
        self.recommendation_service = recommendation_service or RecommendationService(log=self.logger)
        self.export_service = export_service or ExportService(log=self.logger)

    def validate_request(self, request: ForecastRequest) -> None:
        """
        Reject call patterns the engine cannot run.

        Raises:
            ForecastConfigurationError: Empty scenario set or duplicate ids
            ScenarioNotFoundError: Base scenario not in the set
        """
        if not request.scenarios:
            raise ForecastConfigurationError("At least one scenario is required")

        ids = [s.id for s in request.scenarios]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ForecastConfigurationError(
                "Scenario ids must be unique",
                details={"duplicates": duplicates},
            )

        if request.base_scenario_id not in ids:
            raise ScenarioNotFoundError(request.base_scenario_id)

    def run_forecast(self, request: ForecastRequest) -> VesselForecastResult:
        """
        Run a complete forecast.

        Args:
            request: History, injects, scenarios and core fleet baseline

        Returns:
            VesselForecastResult (status input_too_large when over budget)

        Raises:
            ForecastConfigurationError: Invalid scenario set
            ScenarioNotFoundError: Base scenario missing
        """
        self.validate_request(request)

        budget = request.budget or default_budget()
        violations = check_budget(request, budget)
        horizon = max(s.time_horizon for s in request.scenarios)

        if violations:
            self.logger.warning(
                "forecast_input_too_large",
                violations=[v.limit for v in violations],
            )
            return VesselForecastResult(
                status=ForecastStatus.INPUT_TOO_LARGE,
                analysis_date=request.analysis_date,
                forecast_months=horizon,
                core_fleet_baseline=request.core_fleet_baseline,
                budget_violations=violations,
            )

        start_month = resolve_start_month(request)
        forecast_months = month_range(start_month, horizon)
        historical_months = len({
            m
            for series in [*request.location_demands, *request.vessel_capabilities]
            for m in series.monthly_deliveries
        })

        self.logger.info(
            "forecast_started",
            analysis_date=request.analysis_date.isoformat(),
            scenarios=len(request.scenarios),
            locations=len(request.location_demands),
            vessels=len(request.vessel_capabilities),
            injects=len(request.injects),
            start_month=start_month,
            horizon=horizon,
        )

        warnings = history_warnings(request.location_demands, request.vessel_capabilities)

        # Demand confidence decays over each scenario's own horizon
        demand_by_horizon = {
            h: self.demand_service.forecast_all(
                request.location_demands, forecast_months[:h], request.seasonal_adjustment
            )
            for h in sorted({s.time_horizon for s in request.scenarios})
        }
        # Shared, read-only across scenarios
        capability_forecasts = self.capability_service.forecast_all(
            request.vessel_capabilities, forecast_months
        )

        baseline = request.core_fleet_baseline
        results: list[ScenarioResult] = []
        gap_analyses: list[FleetGapAnalysis] = []
        for scenario in request.scenarios:
            result = self.scenario_service.calculate_scenario(
                scenario, demand_by_horizon[scenario.time_horizon], capability_forecasts,
                request.injects, forecast_months,
            )
            results.append(result)
            gap_analyses.append(self.gap_service.analyze(result, baseline))
            warnings.extend(result.warnings)

        base_index = next(i for i, r in enumerate(results) if r.scenario.id == request.base_scenario_id)
        base_result = results[base_index]
        base_gap = gap_analyses[base_index]

        recommendations = self.recommendation_service.generate(
            results, gap_analyses, baseline, request.base_scenario_id
        )

        sensitivity = self.sensitivity_analysis(
            base_result, base_result.location_forecasts, capability_forecasts, request, forecast_months
        )
        decision_points = self.decision_points(base_result, baseline)

        export_data = self.export_service.build_export_data(
            results, gap_analyses, recommendations, baseline, request.base_scenario_id
        )

        forecast = VesselForecastResult(
            status=ForecastStatus.COMPLETED,
            analysis_date=request.analysis_date,
            historical_months=historical_months,
            forecast_months=horizon,
            core_fleet_baseline=baseline,
            scenarios=results,
            base_scenario=base_result,
            gap_analyses=gap_analyses,
            demand_range=ValueRange.from_values([
                v for r in results for v in r.total_demand_forecast.values()
            ]),
            vessel_requirement_range=ValueRange.from_values([
                float(v) for r in results for v in r.vessel_requirements_by_month.values()
            ]),
            recommendations=recommendations,
            high_risk_months=base_gap.high_risk_months,
            low_utilization_months=base_gap.low_utilization_months,
            sensitivity_analysis=sensitivity,
            decision_points=decision_points,
            validation_warnings=warnings,
            export_data=export_data,
        )

        self.logger.info(
            "forecast_completed",
            scenarios=len(results),
            base_fleet_size=base_result.recommended_fleet_size,
            base_max_gap=base_gap.max_gap,
            recommendations=len(recommendations),
            warnings=len(warnings),
        )
        return forecast

    def sensitivity_analysis(
        self,
        base_result: ScenarioResult,
        location_forecasts: list[ForecastDemand],
        capability_forecasts: list[VesselCapabilityForecast],
        request: ForecastRequest,
        forecast_months: list[str],
    ) -> SensitivityAnalysis:
        """
        Change in base peak requirement per 1% change of demand and of capability.

        Each input is scaled by SENSITIVITY_STEP and the base scenario rerun.
        """
        step = SENSITIVITY_STEP
        scaled_demand = [
            f.model_copy(update={
                "monthly_forecast": {m: v * (1 + step) for m, v in f.monthly_forecast.items()},
            })
            for f in location_forecasts
        ]
        scaled_capability = [
            f.model_copy(update={
                "monthly_capability": {m: v * (1 + step) for m, v in f.monthly_capability.items()},
                "average_capability": f.average_capability * (1 + step),
            })
            for f in capability_forecasts
        ]

        scenario = base_result.scenario
        demand_run = self.scenario_service.calculate_scenario(
            scenario, scaled_demand, capability_forecasts, request.injects, forecast_months
        )
        capability_run = self.scenario_service.calculate_scenario(
            scenario, location_forecasts, scaled_capability, request.injects, forecast_months
        )

        baseline_peak = base_result.recommended_fleet_size
        per_percent = step * 100
        return SensitivityAnalysis(
            demand_sensitivity=round((demand_run.recommended_fleet_size - baseline_peak) / per_percent, 4),
            capability_sensitivity=round((capability_run.recommended_fleet_size - baseline_peak) / per_percent, 4),
        )

    def decision_points(self, base_result: ScenarioResult, baseline: CoreFleetBaseline) -> list[DecisionPoint]:
        """
        Charter / release decisions and quarterly review checkpoints.

        A decision is proposed when the base requirement moves by
        DECISION_POINT_CHANGE_THRESHOLD or more vessels month over month.
        """
        requirements = base_result.vessel_requirements_by_month
        months = list(requirements)
        points: list[DecisionPoint] = []

        for previous, current in zip(months, months[1:]):
            change = requirements[current] - requirements[previous]
            if abs(change) < DECISION_POINT_CHANGE_THRESHOLD:
                continue

            gap = requirements[current] - baseline.base_vessel_count
            if change > 0:
                points.append(DecisionPoint(
                    month=current,
                    decision=f"Charter {gap} additional vessels" if gap > 0 else "Prepare for increased activity",
                    rationale=f"Vessel requirement increases by {change} from {previous}",
                ))
            else:
                points.append(DecisionPoint(
                    month=current,
                    decision=f"Consider releasing {-gap} vessels" if gap < 0 else "Reduce vessel allocation",
                    rationale=f"Vessel requirement decreases by {-change} from {previous}",
                ))

        for checkpoint in REVIEW_CHECKPOINT_MONTHS:
            if checkpoint <= len(months):
                points.append(DecisionPoint(
                    month=months[checkpoint - 1],
                    decision="Review demand history and vessel forecast accuracy",
                    rationale="Quarterly checkpoint for forecast validation",
                ))

        # Stable: decisions precede the review in the same month
        points.sort(key=lambda p: p.month)
        return points


# Singleton instance
_vessel_forecast_service: Optional[VesselForecastService] = None


def get_vessel_forecast_service() -> VesselForecastService:
    """Get or create VesselForecastService instance."""
    global _vessel_forecast_service
    if _vessel_forecast_service is None:
        _vessel_forecast_service = VesselForecastService()
    return _vessel_forecast_service
