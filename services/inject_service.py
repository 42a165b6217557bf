"""
Inject application service.

Overlays time-bounded, probability-weighted injects onto a monthly
series. Per month, the signed contributions of every covering inject
are summed with math.fsum (exactly rounded), then the total is added to
the base value once and floored at zero. The result therefore does not
depend on the order injects are listed in.
"""

import math
from typing import Callable, Optional

import structlog

from models.inject import Inject, InjectApplication, InjectImpact
from models.scenario import ForecastScenario
from models.validation import ValidationWarning, WarningCode
from utils.month_utils import in_window

logger = structlog.get_logger(__name__)


def _window_warnings(
    injects: list[Inject],
    months: list[str],
    scenario_id: Optional[str] = None,
) -> tuple[list[Inject], list[ValidationWarning]]:
    """
    Split injects into usable ones and warnings for the rest.

    Inverted windows and windows that miss every forecast month are
    skipped and reported.
    """
    usable: list[Inject] = []
    warnings: list[ValidationWarning] = []

    for inject in injects:
        if not inject.has_valid_window:
            warnings.append(ValidationWarning(
                code=WarningCode.INJECT_WINDOW_INVERTED,
                message=f"Inject '{inject.id}' ends ({inject.end_month}) before it starts ({inject.start_month})",
                scenario_id=scenario_id,
                inject_id=inject.id,
                details={"start_month": inject.start_month, "end_month": inject.end_month},
            ))
            continue

        if months and not any(in_window(m, inject.start_month, inject.end_month) for m in months):
            warnings.append(ValidationWarning(
                code=WarningCode.INJECT_OUTSIDE_HORIZON,
                message=f"Inject '{inject.id}' does not overlap the forecast horizon",
                scenario_id=scenario_id,
                inject_id=inject.id,
                details={
                    "start_month": inject.start_month,
                    "end_month": inject.end_month,
                    "horizon_start": months[0],
                    "horizon_end": months[-1],
                },
            ))
            continue

        usable.append(inject)

    return usable, warnings


def accumulate_injects(
    base_forecast: dict[str, float],
    injects: list[Inject],
    include: Callable[[Inject], bool],
    scenario_id: Optional[str] = None,
) -> InjectApplication:
    """
    Apply every active inject accepted by `include` onto base_forecast.

    adjusted[m] = max(0, base[m] + fsum(signed contributions covering m))
    impact[m]   = fsum(signed contributions covering m)

    Inactive injects are dropped before anything else, so they never show
    up in the impact ledger, the applied list or the warnings.
    """
    months = list(base_forecast)
    candidates = [inj for inj in injects if inj.is_active and include(inj)]
    usable, warnings = _window_warnings(candidates, months, scenario_id)

    adjusted: dict[str, float] = {}
    impact: dict[str, float] = {}
    applied: list[str] = []

    for month_key, base_value in base_forecast.items():
        contributions = []
        for inject in usable:
            if in_window(month_key, inject.start_month, inject.end_month):
                contributions.append(inject.signed_adjustment)
                if inject.id not in applied:
                    applied.append(inject.id)

        net = math.fsum(contributions)
        impact[month_key] = net
        adjusted[month_key] = max(0.0, base_value + net)

    return InjectApplication(
        adjusted_forecast=adjusted,
        impact_by_month=impact,
        applied_inject_ids=[inj.id for inj in usable if inj.id in applied],
        skipped_inject_ids=[w.inject_id for w in warnings if w.inject_id],
        warnings=warnings,
    )


class InjectService:
    """
    Demand-side inject engine.

    capability_reduction injects are applied by the capability forecaster,
    never here.
    """

    def __init__(self, log=None):
        self.logger = log or logger

    def apply(
        self,
        base_forecast: dict[str, float],
        injects: list[Inject],
        scenario_id: Optional[str] = None,
    ) -> InjectApplication:
        """
        Apply active demand injects onto a monthly demand series.

        Args:
            base_forecast: YYYY-MM -> demand
            injects: Candidate injects (any impact, any activity)
            scenario_id: Attached to warnings for the audit trail

        Returns:
            InjectApplication with the adjusted series and impact ledger
        """
        application = accumulate_injects(
            base_forecast,
            injects,
            include=lambda inj: inj.impact.affects_demand,
            scenario_id=scenario_id,
        )

        self.logger.debug(
            "demand_injects_applied",
            scenario_id=scenario_id,
            applied=len(application.applied_inject_ids),
            skipped=len(application.skipped_inject_ids),
        )
        return application

    def resolve_scenario_injects(
        self,
        scenario: ForecastScenario,
        injects: list[Inject],
    ) -> tuple[list[Inject], list[ValidationWarning]]:
        """
        Look up the injects a scenario activates, in the scenario's order.

        Ids with no matching inject produce INJECT_NOT_FOUND warnings.
        A repeated id is resolved once and reported as
        INJECT_DUPLICATE_REFERENCE.
        """
        by_id = {inj.id: inj for inj in injects}
        resolved: list[Inject] = []
        warnings: list[ValidationWarning] = []
        seen: set[str] = set()

        for inject_id in scenario.active_injects:
            if inject_id in seen:
                warnings.append(ValidationWarning(
                    code=WarningCode.INJECT_DUPLICATE_REFERENCE,
                    message=f"Scenario '{scenario.id}' lists inject '{inject_id}' more than once",
                    scenario_id=scenario.id,
                    inject_id=inject_id,
                ))
                continue
            seen.add(inject_id)

            inject = by_id.get(inject_id)
            if inject is None:
                warnings.append(ValidationWarning(
                    code=WarningCode.INJECT_NOT_FOUND,
                    message=f"Scenario '{scenario.id}' references unknown inject '{inject_id}'",
                    scenario_id=scenario.id,
                    inject_id=inject_id,
                ))
                self.logger.warning(
                    "scenario_inject_not_found",
                    scenario_id=scenario.id,
                    inject_id=inject_id,
                )
                continue
            resolved.append(inject)

        return resolved, warnings


def is_capability_reduction(inject: Inject) -> bool:
    return inject.impact == InjectImpact.CAPABILITY_REDUCTION


# Singleton instance
_inject_service: Optional[InjectService] = None


def get_inject_service() -> InjectService:
    """Get or create InjectService instance."""
    global _inject_service
    if _inject_service is None:
        _inject_service = InjectService()
    return _inject_service
