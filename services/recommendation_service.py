"""
Recommendation service — core "charter or release" business logic.

Deterministic rule cascade over the base scenario's fleet gap analysis.
Every rule that matches is emitted; later rules never suppress earlier
ones. Each recommendation carries the literal measured values that
triggered it, so a reviewer can check it against the gap analysis.

Rules (evaluated in this order):
1. Any month gap > 0                        -> vessel_acquisition (critical if peak > 2, else high)
2. gap < -1 for more than 3 months in a row -> capacity_optimization, consider release (medium)
3. Average utilization > 90%                -> utilization_warning, over (high)
4. Average utilization < 50%                -> utilization_warning, under (medium)
5. Another scenario peaks above the base    -> capacity_planning, secure options (medium)
"""

from decimal import Decimal
from typing import Optional

import structlog

from config import settings
from config.forecasting import RELEASE_CONFIDENCE_FACTOR
from exceptions import ScenarioNotFoundError
from models.fleet import CoreFleetBaseline, FleetGapAnalysis
from models.recommendation import (
    ManagementRecommendation,
    RecommendationPriority,
    RecommendationType,
    Timeframe,
)
from models.scenario import ScenarioResult

logger = structlog.get_logger(__name__)


def longest_surplus_run(gap_by_month: dict[str, int], threshold: int) -> list[str]:
    """
    Longest run of consecutive forecast months with gap < threshold.

    Earliest run wins a tie. Empty when no month qualifies.
    """
    longest: list[str] = []
    current: list[str] = []
    for month_key, gap in gap_by_month.items():
        if gap < threshold:
            current.append(month_key)
            if len(current) > len(longest):
                longest = list(current)
        else:
            current = []
    return longest


class RecommendationService:
    """
    Management recommendation business logic.

    Consumes calculated scenarios plus their gap analyses and produces
    a sorted list of ManagementRecommendation records.
    """

    def __init__(self, log=None):
        self.logger = log or logger
        self.high_risk_threshold = settings.high_risk_gap_threshold
        self.release_threshold = settings.release_gap_threshold
        self.release_min_months = settings.release_min_consecutive_months

    # ===================
    # RULE CONDITIONS
    # ===================

    def _needs_charter(self, gap: FleetGapAnalysis) -> bool:
        return bool(gap.plus_up_months)

    def _release_run(self, gap: FleetGapAnalysis) -> list[str]:
        run = longest_surplus_run(gap.gap_by_month, self.release_threshold)
        return run if len(run) >= self.release_min_months else []

    @staticmethod
    def _has_fleet_capacity(result: ScenarioResult, gap: FleetGapAnalysis) -> bool:
        # Utilization is undefined (reported as 0) without a fleet or vessel data
        return (
            gap.baseline_vessel_count > 0
            and result.average_vessel_capability > 0
            and bool(gap.utilization_by_month)
        )

    def _over_utilized(self, result: ScenarioResult, gap: FleetGapAnalysis, baseline: CoreFleetBaseline) -> bool:
        return self._has_fleet_capacity(result, gap) and (
            gap.average_utilization > baseline.maximum_utilization_threshold
        )

    def _under_utilized(self, result: ScenarioResult, gap: FleetGapAnalysis, baseline: CoreFleetBaseline) -> bool:
        return self._has_fleet_capacity(result, gap) and (
            gap.average_utilization < baseline.minimum_utilization_threshold
        )

    # ===================
    # GENERATION
    # ===================

    def generate(
        self,
        results: list[ScenarioResult],
        gap_analyses: list[FleetGapAnalysis],
        baseline: CoreFleetBaseline,
        base_scenario_id: str,
    ) -> list[ManagementRecommendation]:
        """
        Generate recommendations for a forecast run.

        Args:
            results: Every calculated scenario
            gap_analyses: Gap analysis per scenario (matched by scenario id)
            baseline: Core fleet the gaps were measured against
            base_scenario_id: Scenario the cascade is evaluated on

        Returns:
            Recommendations sorted by priority, rule order breaking ties

        Raises:
            ScenarioNotFoundError: If the base scenario has no result
        """
        pairs = self._pair(results, gap_analyses)
        base = next((p for p in pairs if p[0].scenario.id == base_scenario_id), None)
        if base is None:
            raise ScenarioNotFoundError(base_scenario_id)

        base_result, base_gap = base
        recommendations: list[ManagementRecommendation] = []

        if self._needs_charter(base_gap):
            recommendations.append(self._acquisition(base_result, base_gap, baseline, pairs))

        release_run = self._release_run(base_gap)
        if release_run:
            recommendations.append(self._release(base_result, base_gap, baseline, release_run, pairs))

        if self._over_utilized(base_result, base_gap, baseline):
            recommendations.append(self._over_utilization(base_result, base_gap, baseline, pairs))

        if self._under_utilized(base_result, base_gap, baseline):
            recommendations.append(self._under_utilization(base_result, base_gap, baseline, pairs))

        planning = self._capacity_planning(base_result, base_gap, pairs)
        if planning:
            recommendations.append(planning)

        # Stable sort keeps rule order within a priority
        recommendations.sort(key=lambda r: r.priority.rank)

        self.logger.info(
            "recommendations_generated",
            base_scenario=base_scenario_id,
            count=len(recommendations),
            types=[r.type.value for r in recommendations],
        )
        return recommendations

    @staticmethod
    def _pair(
        results: list[ScenarioResult],
        gap_analyses: list[FleetGapAnalysis],
    ) -> list[tuple[ScenarioResult, FleetGapAnalysis]]:
        gaps_by_id = {g.scenario_id: g for g in gap_analyses}
        return [(r, gaps_by_id[r.scenario.id]) for r in results if r.scenario.id in gaps_by_id]

    @staticmethod
    def _confidence(value: float) -> float:
        return round(min(1.0, max(0.0, value)), 4)

    # ===================
    # RULE BUILDERS
    # ===================

    def _acquisition(
        self,
        result: ScenarioResult,
        gap: FleetGapAnalysis,
        baseline: CoreFleetBaseline,
        pairs: list[tuple[ScenarioResult, FleetGapAnalysis]],
    ) -> ManagementRecommendation:
        peak_gap = gap.max_gap
        critical = peak_gap > self.high_risk_threshold
        first_month = gap.plus_up_months[0]
        months = len(gap.plus_up_months)

        return ManagementRecommendation(
            id=f"vessel_acquisition_{result.scenario.id}_{first_month}",
            type=RecommendationType.VESSEL_ACQUISITION,
            priority=RecommendationPriority.CRITICAL if critical else RecommendationPriority.HIGH,
            title=f"Charter {peak_gap} Additional Vessel{'s' if peak_gap != 1 else ''}",
            description=(
                f"{months} forecast month{'s' if months != 1 else ''} require vessels beyond the "
                f"{baseline.base_vessel_count}-vessel core fleet, peaking at {peak_gap} in {gap.peak_gap_month}"
            ),
            recommended_action=(
                f"Charter {peak_gap} PSVs starting {first_month}. "
                f"Estimated cost: ${gap.estimated_charter_cost / 1000:,.0f}K"
            ),
            timeframe=Timeframe.IMMEDIATE if critical else Timeframe.NEXT_QUARTER,
            target_month=first_month,
            vessel_impact=peak_gap,
            cost_impact=gap.estimated_charter_cost,
            demand_impact=round(peak_gap * result.average_vessel_capability, 3),
            utilization_impact=-0.15,
            trigger_conditions=[
                f"Vessel gap > 0 in {months} months",
                f"Peak shortage of {peak_gap} vessels in {gap.peak_gap_month}",
                f"Core fleet at {gap.average_utilization * 100:.1f}% utilization",
            ],
            trigger_values={
                "max_gap": peak_gap,
                "peak_gap_month": gap.peak_gap_month,
                "plus_up_months": months,
                "first_plus_up_month": first_month,
                "average_utilization": gap.average_utilization,
                "baseline_vessel_count": baseline.base_vessel_count,
            },
            alternative_options=[
                "Exercise charter options if available",
                "Negotiate short-term extensions with existing fleet",
                "Defer non-critical drilling activities",
            ],
            risks=[
                "Drilling schedule delays if vessels not secured",
                "Increased day rates for short-notice charters",
                "Limited vessel availability during peak season",
            ],
            benefits=[
                "Meet all rig schedule requirements",
                "Maintain drilling program momentum",
                "Avoid costly activity deferrals",
            ],
            confidence=self._confidence(result.confidence_score),
            based_on_scenarios=[r.scenario.id for r, g in pairs if self._needs_charter(g)],
        )

    def _release(
        self,
        result: ScenarioResult,
        gap: FleetGapAnalysis,
        baseline: CoreFleetBaseline,
        run: list[str],
        pairs: list[tuple[ScenarioResult, FleetGapAnalysis]],
    ) -> ManagementRecommendation:
        # Vessels surplus in every month of the run
        releasable = min(-gap.gap_by_month[m] for m in run)
        day_rates = baseline.day_rate_structure
        savings = sum((releasable * day_rates.monthly_vessel_cost(m) for m in run), Decimal("0"))

        return ManagementRecommendation(
            id=f"capacity_optimization_{result.scenario.id}_{run[0]}",
            type=RecommendationType.CAPACITY_OPTIMIZATION,
            priority=RecommendationPriority.MEDIUM,
            title=f"Consider Releasing {releasable} Vessel{'s' if releasable != 1 else ''}",
            description=(
                f"{len(run)} consecutive months ({run[0]} to {run[-1]}) show at least "
                f"{releasable} vessels of surplus against the core fleet"
            ),
            recommended_action=(
                f"Evaluate releasing {releasable} vessels for {run[0]} to {run[-1]}. "
                f"Potential savings: ${savings / 1000:,.0f}K "
                f"({baseline.contractual_notice_days}-day notice applies)"
            ),
            timeframe=Timeframe.NEXT_6_MONTHS,
            target_month=run[0],
            vessel_impact=-releasable,
            cost_impact=-savings,
            demand_impact=0.0,
            utilization_impact=0.20,
            trigger_conditions=[
                f"Vessel gap < {self.release_threshold} for {len(run)} consecutive months",
                f"Smallest surplus in that period: {releasable} vessels",
            ],
            trigger_values={
                "consecutive_months": len(run),
                "run_start": run[0],
                "run_end": run[-1],
                "min_surplus": releasable,
                "min_gap": gap.min_gap,
                "average_utilization": gap.average_utilization,
            },
            alternative_options=[
                "Renegotiate rates with existing contractors",
                "Explore additional market opportunities",
                "Defer vessel release until more data available",
            ],
            risks=[
                "Future capacity shortages if rig schedule accelerates",
                "Difficulty re-securing vessels when needed",
                "Contractual penalties for early termination",
            ],
            benefits=[
                f"Reduce fleet costs by ${savings / 1000:,.0f}K over the period",
                "Optimize core fleet utilization",
                "Free up capital for other investments",
            ],
            confidence=self._confidence(result.confidence_score * RELEASE_CONFIDENCE_FACTOR),
            based_on_scenarios=[r.scenario.id for r, g in pairs if self._release_run(g)],
        )

    def _over_utilization(
        self,
        result: ScenarioResult,
        gap: FleetGapAnalysis,
        baseline: CoreFleetBaseline,
        pairs: list[tuple[ScenarioResult, FleetGapAnalysis]],
    ) -> ManagementRecommendation:
        peak_month = max(gap.utilization_by_month, key=lambda m: gap.utilization_by_month[m])
        threshold = baseline.maximum_utilization_threshold

        return ManagementRecommendation(
            id=f"utilization_warning_{result.scenario.id}_{peak_month}",
            type=RecommendationType.UTILIZATION_WARNING,
            priority=RecommendationPriority.HIGH,
            title="Core Fleet Over-Utilization Risk",
            description=(
                f"Core fleet utilization at {gap.average_utilization * 100:.1f}% exceeds "
                f"{threshold * 100:.0f}% operational threshold"
            ),
            recommended_action="Review vessel requirements and charter options to reduce operational risk",
            timeframe=Timeframe.IMMEDIATE,
            target_month=peak_month,
            utilization_impact=round(baseline.average_utilization_target - gap.average_utilization, 4),
            trigger_conditions=[
                f"Utilization > {threshold * 100:.0f}%",
                "Limited operational flexibility",
            ],
            trigger_values={
                "average_utilization": gap.average_utilization,
                "threshold": threshold,
                "peak_utilization_month": peak_month,
                "peak_utilization": gap.utilization_by_month[peak_month],
            },
            alternative_options=[
                "Charter additional vessels immediately",
                "Defer non-critical activities",
                "Optimize vessel routing and scheduling",
            ],
            risks=[
                "Service delays during peak periods",
                "Crew fatigue and safety concerns",
                "Equipment wear and increased maintenance",
            ],
            benefits=[
                "Maintain service reliability",
                "Reduce operational stress on fleet",
                "Preserve safety margins",
            ],
            confidence=self._confidence(result.confidence_score),
            based_on_scenarios=[r.scenario.id for r, g in pairs if self._over_utilized(r, g, baseline)],
        )

    def _under_utilization(
        self,
        result: ScenarioResult,
        gap: FleetGapAnalysis,
        baseline: CoreFleetBaseline,
        pairs: list[tuple[ScenarioResult, FleetGapAnalysis]],
    ) -> ManagementRecommendation:
        low_month = min(gap.utilization_by_month, key=lambda m: gap.utilization_by_month[m])
        threshold = baseline.minimum_utilization_threshold

        return ManagementRecommendation(
            id=f"utilization_warning_{result.scenario.id}_{low_month}",
            type=RecommendationType.UTILIZATION_WARNING,
            priority=RecommendationPriority.MEDIUM,
            title="Address Fleet Underutilization",
            description=(
                f"Core fleet utilization at {gap.average_utilization * 100:.1f}% is below "
                f"{threshold * 100:.0f}% minimum threshold"
            ),
            recommended_action="Consider fleet optimization or additional market opportunities",
            timeframe=Timeframe.NEXT_6_MONTHS,
            target_month=low_month,
            utilization_impact=round(baseline.average_utilization_target - gap.average_utilization, 4),
            trigger_conditions=[
                f"Utilization < {threshold * 100:.0f}%",
                "Excess fleet capacity",
            ],
            trigger_values={
                "average_utilization": gap.average_utilization,
                "threshold": threshold,
                "lowest_utilization_month": low_month,
                "lowest_utilization": gap.utilization_by_month[low_month],
            },
            alternative_options=[
                "Sublet vessels to other operators",
                "Explore new market segments",
                "Improve demand forecasting",
            ],
            risks=[
                "Future capacity shortages",
                "Lost market opportunities",
                "Fixed cost inefficiency",
            ],
            benefits=[
                "Reduced operational costs",
                "Improved profitability",
                "Better resource allocation",
            ],
            confidence=self._confidence(result.confidence_score),
            based_on_scenarios=[r.scenario.id for r, g in pairs if self._under_utilized(r, g, baseline)],
        )

    def _capacity_planning(
        self,
        result: ScenarioResult,
        gap: FleetGapAnalysis,
        pairs: list[tuple[ScenarioResult, FleetGapAnalysis]],
    ) -> Optional[ManagementRecommendation]:
        """Hedge for alternative scenarios that need more vessels than the base case."""
        exceeding = [
            (r, g) for r, g in pairs
            if r.scenario.id != result.scenario.id and g.max_gap > gap.max_gap and g.max_gap > 0
        ]
        if not exceeding:
            return None

        worst_result, worst_gap = max(exceeding, key=lambda p: p[1].max_gap)
        extra = worst_gap.max_gap - max(gap.max_gap, 0)

        return ManagementRecommendation(
            id=f"capacity_planning_{worst_result.scenario.id}_{worst_gap.peak_gap_month}",
            type=RecommendationType.CAPACITY_PLANNING,
            priority=RecommendationPriority.MEDIUM,
            title=f"Secure Charter Options for {extra} Vessel{'s' if extra != 1 else ''}",
            description=(
                f"Scenario '{worst_result.scenario.name}' peaks at a {worst_gap.max_gap}-vessel gap "
                f"in {worst_gap.peak_gap_month}, above the base case peak of {gap.max_gap}"
            ),
            recommended_action=(
                f"Negotiate options on {extra} additional PSVs covering {worst_gap.peak_gap_month} "
                "without committing to firm charters"
            ),
            timeframe=Timeframe.NEXT_3_MONTHS,
            target_month=worst_gap.peak_gap_month,
            vessel_impact=extra,
            cost_impact=worst_gap.estimated_charter_cost - gap.estimated_charter_cost,
            trigger_conditions=[
                f"Peak gap of {worst_gap.max_gap} in scenario '{worst_result.scenario.id}'",
                f"Base case peak gap of {gap.max_gap}",
            ],
            trigger_values={
                "scenario_max_gap": worst_gap.max_gap,
                "base_max_gap": gap.max_gap,
                "scenario_peak_month": worst_gap.peak_gap_month,
            },
            alternative_options=[
                "Add flex-up clauses to existing contracts",
                "Share vessels with neighboring operators",
                "Accept schedule risk and re-forecast monthly",
            ],
            risks=[
                "Option fees if the scenario does not materialize",
                "Short-notice charter premiums if options are not secured",
            ],
            benefits=[
                "Capacity available if upside demand materializes",
                "Day rates fixed ahead of the market",
            ],
            confidence=self._confidence(worst_result.confidence_score),
            based_on_scenarios=[r.scenario.id for r, _ in exceeding],
        )


# Singleton instance
_recommendation_service: Optional[RecommendationService] = None


def get_recommendation_service() -> RecommendationService:
    """Get or create RecommendationService instance."""
    global _recommendation_service
    if _recommendation_service is None:
        _recommendation_service = RecommendationService()
    return _recommendation_service
