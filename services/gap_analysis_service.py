"""
Fleet gap analysis service.

Measures a scenario's vessel requirement against the contracted core
fleet. This baseline-relative gap is the one recommendations are built
on; the capability-relative gap on ScenarioResult is informational.
"""

from decimal import Decimal
from typing import Optional

import structlog

from config import settings
from models.fleet import CoreFleetBaseline, FleetGapAnalysis
from models.scenario import ScenarioResult

logger = structlog.get_logger(__name__)


class GapAnalysisService:
    """
    Baseline gap, utilization and charter cost for one scenario.

    gap(m)         = required(m) - B
    utilization(m) = demand(m) / (B × average vessel capability), 0 if B or capability is 0
    """

    def __init__(self, log=None):
        self.logger = log or logger
        self.high_risk_threshold = settings.high_risk_gap_threshold
        self.release_threshold = settings.release_gap_threshold

    def analyze(self, result: ScenarioResult, baseline: CoreFleetBaseline) -> FleetGapAnalysis:
        """
        Analyze one scenario against the core fleet baseline.

        Args:
            result: Calculated scenario
            baseline: Contracted fleet supplied by the caller

        Returns:
            FleetGapAnalysis
        """
        fleet_size = baseline.base_vessel_count
        fleet_capacity = fleet_size * result.average_vessel_capability
        day_rates = baseline.day_rate_structure

        gap_by_month: dict[str, int] = {}
        utilization_by_month: dict[str, float] = {}
        for month_key, required in result.vessel_requirements_by_month.items():
            gap_by_month[month_key] = required - fleet_size
            demand = result.total_demand_forecast.get(month_key, 0.0)
            utilization_by_month[month_key] = (
                round(demand / fleet_capacity, 4) if fleet_capacity > 0 else 0.0
            )

        utilization_values = list(utilization_by_month.values())
        average_utilization = (
            round(sum(utilization_values) / len(utilization_values), 4) if utilization_values else 0.0
        )

        max_gap = max(gap_by_month.values()) if gap_by_month else 0
        min_gap = min(gap_by_month.values()) if gap_by_month else 0
        peak_gap_month = next((m for m, g in gap_by_month.items() if g == max_gap), "")

        plus_up_months = [m for m, g in gap_by_month.items() if g > 0]
        shed_months = [m for m, g in gap_by_month.items() if g < self.release_threshold]

        charter_cost = sum(
            (gap_by_month[m] * day_rates.monthly_vessel_cost(m) for m in plus_up_months),
            Decimal("0"),
        )
        release_savings = sum(
            (abs(gap_by_month[m]) * day_rates.monthly_vessel_cost(m) for m in shed_months),
            Decimal("0"),
        )

        analysis = FleetGapAnalysis(
            scenario_id=result.scenario.id,
            baseline_vessel_count=fleet_size,
            gap_by_month=gap_by_month,
            utilization_by_month=utilization_by_month,
            average_utilization=average_utilization,
            max_gap=max_gap,
            min_gap=min_gap,
            peak_gap_month=peak_gap_month,
            plus_up_months=plus_up_months,
            shed_months=shed_months,
            high_risk_months=[m for m, g in gap_by_month.items() if g > self.high_risk_threshold],
            low_utilization_months=[
                m for m, u in utilization_by_month.items()
                if u < baseline.minimum_utilization_threshold
            ],
            estimated_charter_cost=charter_cost,
            potential_release_savings=release_savings,
        )

        self.logger.info(
            "fleet_gap_analyzed",
            scenario_id=analysis.scenario_id,
            baseline=fleet_size,
            max_gap=max_gap,
            min_gap=min_gap,
            average_utilization=average_utilization,
            high_risk_months=len(analysis.high_risk_months),
        )
        return analysis


# Singleton instance
_gap_analysis_service: Optional[GapAnalysisService] = None


def get_gap_analysis_service() -> GapAnalysisService:
    """Get or create GapAnalysisService instance."""
    global _gap_analysis_service
    if _gap_analysis_service is None:
        _gap_analysis_service = GapAnalysisService()
    return _gap_analysis_service
