"""
Unit tests for RecommendationService.

Tests cover each rule of the cascade:
1. Vessel acquisition (high / critical)
2. Release after a sustained surplus only
3. Over-utilization warning
4. Under-utilization warning
5. Cross-scenario capacity planning
plus ordering, deterministic ids and trigger values.
"""

from decimal import Decimal

import pytest

from exceptions import ScenarioNotFoundError
from models.fleet import CoreFleetBaseline, DayRateStructure
from models.recommendation import RecommendationPriority, RecommendationType
from services.gap_analysis_service import GapAnalysisService
from services.recommendation_service import RecommendationService, longest_surplus_run
from tests.factories import ScenarioResultFactory


@pytest.fixture
def baseline():
    return CoreFleetBaseline(
        base_vessel_count=6,
        day_rate_structure=DayRateStructure(base_rate=Decimal("1000"), seasonal_surcharge={}),
    )


@pytest.fixture
def generate(baseline, mock_logger):
    """Run gap analysis plus the cascade for {scenario_id: requirements}."""
    gap_service = GapAnalysisService(log=mock_logger)
    service = RecommendationService(log=mock_logger)

    def _generate(requirements_by_scenario: dict[str, list[int]], base_id: str = "base_case"):
        results = [
            ScenarioResultFactory.create(reqs, scenario_id=scenario_id)
            for scenario_id, reqs in requirements_by_scenario.items()
        ]
        gaps = [gap_service.analyze(r, baseline) for r in results]
        return service.generate(results, gaps, baseline, base_id)

    return _generate


def of_type(recommendations, rec_type):
    return [r for r in recommendations if r.type == rec_type]


class TestVesselAcquisition:
    """Any month gap > 0; critical if peak gap > 2, else high."""

    def test_gap_of_two_is_high_priority(self, generate):
        """Baseline 6, required 8 -> gap +2 -> high, vessel_impact 2."""
        recs = of_type(generate({"base_case": [8]}), RecommendationType.VESSEL_ACQUISITION)

        assert len(recs) == 1
        assert recs[0].priority == RecommendationPriority.HIGH
        assert recs[0].vessel_impact == 2
        assert recs[0].target_month == "2026-01"
        assert recs[0].trigger_values["max_gap"] == 2

    def test_gap_of_three_is_critical(self, generate):
        recs = of_type(generate({"base_case": [7, 9, 8]}), RecommendationType.VESSEL_ACQUISITION)

        assert recs[0].priority == RecommendationPriority.CRITICAL
        assert recs[0].vessel_impact == 3
        assert recs[0].trigger_values["peak_gap_month"] == "2026-02"

    def test_no_gap_no_acquisition(self, generate):
        recs = of_type(generate({"base_case": [6, 5, 6]}), RecommendationType.VESSEL_ACQUISITION)

        assert recs == []

    def test_deterministic_id(self, generate):
        recs = of_type(generate({"base_case": [6, 7]}), RecommendationType.VESSEL_ACQUISITION)

        assert recs[0].id == "vessel_acquisition_base_case_2026-02"

    def test_cost_impact_is_charter_cost(self, generate):
        recs = of_type(generate({"base_case": [8, 7]}), RecommendationType.VESSEL_ACQUISITION)

        assert recs[0].cost_impact == Decimal("90000")


class TestRelease:
    """gap < -1 for more than 3 consecutive months."""

    def test_four_consecutive_months(self, generate):
        recs = of_type(generate({"base_case": [4, 4, 3, 4]}), RecommendationType.CAPACITY_OPTIMIZATION)

        assert len(recs) == 1
        assert recs[0].priority == RecommendationPriority.MEDIUM
        # Smallest surplus across the run is 2
        assert recs[0].vessel_impact == -2
        assert recs[0].target_month == "2026-01"
        assert recs[0].trigger_values["consecutive_months"] == 4

    def test_three_months_not_enough(self, generate):
        recs = of_type(generate({"base_case": [4, 4, 4, 6, 4]}), RecommendationType.CAPACITY_OPTIMIZATION)

        assert recs == []

    def test_single_month_dip_never_releases(self, generate):
        recs = of_type(generate({"base_case": [6, 1, 6, 6]}), RecommendationType.CAPACITY_OPTIMIZATION)

        assert recs == []

    def test_release_confidence_discounted(self, generate):
        recs = of_type(generate({"base_case": [4, 4, 4, 4]}), RecommendationType.CAPACITY_OPTIMIZATION)

        # 0.8 scenario confidence × 0.8
        assert recs[0].confidence == pytest.approx(0.64)

    def test_longest_run(self):
        gaps = {"a": -2, "b": -2, "c": 0, "d": -3, "e": -2, "f": -4}

        assert longest_surplus_run(gaps, -1) == ["d", "e", "f"]


class TestUtilizationWarnings:
    """Average utilization > 0.90 (high) or < 0.50 (medium)."""

    def test_over_utilization(self, generate):
        recs = of_type(generate({"base_case": [6, 6, 7]}), RecommendationType.UTILIZATION_WARNING)

        assert len(recs) == 1
        assert recs[0].priority == RecommendationPriority.HIGH
        assert recs[0].trigger_values["average_utilization"] == pytest.approx(1.0556, abs=1e-4)

    def test_under_utilization(self, generate):
        recs = of_type(generate({"base_case": [2, 2, 2]}), RecommendationType.UTILIZATION_WARNING)

        assert len(recs) == 1
        assert recs[0].priority == RecommendationPriority.MEDIUM
        assert recs[0].trigger_values["average_utilization"] == pytest.approx(0.3333, abs=1e-4)

    def test_band_has_no_warning(self, generate):
        recs = of_type(generate({"base_case": [4, 5, 4]}), RecommendationType.UTILIZATION_WARNING)

        assert recs == []


class TestCascade:

    def test_all_matching_rules_emitted_and_sorted(self, generate):
        """Critical acquisition, then high over-utilization."""
        recs = generate({"base_case": [9, 9, 9]})

        assert [r.type for r in recs] == [
            RecommendationType.VESSEL_ACQUISITION,
            RecommendationType.UTILIZATION_WARNING,
        ]
        assert [r.priority for r in recs] == [RecommendationPriority.CRITICAL, RecommendationPriority.HIGH]

    def test_based_on_scenarios_lists_every_match(self, generate):
        recs = generate({"base_case": [7, 7], "optimistic": [8, 8], "pessimistic": [5, 5]})

        acquisition = of_type(recs, RecommendationType.VESSEL_ACQUISITION)[0]
        assert acquisition.based_on_scenarios == ["base_case", "optimistic"]

    def test_capacity_planning_for_higher_scenario(self, generate):
        recs = generate({"base_case": [7, 7], "optimistic": [7, 9]})

        planning = of_type(recs, RecommendationType.CAPACITY_PLANNING)
        assert len(planning) == 1
        assert planning[0].vessel_impact == 2
        assert planning[0].based_on_scenarios == ["optimistic"]
        assert planning[0].id == "capacity_planning_optimistic_2026-02"

    def test_missing_base_raises(self, generate):
        with pytest.raises(ScenarioNotFoundError):
            generate({"optimistic": [7]}, base_id="base_case")

    def test_repeatable(self, generate):
        first = generate({"base_case": [8, 4, 4, 4, 4], "optimistic": [9, 9, 9, 9, 9]})
        second = generate({"base_case": [8, 4, 4, 4, 4], "optimistic": [9, 9, 9, 9, 9]})

        assert first == second
