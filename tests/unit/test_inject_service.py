"""
Unit tests for InjectService.

Tests cover:
- Probability weighting
- Order independence of overlapping injects
- Decrease floored at zero
- Inactive, inverted, out-of-horizon and dangling injects
"""

import itertools

import pytest

from models.inject import InjectImpact
from models.validation import WarningCode
from services.inject_service import InjectService
from tests.factories import InjectFactory, ScenarioFactory


@pytest.fixture
def service(mock_logger):
    return InjectService(log=mock_logger)


@pytest.fixture
def base_forecast():
    return {"2026-01": 10.0, "2026-02": 10.0, "2026-03": 10.0}


class TestApplyInjects:
    """adjusted[m] = max(0, base[m] + Σ sign × magnitude × probability)"""

    def test_probability_weighted_increase(self, service, base_forecast):
        """probability 0.5 × magnitude 4 adds exactly 2 to the one covered month."""
        inject = InjectFactory.create(start_month="2026-02", magnitude=4.0, probability=0.5)

        application = service.apply(base_forecast, [inject])

        assert application.adjusted_forecast["2026-02"] == 12.0
        assert application.impact_by_month["2026-02"] == 2.0
        assert application.adjusted_forecast["2026-01"] == 10.0
        assert application.impact_by_month["2026-01"] == 0.0

    def test_decrease_floored_at_zero(self, service, base_forecast):
        inject = InjectFactory.create(
            start_month="2026-01", magnitude=25.0, impact=InjectImpact.DEMAND_DECREASE
        )

        application = service.apply(base_forecast, [inject])

        assert application.adjusted_forecast["2026-01"] == 0.0
        assert application.impact_by_month["2026-01"] == -25.0

    def test_order_does_not_matter(self, service, base_forecast):
        injects = [
            InjectFactory.create(start_month="2026-01", end_month="2026-03", magnitude=0.1, probability=0.7),
            InjectFactory.create(start_month="2026-02", end_month="2026-03", magnitude=0.2, probability=0.3),
            InjectFactory.create(
                start_month="2026-01", end_month="2026-02", magnitude=12.0,
                probability=0.9, impact=InjectImpact.DEMAND_DECREASE,
            ),
            InjectFactory.create(start_month="2026-03", magnitude=1e-9, probability=1.0),
        ]

        results = [
            service.apply(base_forecast, list(order)).adjusted_forecast
            for order in itertools.permutations(injects)
        ]

        assert all(r == results[0] for r in results)

    def test_inactive_inject_ignored_entirely(self, service, base_forecast):
        inject = InjectFactory.create(start_month="2026-01", end_month="2026-03", is_active=False)

        application = service.apply(base_forecast, [inject])

        assert application.adjusted_forecast == base_forecast
        assert all(v == 0.0 for v in application.impact_by_month.values())
        assert application.applied_inject_ids == []
        assert application.warnings == []

    def test_capability_reduction_not_applied_to_demand(self, service, base_forecast):
        inject = InjectFactory.create(start_month="2026-01", impact=InjectImpact.CAPABILITY_REDUCTION)

        application = service.apply(base_forecast, [inject])

        assert application.adjusted_forecast == base_forecast


class TestMalformedInjects:

    def test_inverted_window_skipped_and_reported(self, service, base_forecast):
        inject = InjectFactory.create(id="backwards", start_month="2026-03", end_month="2026-01")

        application = service.apply(base_forecast, [inject], scenario_id="base_case")

        assert application.adjusted_forecast == base_forecast
        assert application.skipped_inject_ids == ["backwards"]
        assert application.warnings[0].code == WarningCode.INJECT_WINDOW_INVERTED
        assert application.warnings[0].scenario_id == "base_case"

    def test_outside_horizon_reported(self, service, base_forecast):
        inject = InjectFactory.create(id="later", start_month="2027-06")

        application = service.apply(base_forecast, [inject])

        assert application.warnings[0].code == WarningCode.INJECT_OUTSIDE_HORIZON
        assert application.applied_inject_ids == []


class TestResolveScenarioInjects:

    def test_dangling_ids_warn(self, service):
        known = InjectFactory.create(id="campaign")
        scenario = ScenarioFactory.create(active_injects=["campaign", "ghost"])

        resolved, warnings = service.resolve_scenario_injects(scenario, [known])

        assert [i.id for i in resolved] == ["campaign"]
        assert len(warnings) == 1
        assert warnings[0].code == WarningCode.INJECT_NOT_FOUND
        assert warnings[0].inject_id == "ghost"

    def test_only_listed_injects_resolved(self, service):
        injects = [InjectFactory.create(id="a"), InjectFactory.create(id="b")]
        scenario = ScenarioFactory.create(active_injects=["b"])

        resolved, _ = service.resolve_scenario_injects(scenario, injects)

        assert [i.id for i in resolved] == ["b"]

    def test_repeated_id_resolved_once(self, service):
        """magnitude 4 × probability 0.5 listed twice still adds 2, not 4."""
        camp = InjectFactory.create(id="camp", magnitude=4.0, probability=0.5)
        scenario = ScenarioFactory.create(active_injects=["camp", "camp"])

        resolved, warnings = service.resolve_scenario_injects(scenario, [camp])
        application = service.apply({"2026-01": 10.0}, resolved)

        assert [i.id for i in resolved] == ["camp"]
        assert [w.code for w in warnings] == [WarningCode.INJECT_DUPLICATE_REFERENCE]
        assert warnings[0].inject_id == "camp"
        assert application.impact_by_month["2026-01"] == 2.0
