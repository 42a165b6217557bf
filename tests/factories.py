"""
Test data factories.

Uses factory pattern to generate consistent forecast inputs and
hand-built intermediate results.
"""

from datetime import date
from typing import Optional

from models.fleet import CoreFleetBaseline
from models.forecast import ForecastDemand, VesselCapabilityForecast
from models.history import FacilityType, LocationDemandSeries, VesselCapabilitySeries
from models.inject import Inject, InjectImpact
from models.result import ForecastRequest
from models.scenario import ForecastPeriod, ForecastScenario, ScenarioResult
from utils.month_utils import month_range


def month_series(start: str, values: list[float]) -> dict[str, float]:
    """Key consecutive values by month, starting at start."""
    return dict(zip(month_range(start, len(values)), values))


class DemandSeriesFactory:
    """
    Factory for LocationDemandSeries.

    Usage:
        series = DemandSeriesFactory.create()
        series = DemandSeriesFactory.create(values=[5, 6, 7], facility_type="production")
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(
        cls,
        location: Optional[str] = None,
        facility_type: FacilityType = FacilityType.DRILLING,
        values: Optional[list[float]] = None,
        start: str = "2025-01",
        monthly_deliveries: Optional[dict[str, float]] = None,
    ) -> LocationDemandSeries:
        counter = cls._next_counter()
        if monthly_deliveries is None:
            monthly_deliveries = month_series(start, values if values is not None else [20.0] * 12)
        return LocationDemandSeries(
            location=location or f"Location {counter}",
            facility_type=facility_type,
            monthly_deliveries=monthly_deliveries,
        )


class CapabilitySeriesFactory:
    """Factory for VesselCapabilitySeries."""

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(
        cls,
        vessel_name: Optional[str] = None,
        values: Optional[list[float]] = None,
        start: str = "2025-01",
    ) -> VesselCapabilitySeries:
        counter = cls._next_counter()
        return VesselCapabilitySeries(
            vessel_name=vessel_name or f"PSV {counter}",
            monthly_deliveries=month_series(start, values if values is not None else [10.0] * 12),
        )

    @classmethod
    def create_batch(cls, count: int, **overrides) -> list[VesselCapabilitySeries]:
        return [cls.create(**overrides) for _ in range(count)]


class InjectFactory:
    """Factory for Inject records."""

    _counter = 0

    @classmethod
    def create(
        cls,
        id: Optional[str] = None,
        start_month: str = "2026-01",
        end_month: Optional[str] = None,
        magnitude: float = 4.0,
        impact: InjectImpact = InjectImpact.DEMAND_INCREASE,
        probability: float = 1.0,
        is_active: bool = True,
    ) -> Inject:
        cls._counter += 1
        return Inject(
            id=id or f"inject-{cls._counter}",
            name=f"Test inject {cls._counter}",
            start_month=start_month,
            end_month=end_month or start_month,
            magnitude=magnitude,
            impact=impact,
            probability=probability,
            is_active=is_active,
        )


class ScenarioFactory:
    """Factory for ForecastScenario."""

    @classmethod
    def create(
        cls,
        id: str = "base_case",
        name: Optional[str] = None,
        time_horizon: int = 12,
        demand_growth_rate: float = 0.0,
        capability_growth_rate: float = 0.0,
        active_injects: Optional[list[str]] = None,
        confidence_threshold: float = 0.0,
    ) -> ForecastScenario:
        return ForecastScenario(
            id=id,
            name=name or id.replace("_", " ").title(),
            time_horizon=time_horizon,
            demand_growth_rate=demand_growth_rate,
            capability_growth_rate=capability_growth_rate,
            active_injects=active_injects or [],
            confidence_threshold=confidence_threshold,
        )


class ForecastFactory:
    """Hand-built per-location and per-vessel forecasts with known numbers."""

    @classmethod
    def demand(
        cls,
        months: list[str],
        values: list[float],
        location: str = "Thunder Horse",
        facility_type: FacilityType = FacilityType.DRILLING,
        confidence: float = 0.9,
    ) -> ForecastDemand:
        return ForecastDemand(
            location=location,
            facility_type=facility_type,
            monthly_forecast=dict(zip(months, values)),
            confidence={m: confidence for m in months},
        )

    @classmethod
    def capability(
        cls,
        months: list[str],
        value: float = 10.0,
        vessel_name: str = "PSV Alpha",
        average_capability: Optional[float] = None,
    ) -> VesselCapabilityForecast:
        return VesselCapabilityForecast(
            vessel_name=vessel_name,
            monthly_capability={m: value for m in months},
            average_capability=value if average_capability is None else average_capability,
        )


class ScenarioResultFactory:
    """
    ScenarioResult with a chosen requirement series.

    Demand is set to required × average capability so gap analysis
    utilization works out to required / baseline.
    """

    @classmethod
    def create(
        cls,
        requirements: list[int],
        scenario_id: str = "base_case",
        start: str = "2026-01",
        average_capability: float = 10.0,
        confidence_score: float = 0.8,
    ) -> ScenarioResult:
        months = month_range(start, len(requirements))
        return ScenarioResult(
            scenario=ScenarioFactory.create(id=scenario_id, time_horizon=len(requirements)),
            forecast_period=ForecastPeriod(
                start_month=months[0],
                end_month=months[-1],
                total_months=len(months),
            ),
            total_demand_forecast={
                m: float(r * average_capability) for m, r in zip(months, requirements)
            },
            total_capability_forecast={m: 60.0 for m in months},
            average_vessel_capability=average_capability,
            vessel_requirements_by_month=dict(zip(months, requirements)),
            recommended_fleet_size=max(requirements),
            confidence_score=confidence_score,
        )


def build_request(
    analysis_date: date = date(2025, 12, 15),
    location_demands: Optional[list[LocationDemandSeries]] = None,
    vessel_capabilities: Optional[list[VesselCapabilitySeries]] = None,
    scenarios: Optional[list[ForecastScenario]] = None,
    baseline: Optional[CoreFleetBaseline] = None,
    **kwargs,
) -> ForecastRequest:
    """ForecastRequest with a small, steady default fleet and demand."""
    return ForecastRequest(
        analysis_date=analysis_date,
        location_demands=location_demands if location_demands is not None else [
            DemandSeriesFactory.create(values=[40.0] * 12),
        ],
        vessel_capabilities=vessel_capabilities if vessel_capabilities is not None else
            CapabilitySeriesFactory.create_batch(3, values=[10.0] * 12),
        scenarios=scenarios if scenarios is not None else [ScenarioFactory.create()],
        core_fleet_baseline=baseline or CoreFleetBaseline(),
        **kwargs,
    )
