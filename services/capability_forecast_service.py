"""
Vessel capability forecast service.

Same regression and index convention as the demand forecaster, plus a
planned maintenance derate every Nth forecast month. The derated amount
is kept in planned_maintenance so it stays auditable.
"""

from typing import Optional

import structlog

from config import settings
from models.forecast import VesselCapabilityForecast
from models.history import VesselCapabilitySeries
from models.inject import Inject, InjectApplication
from services.inject_service import accumulate_injects, is_capability_reduction
from services.trend_service import calculate_linear_trend, classify_performance

logger = structlog.get_logger(__name__)


class CapabilityForecastService:
    """Per-vessel delivery capability forecasting."""

    def __init__(self, log=None):
        self.logger = log or logger
        self.maintenance_interval = settings.maintenance_interval_months
        self.derate_fraction = settings.maintenance_derate_fraction
        self.utilization_target = settings.optimal_utilization_rate
        self.trend_threshold = settings.trend_significance_threshold

    def forecast_vessel(
        self,
        series: VesselCapabilitySeries,
        forecast_months: list[str],
    ) -> VesselCapabilityForecast:
        """
        Forecast one vessel.

        predicted(i) = max(0, intercept + slope × (n + i))
        every Nth month: capability = predicted × (1 - derate), derate recorded
        """
        values = series.series_values
        n = len(values)
        fit = calculate_linear_trend(values)
        average_capability = round(sum(values) / n, 3) if n else 0.0

        monthly_capability: dict[str, float] = {}
        planned_maintenance: dict[str, float] = {}
        utilization_forecast: dict[str, float] = {}

        for i, month_key in enumerate(forecast_months, start=1):
            predicted = max(0.0, fit.predict(n + i))

            if i % self.maintenance_interval == 0:
                derate = round(predicted * self.derate_fraction, 3)
                planned_maintenance[month_key] = derate
                predicted -= derate

            monthly_capability[month_key] = round(max(0.0, predicted), 3)
            utilization_forecast[month_key] = self.utilization_target

        performance_trend = classify_performance(fit.slope, average_capability, self.trend_threshold)

        return VesselCapabilityForecast(
            vessel_name=series.vessel_name,
            monthly_capability=monthly_capability,
            planned_maintenance=planned_maintenance,
            utilization_forecast=utilization_forecast,
            performance_trend=performance_trend,
            average_capability=average_capability,
            trend=fit,
            notes=f"Capability forecast based on {n} months. Performance trend: {performance_trend.value}",
        )

    def forecast_all(
        self,
        vessel_capabilities: list[VesselCapabilitySeries],
        forecast_months: list[str],
    ) -> list[VesselCapabilityForecast]:
        """Forecast every vessel, preserving input order."""
        forecasts = [self.forecast_vessel(series, forecast_months) for series in vessel_capabilities]

        self.logger.info(
            "vessel_capability_forecasted",
            vessels=len(forecasts),
            months=len(forecast_months),
            maintenance_months=sum(len(f.planned_maintenance) for f in forecasts),
        )
        return forecasts

    def apply_capability_reductions(
        self,
        total_capability: dict[str, float],
        injects: list[Inject],
        scenario_id: Optional[str] = None,
    ) -> InjectApplication:
        """
        Subtract active capability_reduction injects from aggregate capability.

        Same accumulation rule as the demand path: per-month fsum of the
        weighted reductions, floored at zero.
        """
        application = accumulate_injects(
            total_capability,
            injects,
            include=is_capability_reduction,
            scenario_id=scenario_id,
        )

        if application.applied_inject_ids:
            self.logger.debug(
                "capability_reductions_applied",
                scenario_id=scenario_id,
                injects=application.applied_inject_ids,
            )
        return application


# Singleton instance
_capability_forecast_service: Optional[CapabilityForecastService] = None


def get_capability_forecast_service() -> CapabilityForecastService:
    """Get or create CapabilityForecastService instance."""
    global _capability_forecast_service
    if _capability_forecast_service is None:
        _capability_forecast_service = CapabilityForecastService()
    return _capability_forecast_service
