"""
Demand forecast service.

Projects each location's monthly delivery demand forward using the
linear trend and quarter seasonality, with a confidence score that
decays with forecast distance.

Index convention: forecast month i (1-based) is evaluated at regression
index n + i, where n is the length of the history. The capability
forecaster uses the same convention.
"""

from typing import Optional

import structlog

from config import settings
from models.forecast import ForecastDemand
from models.history import LocationDemandSeries
from services.trend_service import (
    calculate_distance_factor,
    calculate_growth_rate,
    calculate_linear_trend,
    calculate_seasonal_factors,
    classify_trend,
    neutral_seasonal_factors,
)
from utils.month_utils import quarter_of

logger = structlog.get_logger(__name__)


class DemandForecastService:
    """
    Location demand forecasting.

    predicted(i) = max(0, (intercept + slope × (n + i)) × seasonal(quarter(i)))
    confidence(i) = max(min_confidence, R²) × distance_factor(i)
    """

    def __init__(self, log=None):
        self.logger = log or logger
        self.min_confidence = settings.min_trend_confidence
        self.trend_threshold = settings.trend_significance_threshold
        self.decay_floor = settings.confidence_decay_floor
        self.seasonal_enabled = settings.seasonal_adjustment_enabled

    def forecast_location(
        self,
        series: LocationDemandSeries,
        forecast_months: list[str],
        seasonal_adjustment: Optional[bool] = None,
    ) -> ForecastDemand:
        """
        Forecast one location over the given future months.

        An empty history still yields a ForecastDemand (zero demand,
        confidence at the floor).

        Args:
            series: Historical monthly deliveries for the location
            forecast_months: Future month keys, in order
            seasonal_adjustment: Override the configured seasonality switch

        Returns:
            ForecastDemand for the location
        """
        values = series.series_values
        n = len(values)
        fit = calculate_linear_trend(values)

        use_seasonality = self.seasonal_enabled if seasonal_adjustment is None else seasonal_adjustment
        seasonal_pattern = (
            calculate_seasonal_factors(series.monthly_deliveries)
            if use_seasonality
            else neutral_seasonal_factors()
        )

        trend_confidence = max(self.min_confidence, fit.r_squared)
        horizon = len(forecast_months)

        monthly_forecast: dict[str, float] = {}
        confidence: dict[str, float] = {}
        for i, month_key in enumerate(forecast_months, start=1):
            trend_prediction = fit.predict(n + i)
            prediction = max(0.0, trend_prediction * seasonal_pattern[quarter_of(month_key)])
            monthly_forecast[month_key] = round(prediction, 3)

            distance_factor = calculate_distance_factor(i, horizon, self.decay_floor)
            confidence[month_key] = round(trend_confidence * distance_factor, 4)

        historical_average = round(sum(values) / n, 3) if n else 0.0

        forecast = ForecastDemand(
            location=series.location,
            facility_type=series.facility_type,
            monthly_forecast=monthly_forecast,
            confidence=confidence,
            trend_direction=classify_trend(fit.slope, self.trend_threshold),
            seasonal_pattern=seasonal_pattern,
            growth_rate=calculate_growth_rate(fit.slope, values),
            historical_average=historical_average,
            trend=fit,
            notes=f"Trend analysis based on {n} months of data. R² = {fit.r_squared:.3f}",
        )

        self.logger.debug(
            "location_demand_forecast",
            location=series.location,
            trend=forecast.trend_direction.value,
            growth_rate=forecast.growth_rate,
            historical_average=historical_average,
            months=horizon,
        )
        return forecast

    def forecast_all(
        self,
        location_demands: list[LocationDemandSeries],
        forecast_months: list[str],
        seasonal_adjustment: Optional[bool] = None,
    ) -> list[ForecastDemand]:
        """Forecast every location, preserving input order."""
        self.logger.info(
            "forecasting_location_demand",
            locations=len(location_demands),
            months=len(forecast_months),
        )
        return [
            self.forecast_location(series, forecast_months, seasonal_adjustment)
            for series in location_demands
        ]


# Singleton instance
_demand_forecast_service: Optional[DemandForecastService] = None


def get_demand_forecast_service() -> DemandForecastService:
    """Get or create DemandForecastService instance."""
    global _demand_forecast_service
    if _demand_forecast_service is None:
        _demand_forecast_service = DemandForecastService()
    return _demand_forecast_service
