"""
Custom exceptions module.

Exceptions are reserved for invalid call patterns; data irregularities
are returned as validation warnings on the forecast result.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,

    # Forecasting
    ForecastConfigurationError,
    ScenarioNotFoundError,
    InvalidMonthKeyError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",

    # Forecasting
    "ForecastConfigurationError",
    "ScenarioNotFoundError",
    "InvalidMonthKeyError",
]
