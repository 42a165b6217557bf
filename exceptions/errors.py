"""
Custom exception classes for the forecasting engine.

Only invalid call patterns raise. Sparse data, zero capability and
malformed injects are reported as results and validation warnings.
"""

from typing import Optional, Any


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "SCENARIO_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP-style status code for callers that expose the engine
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


# ===================
# FORECAST ERRORS
# ===================

class ForecastConfigurationError(ValidationError):
    """Forecast request cannot be run as configured."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="FORECAST_CONFIGURATION_ERROR",
            message=message,
            details=details
        )


class ScenarioNotFoundError(NotFoundError):
    """Designated base scenario is not part of the scenario set."""

    def __init__(self, scenario_id: str):
        super().__init__(
            resource="Scenario",
            identifier=scenario_id,
            code="SCENARIO_NOT_FOUND"
        )


class InvalidMonthKeyError(ValidationError):
    """Month key is not in YYYY-MM format."""

    def __init__(self, month_key: str):
        super().__init__(
            code="INVALID_MONTH_KEY",
            message=f"Invalid month key: {month_key!r} (expected YYYY-MM)",
            details={"provided": month_key, "format": "YYYY-MM"}
        )
