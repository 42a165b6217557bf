"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Forecasting thresholds and computation budget limits live here so a
caller can tune them per deployment without code changes.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # FORECAST HORIZON
    # ===================
    default_forecast_months: int = Field(
        default=12,
        ge=1,
        le=36,
        description="Default scenario horizon in months"
    )
    seasonal_adjustment_enabled: bool = Field(
        default=True,
        description="Apply quarter-level seasonal multipliers to demand forecasts"
    )

    # ===================
    # TREND ESTIMATION
    # ===================
    min_trend_confidence: float = Field(
        default=0.3,
        ge=0,
        le=1,
        description="Confidence floor applied to R² before distance decay"
    )
    trend_significance_threshold: float = Field(
        default=0.1,
        ge=0,
        description="Slope magnitude above which a trend is not 'stable'"
    )
    confidence_decay_floor: float = Field(
        default=0.6,
        ge=0,
        le=1,
        description="Distance factor reached at the last forecast month"
    )

    # ===================
    # VESSEL CAPABILITY
    # ===================
    maintenance_interval_months: int = Field(
        default=6,
        ge=1,
        le=24,
        description="Every Nth forecast month carries a planned maintenance derate"
    )
    maintenance_derate_fraction: float = Field(
        default=0.2,
        ge=0,
        le=1,
        description="Share of predicted capability lost in a maintenance month"
    )
    optimal_utilization_rate: float = Field(
        default=0.75,
        ge=0,
        le=1,
        description="Default monthly utilization target per vessel"
    )

    # ===================
    # GAP ANALYSIS
    # ===================
    high_risk_gap_threshold: int = Field(
        default=2,
        ge=0,
        description="Baseline gap above which a month is flagged high-risk"
    )
    release_gap_threshold: int = Field(
        default=-1,
        le=0,
        description="Baseline gap below which a month counts as surplus"
    )
    release_min_consecutive_months: int = Field(
        default=4,
        ge=1,
        description="Consecutive surplus months required before suggesting release"
    )

    # ===================
    # COMPUTATION BUDGET
    # ===================
    max_scenarios: int = Field(default=10, ge=1, description="Maximum scenarios per run")
    max_locations: int = Field(default=200, ge=1, description="Maximum demand series per run")
    max_vessels: int = Field(default=100, ge=1, description="Maximum capability series per run")
    max_horizon_months: int = Field(default=36, ge=1, description="Maximum scenario horizon")
    max_cells: int = Field(
        default=200_000,
        ge=1,
        description="Maximum scenarios × (locations + vessels) × horizon"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
