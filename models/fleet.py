"""
Core fleet baseline and gap analysis schemas.

The baseline is the contractually held fleet; it is supplied by the
caller and only ever read as the reference size gaps are measured from.
"""

from decimal import Decimal

from pydantic import Field, model_validator

from config.forecasting import (
    BASE_DAY_RATE_USD,
    CONTRACTUAL_NOTICE_DAYS,
    CORE_FLEET_MAX_UTILIZATION,
    CORE_FLEET_MIN_UTILIZATION,
    CORE_FLEET_TARGET_UTILIZATION,
    CURRENT_FLEET_COUNT,
    DAYS_PER_CHARTER_MONTH,
    MAX_FLEX_UP_CAPACITY,
    SEASONAL_DAY_RATE_SURCHARGE,
)
from models.base import FrozenSchema
from utils.month_utils import month_number


class DayRateStructure(FrozenSchema):
    """Charter day-rate terms."""

    base_rate: Decimal = Field(BASE_DAY_RATE_USD, ge=0, description="USD per vessel-day")
    volume_discount: float = Field(0.05, ge=0, le=1, description="Discount for 4+ vessels")
    long_term_discount: float = Field(0.08, ge=0, le=1, description="Discount for 2+ year contracts")
    seasonal_surcharge: dict[str, float] = Field(
        default_factory=lambda: dict(SEASONAL_DAY_RATE_SURCHARGE),
        description="Month number ('01'..'12') -> surcharge fraction"
    )
    emergency_premium: float = Field(0.5, ge=0, description="Premium for <48h notice charters")

    def monthly_vessel_cost(self, month_key: str) -> Decimal:
        """
        Charter cost of one vessel for one month.

        base_rate × 30 days × (1 + seasonal surcharge for that month)
        """
        surcharge = Decimal(str(self.seasonal_surcharge.get(month_number(month_key), 0.0)))
        return self.base_rate * DAYS_PER_CHARTER_MONTH * (Decimal("1") + surcharge)


class CoreFleetBaseline(FrozenSchema):
    """Contracted vessel count and target utilization band."""

    base_vessel_count: int = Field(CURRENT_FLEET_COUNT, ge=0)
    average_utilization_target: float = Field(CORE_FLEET_TARGET_UTILIZATION, ge=0, le=1)
    minimum_utilization_threshold: float = Field(CORE_FLEET_MIN_UTILIZATION, ge=0, le=1)
    maximum_utilization_threshold: float = Field(CORE_FLEET_MAX_UTILIZATION, ge=0)
    max_flex_up_capacity: int = Field(MAX_FLEX_UP_CAPACITY, ge=0)
    contractual_notice_days: int = Field(CONTRACTUAL_NOTICE_DAYS, ge=0)
    day_rate_structure: DayRateStructure = Field(default_factory=DayRateStructure)

    @model_validator(mode="after")
    def check_utilization_band(self) -> "CoreFleetBaseline":
        if self.minimum_utilization_threshold > self.maximum_utilization_threshold:
            raise ValueError("minimum_utilization_threshold exceeds maximum_utilization_threshold")
        return self


def create_default_core_fleet_baseline() -> CoreFleetBaseline:
    """Six-vessel Gulf of Mexico core fleet at the standard PSV day rate."""
    return CoreFleetBaseline()


class FleetGapAnalysis(FrozenSchema):
    """Baseline-relative gap for one scenario."""

    scenario_id: str
    baseline_vessel_count: int
    gap_by_month: dict[str, int] = Field(
        default_factory=dict, description="required - baseline (+ charter, - release)"
    )
    utilization_by_month: dict[str, float] = Field(default_factory=dict)
    average_utilization: float = 0.0
    max_gap: int = 0
    min_gap: int = 0
    peak_gap_month: str = ""
    plus_up_months: list[str] = Field(default_factory=list)
    shed_months: list[str] = Field(default_factory=list)
    high_risk_months: list[str] = Field(default_factory=list)
    low_utilization_months: list[str] = Field(default_factory=list)
    estimated_charter_cost: Decimal = Decimal("0")
    potential_release_savings: Decimal = Decimal("0")
