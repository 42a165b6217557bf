"""
Inject models.

An inject is an externally authored, time-bounded and probability-weighted
adjustment (drilling campaign, maintenance window, contract change).
The engine reads injects; it never mutates them.
"""

from enum import Enum

from pydantic import Field

from models.base import FrozenSchema
from models.validation import ValidationWarning
from utils.month_utils import MONTH_KEY_PATTERN


class InjectImpact(str, Enum):
    """Which series an inject adjusts, and in which direction."""
    DEMAND_INCREASE = "demand_increase"
    DEMAND_DECREASE = "demand_decrease"
    CAPABILITY_REDUCTION = "capability_reduction"

    @property
    def affects_demand(self) -> bool:
        return self in (InjectImpact.DEMAND_INCREASE, InjectImpact.DEMAND_DECREASE)

    @property
    def sign(self) -> int:
        """+1 for increases, -1 for decreases and reductions."""
        return 1 if self == InjectImpact.DEMAND_INCREASE else -1


class InjectType(str, Enum):
    """Business origin of an inject."""
    DRILLING_CAMPAIGN = "drilling_campaign"
    MAINTENANCE_PROJECT = "maintenance_project"
    CONTRACT_CHANGE = "contract_change"
    EMERGENCY_RESPONSE = "emergency_response"
    SPECIAL_PROJECT = "special_project"


class Inject(FrozenSchema):
    """A discrete future event adjusting demand or capability."""

    id: str = Field(..., min_length=1)
    name: str = ""
    description: str = ""
    inject_type: InjectType = InjectType.SPECIAL_PROJECT
    start_month: str = Field(..., pattern=MONTH_KEY_PATTERN)
    end_month: str = Field(..., pattern=MONTH_KEY_PATTERN, description="Inclusive")
    magnitude: float = Field(..., description="Vessel-count delta before probability weighting")
    impact: InjectImpact
    probability: float = Field(1.0, ge=0, le=1)
    locations: list[str] = Field(default_factory=list)
    is_active: bool = True

    @property
    def effective_adjustment(self) -> float:
        """magnitude × probability, always non-negative."""
        return abs(self.magnitude) * self.probability

    @property
    def signed_adjustment(self) -> float:
        return self.impact.sign * self.effective_adjustment

    @property
    def has_valid_window(self) -> bool:
        # YYYY-MM strings sort chronologically
        return self.start_month <= self.end_month


class InjectApplication(FrozenSchema):
    """Outcome of applying a set of injects onto one monthly series."""

    adjusted_forecast: dict[str, float] = Field(default_factory=dict)
    impact_by_month: dict[str, float] = Field(default_factory=dict)
    applied_inject_ids: list[str] = Field(default_factory=list)
    skipped_inject_ids: list[str] = Field(default_factory=list)
    warnings: list[ValidationWarning] = Field(default_factory=list)
