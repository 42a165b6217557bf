"""
Management recommendation schemas.

Recommendations are generated fresh on every forecast run; their
status lifecycle beyond 'pending' belongs to the caller.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import FrozenSchema


class RecommendationType(str, Enum):
    """What kind of fleet action is being recommended."""
    VESSEL_ACQUISITION = "vessel_acquisition"      # Charter more vessels
    CAPACITY_OPTIMIZATION = "capacity_optimization"  # Consider release
    UTILIZATION_WARNING = "utilization_warning"    # Over/under-utilization flag
    CAPACITY_PLANNING = "capacity_planning"        # Cross-scenario hedge


class RecommendationPriority(str, Enum):
    """Priority levels, highest first."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    RecommendationPriority.CRITICAL: 0,
    RecommendationPriority.HIGH: 1,
    RecommendationPriority.MEDIUM: 2,
    RecommendationPriority.LOW: 3,
}


class Timeframe(str, Enum):
    IMMEDIATE = "immediate"
    NEXT_3_MONTHS = "next_3_months"
    NEXT_QUARTER = "next_quarter"
    NEXT_6_MONTHS = "next_6_months"


class RecommendationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ManagementRecommendation(FrozenSchema):
    """A single justified fleet recommendation."""

    id: str
    type: RecommendationType
    priority: RecommendationPriority
    title: str
    description: str
    recommended_action: str
    timeframe: Timeframe
    target_month: Optional[str] = None

    # Impact
    vessel_impact: int = Field(0, description="Vessels to add (+) or release (-)")
    cost_impact: Optional[Decimal] = Field(None, description="USD over the affected months")
    demand_impact: float = Field(0.0, description="Deliveries per month affected")
    utilization_impact: float = Field(0.0, description="Expected utilization change")

    # Justification
    trigger_conditions: list[str] = Field(default_factory=list)
    trigger_values: dict[str, float | int | str] = Field(
        default_factory=dict, description="Literal measured values behind the trigger"
    )
    alternative_options: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)

    # Metadata
    confidence: float = Field(0.0, ge=0, le=1)
    based_on_scenarios: list[str] = Field(default_factory=list)
    status: RecommendationStatus = RecommendationStatus.PENDING
