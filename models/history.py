"""
Historical input series.

Delivered by the ingestion pipeline already normalized: one series per
field location (deliveries demanded) and one per vessel (deliveries
completed), each keyed by YYYY-MM.
"""

from enum import Enum

from pydantic import Field, field_validator

from models.base import FrozenSchema
from utils.month_utils import is_contiguous, parse_month_key


class FacilityType(str, Enum):
    """What a field location supports; drives the drilling/production split."""
    DRILLING = "drilling"
    PRODUCTION = "production"
    SUPPORT = "support"


def _normalize_monthly(value: dict[str, float]) -> dict[str, float]:
    """Validate keys and return the mapping in chronological order."""
    for month_key in value:
        parse_month_key(month_key)
    return {k: float(value[k]) for k in sorted(value)}


class LocationDemandSeries(FrozenSchema):
    """Monthly delivery demand history for one field location."""

    location: str = Field(..., min_length=1, description="Location identifier")
    facility_type: FacilityType = Field(
        default=FacilityType.DRILLING,
        description="Drilling, production or support location"
    )
    monthly_deliveries: dict[str, float] = Field(
        default_factory=dict,
        description="YYYY-MM -> delivery count"
    )

    @field_validator("monthly_deliveries")
    @classmethod
    def normalize_months(cls, value: dict[str, float]) -> dict[str, float]:
        return _normalize_monthly(value)

    @property
    def series_values(self) -> list[float]:
        return list(self.monthly_deliveries.values())

    @property
    def is_contiguous(self) -> bool:
        return is_contiguous(self.monthly_deliveries)


class VesselCapabilitySeries(FrozenSchema):
    """Monthly deliveries completed by one vessel."""

    vessel_name: str = Field(..., min_length=1, description="Vessel identifier")
    monthly_deliveries: dict[str, float] = Field(
        default_factory=dict,
        description="YYYY-MM -> deliveries completed"
    )

    @field_validator("monthly_deliveries")
    @classmethod
    def normalize_months(cls, value: dict[str, float]) -> dict[str, float]:
        return _normalize_monthly(value)

    @property
    def series_values(self) -> list[float]:
        return list(self.monthly_deliveries.values())

    @property
    def is_contiguous(self) -> bool:
        return is_contiguous(self.monthly_deliveries)
