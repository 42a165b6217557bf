"""
Validation warnings.

Data-quality findings that do not stop a forecast but must reach the
caller alongside the result.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import FrozenSchema


class WarningCode(str, Enum):
    """Kinds of data-quality findings."""
    INJECT_WINDOW_INVERTED = "INJECT_WINDOW_INVERTED"
    INJECT_NOT_FOUND = "INJECT_NOT_FOUND"
    INJECT_OUTSIDE_HORIZON = "INJECT_OUTSIDE_HORIZON"
    INJECT_DUPLICATE_REFERENCE = "INJECT_DUPLICATE_REFERENCE"
    NON_CONTIGUOUS_HISTORY = "NON_CONTIGUOUS_HISTORY"
    NO_VESSEL_DATA = "NO_VESSEL_DATA"
    NO_DEMAND_DATA = "NO_DEMAND_DATA"
    BELOW_CONFIDENCE_THRESHOLD = "BELOW_CONFIDENCE_THRESHOLD"


class ValidationWarning(FrozenSchema):
    """A single data-quality finding."""

    code: WarningCode
    message: str
    scenario_id: Optional[str] = None
    inject_id: Optional[str] = None
    details: dict = Field(default_factory=dict)
