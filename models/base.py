"""
Base schemas for all models.

Inputs and forecast results are frozen: a changed input means a new
forecast run, never an in-place patch of an old result.
"""

from pydantic import BaseModel, ConfigDict


class FrozenSchema(BaseModel):
    """Base for immutable input records and forecast results."""
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        frozen=True
    )


class ValueRange(FrozenSchema):
    """Min / max / average across a set of values."""
    min: float = 0.0
    max: float = 0.0
    average: float = 0.0

    @classmethod
    def from_values(cls, values: list[float]) -> "ValueRange":
        """Empty input gives an all-zero range."""
        if not values:
            return cls()
        return cls(
            min=min(values),
            max=max(values),
            average=round(sum(values) / len(values), 3),
        )
