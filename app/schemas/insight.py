"""Insight schemas."""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr, field_validator

InsightType = Literal["trend", "alert", "opportunity", "summary"]

# Display-only values attached to an insight
InsightValue = Union[StrictInt, StrictFloat, StrictStr, List[Union[StrictInt, StrictFloat, StrictStr]]]


class InsightRecord(BaseModel):
    """A single human-readable business insight."""

    title: StrictStr = Field(..., min_length=1)
    description: StrictStr = Field(..., min_length=1)
    type: InsightType
    confidence: float
    data: Optional[Dict[str, InsightValue]] = None

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, value: Any) -> float:
        # Numbers only; out-of-range values are clamped rather than rejected
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("confidence must be a number")
        if value != value:
            raise ValueError("confidence must not be NaN")
        return min(1.0, max(0.0, float(value)))
