"""CV quality assessment schema."""

import math
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QualityReport(BaseModel):
    """Overall score plus strengths, weaknesses and suggestions for one CV."""

    model_config = ConfigDict(populate_by_name=True)

    overall_score: int = Field(..., alias="overallScore", description="0-100")
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)

    @field_validator("overall_score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        if value is None or isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise ValueError(f"overallScore must be a number, got {type(value).__name__}")
        score = float(value)
        if not math.isfinite(score):
            raise ValueError("overallScore must be finite")
        return max(0, min(100, int(round(score))))

    @field_validator("strengths", "weaknesses", "suggestions", mode="before")
    @classmethod
    def _string_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"expected a list of strings, got {type(value).__name__}")
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
