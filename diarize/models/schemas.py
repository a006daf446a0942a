"""Pydantic schemas for model files and match results."""

import math
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# ============================================================================
# Model File Schemas
# ============================================================================

class GaussianRecord(BaseModel):
    """One diagonal Gaussian as stored on disk."""
    weight: float = Field(..., ge=0.0)
    mean: list[float] = Field(..., min_length=1)
    variance: list[float] = Field(..., min_length=1)

    @field_validator("variance")
    @classmethod
    def variance_positive(cls, value: list[float]) -> list[float]:
        if any(v <= 0 for v in value):
            raise ValueError("variances must be strictly positive")
        return value

    @model_validator(mode="after")
    def same_dimension(self) -> "GaussianRecord":
        if len(self.mean) != len(self.variance):
            raise ValueError(
                f"mean has {len(self.mean)} dimensions but variance has {len(self.variance)}"
            )
        return self


class MixtureDocument(BaseModel):
    """A stored Gaussian mixture. ``mean_log_likelihood`` is null when unknown."""
    name: Optional[str] = None
    mean_log_likelihood: Optional[float] = None
    components: list[GaussianRecord] = Field(default_factory=list)

    @field_validator("mean_log_likelihood")
    @classmethod
    def nan_as_null(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and math.isnan(value):
            return None
        return value

    @model_validator(mode="after")
    def uniform_dimension(self) -> "MixtureDocument":
        dims = {len(c.mean) for c in self.components}
        if len(dims) > 1:
            raise ValueError(f"components have differing dimensions: {sorted(dims)}")
        return self


# ============================================================================
# Matching Schemas
# ============================================================================

class MatchResult(BaseModel):
    """Outcome of comparing two speakers."""
    is_match: bool = False
    decided: bool = False  # False when the pair could not be scored
    score: Optional[float] = None
    reason: Optional[str] = None  # why no decision was taken
