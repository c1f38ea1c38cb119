"""Data models for sample group statistics."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SampleGroupStatistics(BaseModel):
    """Descriptive statistics of one merged sample group.

    Computed once per group and never modified afterwards.
    """

    model_config = ConfigDict(frozen=True)

    min: float = Field(..., description="Minimum sample")
    max: float = Field(..., description="Maximum sample")
    median: float = Field(..., description="Upper-middle element of the sorted samples")
    average: float = Field(..., description="Arithmetic mean")
    sum: float = Field(..., description="Sum of samples")
    standard_deviation: float = Field(
        ..., description="Population standard deviation", ge=0.0
    )
    percentile_value: float = Field(..., description="Requested percentile")
    zero_count: int = Field(..., description="Samples with |x| < 0.0001", ge=0)
    sample_count: int = Field(..., description="Number of samples", ge=1)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporting."""
        return self.model_dump()
