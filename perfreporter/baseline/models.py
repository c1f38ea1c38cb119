"""Data models for baseline evaluation."""

from typing import Any

from pydantic import BaseModel, Field


class EvaluationSummary(BaseModel):
    """Counts produced by evaluating a candidate run against a baseline."""

    sig_figs: int = Field(..., description="Significant figures used", ge=1)
    total_tests: int = Field(default=0, description="Candidate tests seen")
    compared_groups: int = Field(
        default=0, description="Sample groups with a baseline match"
    )
    regressions: int = Field(default=0, description="Groups classified as regression")
    progressions: int = Field(
        default=0, description="Groups classified as progression"
    )
    neutral: int = Field(default=0, description="Groups within the threshold band")
    unmatched_tests: int = Field(default=0, description="Tests absent from baseline")
    unmatched_groups: int = Field(
        default=0, description="Groups absent from the matching baseline test"
    )
    failed_tests: int = Field(default=0, description="Tests in the failure state")

    @property
    def has_regressions(self) -> bool:
        """Check if any regressions were detected."""
        return self.regressions > 0

    @property
    def has_progressions(self) -> bool:
        """Check if any progressions were detected."""
        return self.progressions > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            **self.model_dump(),
            "has_regressions": self.has_regressions,
            "has_progressions": self.has_progressions,
        }
