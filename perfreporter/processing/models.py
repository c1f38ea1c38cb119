"""Data models for aggregated test results."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from perfreporter.loader.models import AggregationType, SampleGroup, SampleUnit

# Baseline value of a sample group that has not been compared
NO_BASELINE_VALUE = -1.0


class TestState(str, Enum):
    """Overall outcome of a test after baseline evaluation."""

    __test__ = False

    SUCCESS = "success"
    FAILURE = "failure"


class MeasurementResult(str, Enum):
    """Classification of a sample group against its baseline."""

    NEUTRAL = "neutral"
    REGRESSION = "regression"
    PROGRESSION = "progression"


class MergedSampleGroup(SampleGroup):
    """A sample group holding the samples of every execution of one test."""

    test_name: str = Field(..., description="Test the group belongs to")


class SampleGroupResult(BaseModel):
    """Aggregated result for one sample group of a test."""

    sample_group_name: str = Field(..., description="Sample group name")
    sample_unit: SampleUnit = Field(default=SampleUnit.MICROSECOND)
    increase_is_better: bool = Field(default=False)
    threshold: float = Field(default=0.15, ge=0.0)
    aggregation_type: AggregationType = Field(default=AggregationType.AVERAGE)
    percentile: float = Field(default=0.0)

    min: float
    max: float
    median: float
    average: float
    sum: float
    standard_deviation: float
    percentile_value: float
    zeroes: int
    sample_count: int

    aggregated_value: float = Field(
        ..., description="Value compared against the baseline"
    )
    baseline_value: float = Field(
        default=NO_BASELINE_VALUE,
        description="Aggregated value of the matching baseline group",
    )
    regressed: bool = Field(default=False)
    measurement_result: MeasurementResult = Field(default=MeasurementResult.NEUTRAL)

    @property
    def has_baseline(self) -> bool:
        """Check if a baseline comparison was made.

        A baseline whose aggregated value is exactly ``NO_BASELINE_VALUE``
        cannot be told apart from a missing one.
        """
        return self.baseline_value != NO_BASELINE_VALUE


class TestResult(BaseModel):
    """All sample group results of one distinct test in a run."""

    __test__ = False

    test_name: str = Field(..., description="Test name")
    test_categories: list[str] = Field(default_factory=list)
    test_version: str = Field(default="")
    state: TestState = Field(default=TestState.SUCCESS)
    sample_group_results: list[SampleGroupResult] = Field(default_factory=list)

    def get_sample_group_result(self, name: str) -> SampleGroupResult | None:
        """Return the first sample group result with the given name."""
        return next(
            (sg for sg in self.sample_group_results if sg.sample_group_name == name),
            None,
        )

    @property
    def has_regressions(self) -> bool:
        return any(sg.regressed for sg in self.sample_group_results)


class PerformanceTestRunResult(BaseModel):
    """A fully aggregated run, labelled for reporting or for use as a baseline."""

    result_name: str = Field(..., description="Label of this result set")
    is_baseline: bool = Field(default=False)
    test_suite: str = Field(default="")
    start_time: datetime | None = Field(None)

    hardware: dict[str, Any] = Field(default_factory=dict)
    editor: dict[str, Any] = Field(default_factory=dict)
    build_settings: dict[str, Any] = Field(default_factory=dict)
    screen_settings: dict[str, Any] = Field(default_factory=dict)
    quality_settings: dict[str, Any] = Field(default_factory=dict)
    player_settings: dict[str, Any] = Field(default_factory=dict)

    test_results: list[TestResult] = Field(default_factory=list)

    @property
    def has_regressions(self) -> bool:
        """Check if any test failed against its baseline."""
        return any(t.state == TestState.FAILURE for t in self.test_results)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PerformanceTestRunResult":
        """Create a run result from a dictionary produced by ``to_dict``."""
        return cls.model_validate(data)
