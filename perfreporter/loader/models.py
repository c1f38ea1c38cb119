"""Data models for raw performance test runs.

A run holds one record per test execution. The same test name may appear
several times when a test was executed repeatedly.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SampleUnit(str, Enum):
    """Unit a sample group is measured in."""

    NANOSECOND = "nanosecond"
    MICROSECOND = "microsecond"
    MILLISECOND = "millisecond"
    SECOND = "second"
    BYTE = "byte"
    KILOBYTE = "kilobyte"
    MEGABYTE = "megabyte"
    GIGABYTE = "gigabyte"
    NONE = "none"


class AggregationType(str, Enum):
    """Statistic used as a sample group's aggregated value."""

    AVERAGE = "average"
    MIN = "min"
    MAX = "max"
    MEDIAN = "median"
    PERCENTILE = "percentile"


class SampleGroupDefinition(BaseModel):
    """How a sample group is measured and judged."""

    name: str = Field(..., description="Sample group name, e.g. 'FrameTime'")
    sample_unit: SampleUnit = Field(
        default=SampleUnit.MICROSECOND, description="Unit of the samples"
    )
    aggregation_type: AggregationType = Field(
        default=AggregationType.AVERAGE,
        description="Preferred statistic for the aggregated value",
    )
    increase_is_better: bool = Field(
        default=False, description="Whether larger values are an improvement"
    )
    threshold: float = Field(
        default=0.15,
        ge=0.0,
        description="Allowed relative deviation from baseline (0.1 = 10%)",
    )
    percentile: float = Field(
        default=0.0,
        ge=0.0,
        lt=1.0,
        description="Percentile to compute (0 means unused)",
    )


class SampleGroup(BaseModel):
    """Samples collected for one group within a single test execution."""

    definition: SampleGroupDefinition
    samples: list[float] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def increase_is_better(self) -> bool:
        return self.definition.increase_is_better


class PerformanceTestResult(BaseModel):
    """One recorded execution of a test."""

    name: str = Field(..., description="Test name")
    categories: list[str] = Field(default_factory=list)
    version: str = Field(default="", description="Test version string")
    start_time: float = Field(default=0.0, description="Epoch milliseconds")
    end_time: float = Field(default=0.0, description="Epoch milliseconds")
    sample_groups: list[SampleGroup] = Field(default_factory=list)


class PerformanceTestRun(BaseModel):
    """A complete raw run as produced by the ingestion layer.

    Environment fields are carried through unchanged.
    """

    test_suite: str = Field(default="", description="Test suite name")
    start_time: datetime | None = Field(None, description="When the run started")
    end_time: datetime | None = Field(None, description="When the run ended")

    hardware: dict[str, Any] = Field(default_factory=dict)
    editor: dict[str, Any] = Field(default_factory=dict)
    build_settings: dict[str, Any] = Field(default_factory=dict)
    screen_settings: dict[str, Any] = Field(default_factory=dict)
    quality_settings: dict[str, Any] = Field(default_factory=dict)
    player_settings: dict[str, Any] = Field(default_factory=dict)

    results: list[PerformanceTestResult] = Field(default_factory=list)

    @property
    def test_names(self) -> list[str]:
        """Distinct test names in first-seen order."""
        return list(dict.fromkeys(r.name for r in self.results))
