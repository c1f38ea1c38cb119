"""Merging and aggregation of performance test runs."""

from .models import (
    NO_BASELINE_VALUE,
    MeasurementResult,
    MergedSampleGroup,
    PerformanceTestRunResult,
    SampleGroupResult,
    TestResult,
    TestState,
)
from .aggregator import ResultAggregator, select_aggregated_value
from .merger import ExecutionMerger

__all__ = [
    "ExecutionMerger",
    "MeasurementResult",
    "MergedSampleGroup",
    "NO_BASELINE_VALUE",
    "PerformanceTestRunResult",
    "ResultAggregator",
    "SampleGroupResult",
    "TestResult",
    "TestState",
    "select_aggregated_value",
]
