"""Loading of canonical run records."""

from .loader import load_run, load_run_from_dict
from .models import (
    AggregationType,
    PerformanceTestResult,
    PerformanceTestRun,
    SampleGroup,
    SampleGroupDefinition,
    SampleUnit,
)

__all__ = [
    "AggregationType",
    "PerformanceTestResult",
    "PerformanceTestRun",
    "SampleGroup",
    "SampleGroupDefinition",
    "SampleUnit",
    "load_run",
    "load_run_from_dict",
]
