"""Baseline module for perfreporter.

Provides regression detection against a baseline run and persistence of
aggregated results.
"""

from .comparison import (
    DEFAULT_SIG_FIGS,
    RegressionEvaluator,
    classify,
)
from .models import EvaluationSummary
from .storage import (
    load_result,
    save_result,
)

__all__ = [
    # Models
    "EvaluationSummary",
    # Comparison
    "DEFAULT_SIG_FIGS",
    "RegressionEvaluator",
    "classify",
    # Storage
    "load_result",
    "save_result",
]
