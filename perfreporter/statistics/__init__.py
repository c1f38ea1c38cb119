"""Statistics for merged sample groups."""

from .calculator import StatisticsCalculator
from .models import SampleGroupStatistics
from .sigfig import truncate_to_sig_figs

__all__ = [
    "SampleGroupStatistics",
    "StatisticsCalculator",
    "truncate_to_sig_figs",
]
