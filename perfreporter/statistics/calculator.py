"""Descriptive statistics for sample groups.

The median and percentile rules below must stay exactly as they are:
previously aggregated baselines were produced with them, and comparisons
against those baselines rely on identical arithmetic.
"""

import math
from collections.abc import Sequence

from perfreporter.core.exceptions import InvalidInputError

from .models import SampleGroupStatistics

# Samples with an absolute value below this count as zero
ZERO_TOLERANCE = 0.0001

# Percentiles below this are treated as "not requested"
PERCENTILE_EPSILON = 0.00001


def _require_samples(samples: Sequence[float], what: str) -> None:
    if not samples:
        raise InvalidInputError(f"Cannot calculate {what} of empty sample list")


class StatisticsCalculator:
    """Calculator for the statistics of a single sample group.

    All methods are pure; ``compute`` bundles them into a
    SampleGroupStatistics record.
    """

    @staticmethod
    def calculate_min(samples: Sequence[float]) -> float:
        _require_samples(samples, "min")
        return min(samples)

    @staticmethod
    def calculate_max(samples: Sequence[float]) -> float:
        _require_samples(samples, "max")
        return max(samples)

    @staticmethod
    def calculate_sum(samples: Sequence[float]) -> float:
        _require_samples(samples, "sum")
        total = 0.0
        for sample in samples:
            total += sample
        return total

    @staticmethod
    def calculate_average(samples: Sequence[float]) -> float:
        """Calculate arithmetic mean.

        Raises:
            InvalidInputError: If samples is empty.
        """
        _require_samples(samples, "average")
        mean = StatisticsCalculator.calculate_sum(samples) / len(samples)
        # Accumulated rounding can push the mean one ulp outside the samples
        return min(max(mean, min(samples)), max(samples))

    @staticmethod
    def calculate_median(samples: Sequence[float]) -> float:
        """Return the element at index ``n // 2`` of the sorted samples.

        For an even number of samples this is the upper of the two middle
        values, not their mean: ``[1, 2, 3, 4]`` yields ``3``.

        Raises:
            InvalidInputError: If samples is empty.
        """
        _require_samples(samples, "median")
        sorted_samples = sorted(samples)
        return sorted_samples[len(sorted_samples) // 2]

    @staticmethod
    def calculate_percentile(samples: Sequence[float], percentile: float) -> float:
        """Calculate a percentile by linear interpolation between ranks.

        Uses rank ``p * (n + 1)`` with 1-based positions. A percentile below
        1e-5 means "unused" and is returned unchanged. Ranks falling outside
        the samples are clamped to the smallest or largest sample.

        Args:
            samples: Sample values in any order.
            percentile: Fraction in ``[0, 1)``.

        Returns:
            Interpolated percentile value.

        Raises:
            InvalidInputError: If samples is empty.
        """
        if percentile < PERCENTILE_EPSILON:
            return percentile

        _require_samples(samples, "percentile")
        sorted_samples = sorted(samples)
        n = len(sorted_samples)
        if n == 1:
            return sorted_samples[0]

        rank = percentile * (n + 1)
        integral = math.floor(rank)
        fractional = rank % 1

        if integral < 1:
            return sorted_samples[0]
        if integral >= n:
            return sorted_samples[-1]

        lower = sorted_samples[integral - 1]
        upper = sorted_samples[integral]
        return lower + fractional * (upper - lower)

    @staticmethod
    def calculate_standard_deviation(
        samples: Sequence[float], average: float | None = None
    ) -> float:
        """Calculate population standard deviation (divides by N).

        Args:
            samples: Sample values.
            average: Precomputed mean, if available.

        Raises:
            InvalidInputError: If samples is empty.
        """
        _require_samples(samples, "standard deviation")
        # Identical samples must give exactly 0, whatever rounding the mean had
        if min(samples) == max(samples):
            return 0.0
        if average is None:
            average = StatisticsCalculator.calculate_average(samples)

        sum_of_squares = 0.0
        for sample in samples:
            sum_of_squares += (sample - average) * (sample - average)
        return math.sqrt(sum_of_squares / len(samples))

    @staticmethod
    def count_zeroes(samples: Sequence[float]) -> int:
        return sum(1 for sample in samples if abs(sample) < ZERO_TOLERANCE)

    def compute(
        self, samples: Sequence[float], percentile: float = 0.0
    ) -> SampleGroupStatistics:
        """Compute all statistics for a sample group.

        A single sample short-circuits: every location statistic equals the
        sample, while percentile value and standard deviation are 0.

        Args:
            samples: Non-empty sample values.
            percentile: Percentile requested by the group definition.

        Returns:
            SampleGroupStatistics with all fields populated.

        Raises:
            InvalidInputError: If samples is empty.
        """
        if not samples:
            raise InvalidInputError("Cannot compute statistics for empty sample list")

        if len(samples) == 1:
            value = samples[0]
            return SampleGroupStatistics(
                min=value,
                max=value,
                median=value,
                average=value,
                sum=value,
                standard_deviation=0.0,
                percentile_value=0.0,
                zero_count=self.count_zeroes(samples),
                sample_count=1,
            )

        average = self.calculate_average(samples)
        return SampleGroupStatistics(
            min=self.calculate_min(samples),
            max=self.calculate_max(samples),
            median=self.calculate_median(samples),
            average=average,
            sum=self.calculate_sum(samples),
            standard_deviation=self.calculate_standard_deviation(samples, average),
            percentile_value=self.calculate_percentile(samples, percentile),
            zero_count=self.count_zeroes(samples),
            sample_count=len(samples),
        )
