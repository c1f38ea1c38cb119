"""Aggregation of merged sample groups into test results."""

from perfreporter.core.exceptions import InvariantViolationError
from perfreporter.core.logging import get_logger
from perfreporter.loader.models import (
    AggregationType,
    PerformanceTestResult,
    PerformanceTestRun,
)
from perfreporter.statistics.calculator import StatisticsCalculator
from perfreporter.statistics.models import SampleGroupStatistics

from .models import (
    NO_BASELINE_VALUE,
    MergedSampleGroup,
    SampleGroupResult,
    TestResult,
    TestState,
)

logger = get_logger(__name__)


def select_aggregated_value(
    stats: SampleGroupStatistics, aggregation_type: AggregationType
) -> float:
    """Pick the statistic used for baseline comparison."""
    if aggregation_type == AggregationType.AVERAGE:
        return stats.average
    if aggregation_type == AggregationType.MIN:
        return stats.min
    if aggregation_type == AggregationType.MAX:
        return stats.max
    if aggregation_type == AggregationType.MEDIAN:
        return stats.median
    if aggregation_type == AggregationType.PERCENTILE:
        return stats.percentile_value
    raise ValueError(f"Unhandled aggregation type: {aggregation_type}")


class ResultAggregator:
    """Build TestResults from merged sample groups.

    Args:
        aggregation_type: Statistic used as every group's aggregated value.
            ``None`` uses the aggregation type of each group's definition.
        calculator: Statistics calculator to use.
    """

    def __init__(
        self,
        aggregation_type: AggregationType | None = AggregationType.AVERAGE,
        calculator: StatisticsCalculator | None = None,
    ) -> None:
        self.aggregation_type = aggregation_type
        self.calculator = calculator or StatisticsCalculator()

    def build_sample_group_result(
        self, sample_group: MergedSampleGroup
    ) -> SampleGroupResult:
        """Compute statistics for one merged group and wrap them in a result."""
        definition = sample_group.definition
        stats = self.calculator.compute(sample_group.samples, definition.percentile)
        aggregation_type = self.aggregation_type or definition.aggregation_type

        return SampleGroupResult(
            sample_group_name=definition.name,
            sample_unit=definition.sample_unit,
            increase_is_better=definition.increase_is_better,
            threshold=definition.threshold,
            aggregation_type=aggregation_type,
            percentile=definition.percentile,
            min=stats.min,
            max=stats.max,
            median=stats.median,
            average=stats.average,
            sum=stats.sum,
            standard_deviation=stats.standard_deviation,
            percentile_value=stats.percentile_value,
            zeroes=stats.zero_count,
            sample_count=stats.sample_count,
            aggregated_value=select_aggregated_value(stats, aggregation_type),
            baseline_value=NO_BASELINE_VALUE,
            regressed=False,
        )

    def aggregate(
        self,
        run: PerformanceTestRun,
        merged: dict[str, list[MergedSampleGroup]],
    ) -> list[TestResult]:
        """Create one TestResult per merged test.

        Args:
            run: Raw run the merged groups were produced from; supplies
                test categories and version.
            merged: Output of ExecutionMerger.merge.

        Returns:
            Test results in merged order, all in the success state.

        Raises:
            InvariantViolationError: If a merged test name has no raw record.
            InvalidInputError: If a merged group has no samples.
        """
        results: list[TestResult] = []
        for test_name, sample_groups in merged.items():
            raw = self._first_raw_result(run, test_name)
            results.append(
                TestResult(
                    test_name=test_name,
                    test_categories=list(raw.categories),
                    test_version=raw.version,
                    state=TestState.SUCCESS,
                    sample_group_results=[
                        self.build_sample_group_result(sg) for sg in sample_groups
                    ],
                )
            )

        logger.debug("test_results_aggregated", tests=len(results))
        return results

    @staticmethod
    def _first_raw_result(
        run: PerformanceTestRun, test_name: str
    ) -> PerformanceTestResult:
        for raw in run.results:
            if raw.name == test_name:
                return raw
        raise InvariantViolationError(
            f"No raw result record for merged test '{test_name}'"
        )
