"""End-to-end processing of a performance test run."""

from collections.abc import Sequence

from perfreporter.baseline.comparison import DEFAULT_SIG_FIGS, RegressionEvaluator
from perfreporter.baseline.models import EvaluationSummary
from perfreporter.core.logging import bind_context, get_logger
from perfreporter.loader.models import AggregationType, PerformanceTestRun
from perfreporter.processing.aggregator import ResultAggregator
from perfreporter.processing.merger import ExecutionMerger
from perfreporter.processing.models import PerformanceTestRunResult, TestResult

logger = get_logger(__name__)


class PerformanceTestRunProcessor:
    """Run the merge, aggregate and evaluate stages for a raw run.

    Args:
        sig_figs: Significant figures used for baseline comparison.
        aggregation_type: Statistic used as the aggregated value; ``None``
            honors each sample group's definition.
    """

    def __init__(
        self,
        sig_figs: int = DEFAULT_SIG_FIGS,
        aggregation_type: AggregationType | None = AggregationType.AVERAGE,
    ) -> None:
        self.merger = ExecutionMerger()
        self.aggregator = ResultAggregator(aggregation_type=aggregation_type)
        self.evaluator = RegressionEvaluator(sig_figs=sig_figs)

    def get_test_results(self, run: PerformanceTestRun) -> list[TestResult]:
        """Merge repeated executions and aggregate them per test."""
        merged = self.merger.merge(run)
        return self.aggregator.aggregate(run, merged)

    def update_test_results_based_on_baseline(
        self,
        baseline_results: Sequence[TestResult],
        test_results: Sequence[TestResult],
        sig_figs: int | None = None,
    ) -> EvaluationSummary:
        """Evaluate test results against baseline results in place."""
        return self.evaluator.evaluate(baseline_results, test_results, sig_figs)

    @staticmethod
    def create_test_run_result(
        run: PerformanceTestRun,
        test_results: list[TestResult],
        result_name: str,
        is_baseline: bool = False,
    ) -> PerformanceTestRunResult:
        """Label aggregated test results with the run's metadata."""
        return PerformanceTestRunResult(
            result_name=result_name,
            is_baseline=is_baseline,
            test_suite=run.test_suite,
            start_time=run.start_time,
            hardware=run.hardware,
            editor=run.editor,
            build_settings=run.build_settings,
            screen_settings=run.screen_settings,
            quality_settings=run.quality_settings,
            player_settings=run.player_settings,
            test_results=test_results,
        )

    def process(
        self,
        run: PerformanceTestRun,
        result_name: str,
        baseline: PerformanceTestRunResult | None = None,
        sig_figs: int | None = None,
        is_baseline: bool = False,
    ) -> tuple[PerformanceTestRunResult, EvaluationSummary | None]:
        """Aggregate a run and optionally evaluate it against a baseline.

        Args:
            run: Raw run to process.
            result_name: Label for the produced result.
            baseline: Previously aggregated baseline, if any.
            sig_figs: Overrides the processor's significant figures.
            is_baseline: Mark the result as a baseline.

        Returns:
            Tuple of (run result, evaluation summary or None without baseline).
        """
        with bind_context(result_name=result_name, test_suite=run.test_suite):
            test_results = self.get_test_results(run)

            summary = None
            if baseline is not None:
                summary = self.update_test_results_based_on_baseline(
                    baseline.test_results, test_results, sig_figs
                )

            logger.info(
                "run_processed",
                tests=len(test_results),
                is_baseline=is_baseline,
                baseline=baseline.result_name if baseline is not None else None,
            )

        return (
            self.create_test_run_result(run, test_results, result_name, is_baseline),
            summary,
        )
