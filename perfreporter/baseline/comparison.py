"""Regression detection against a baseline run."""

from collections.abc import Sequence

from perfreporter.core.exceptions import InvalidInputError
from perfreporter.core.logging import get_logger
from perfreporter.processing.models import (
    MeasurementResult,
    SampleGroupResult,
    TestResult,
    TestState,
)
from perfreporter.statistics.sigfig import truncate_to_sig_figs

from .models import EvaluationSummary

logger = get_logger(__name__)

DEFAULT_SIG_FIGS = 2


def _check_sig_figs(sig_figs: int) -> int:
    if sig_figs < 1:
        raise InvalidInputError(f"sig_figs must be at least 1, got {sig_figs}")
    return sig_figs


def classify(sample_group: SampleGroupResult, sig_figs: int) -> MeasurementResult:
    """Classify a sample group against its baseline value.

    The band is ``baseline ± baseline * threshold``. The aggregated value
    and both band edges are truncated to ``sig_figs`` significant figures
    before comparing, so noise in the trailing digits cannot flip the
    result.

    Both edges are checked one after the other and the second check wins
    when both match, which can only happen with a degenerate band.

    Args:
        sample_group: Group with ``baseline_value`` already set.
        sig_figs: Significant figures kept before comparing.

    Returns:
        Neutral, Regression or Progression.
    """
    baseline = sample_group.baseline_value
    positive_threshold = baseline + baseline * sample_group.threshold
    negative_threshold = baseline - baseline * sample_group.threshold

    value = truncate_to_sig_figs(sample_group.aggregated_value, sig_figs)
    upper = truncate_to_sig_figs(positive_threshold, sig_figs)
    lower = truncate_to_sig_figs(negative_threshold, sig_figs)

    result = MeasurementResult.NEUTRAL
    if sample_group.increase_is_better:
        if value < lower:
            result = MeasurementResult.REGRESSION
        if value > upper:
            result = MeasurementResult.PROGRESSION
    else:
        if value > upper:
            result = MeasurementResult.REGRESSION
        if value < lower:
            result = MeasurementResult.PROGRESSION
    return result


class RegressionEvaluator:
    """Compare candidate test results with baseline test results.

    Tests are matched by exact name and sample groups by exact name within
    a matched test. Groups without a match are left uncompared. The
    baseline is only read; candidate results are updated in place.
    """

    def __init__(self, sig_figs: int = DEFAULT_SIG_FIGS) -> None:
        self.sig_figs = _check_sig_figs(sig_figs)

    def classify(
        self, sample_group: SampleGroupResult, sig_figs: int | None = None
    ) -> MeasurementResult:
        return classify(sample_group, self.sig_figs if sig_figs is None else sig_figs)

    def evaluate(
        self,
        baseline_results: Sequence[TestResult],
        candidate_results: Sequence[TestResult],
        sig_figs: int | None = None,
    ) -> EvaluationSummary:
        """Evaluate candidate results against a baseline.

        Sets ``baseline_value``, ``regressed`` and ``measurement_result`` on
        every matched group and recomputes the state of every matched test:
        failure when any of its groups regressed, success otherwise. Tests
        without a baseline keep their state. Running it again on the same
        inputs gives the same outcome.

        Args:
            baseline_results: Aggregated baseline tests.
            candidate_results: Aggregated candidate tests, updated in place.
            sig_figs: Overrides the evaluator's significant figures.

        Returns:
            EvaluationSummary with per-classification counts.

        Raises:
            InvalidInputError: If the ``sig_figs`` override is below 1.
        """
        sig_figs = self.sig_figs if sig_figs is None else _check_sig_figs(sig_figs)
        summary = EvaluationSummary(sig_figs=sig_figs)

        baseline_by_name: dict[str, TestResult] = {}
        for baseline_test in baseline_results:
            baseline_by_name.setdefault(baseline_test.test_name, baseline_test)

        for test_result in candidate_results:
            summary.total_tests += 1
            baseline_test = baseline_by_name.get(test_result.test_name)
            if baseline_test is None:
                summary.unmatched_tests += 1
                logger.debug("baseline_test_missing", test=test_result.test_name)
                continue

            for sample_group in test_result.sample_group_results:
                baseline_group = baseline_test.get_sample_group_result(
                    sample_group.sample_group_name
                )
                if baseline_group is None:
                    summary.unmatched_groups += 1
                    continue

                self._apply(sample_group, baseline_group, sig_figs)
                summary.compared_groups += 1
                if sample_group.measurement_result == MeasurementResult.REGRESSION:
                    summary.regressions += 1
                elif sample_group.measurement_result == MeasurementResult.PROGRESSION:
                    summary.progressions += 1
                else:
                    summary.neutral += 1

            if test_result.has_regressions:
                test_result.state = TestState.FAILURE
                summary.failed_tests += 1
            else:
                test_result.state = TestState.SUCCESS

        logger.info(
            "baseline_evaluated",
            tests=summary.total_tests,
            compared_groups=summary.compared_groups,
            regressions=summary.regressions,
            progressions=summary.progressions,
        )
        return summary

    @staticmethod
    def _apply(
        sample_group: SampleGroupResult,
        baseline_group: SampleGroupResult,
        sig_figs: int,
    ) -> None:
        sample_group.baseline_value = baseline_group.aggregated_value
        sample_group.measurement_result = classify(sample_group, sig_figs)
        sample_group.regressed = (
            sample_group.measurement_result == MeasurementResult.REGRESSION
        )
