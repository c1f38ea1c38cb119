"""Merging of repeated test executions."""

from perfreporter.core.logging import get_logger
from perfreporter.loader.models import PerformanceTestRun

from .models import MergedSampleGroup

logger = get_logger(__name__)


class ExecutionMerger:
    """Combine the sample groups of every execution of the same test.

    Groups are matched by name within a test. Group order follows first
    appearance and samples are concatenated in execution order. The raw
    run is left untouched: merged groups are fresh objects.
    """

    def merge(self, run: PerformanceTestRun) -> dict[str, list[MergedSampleGroup]]:
        """Merge a run's executions.

        Args:
            run: Raw run with one record per test execution.

        Returns:
            Mapping of test name to its merged sample groups, in order of
            first appearance. Tests without any sample group map to an
            empty list.
        """
        merged: dict[str, list[MergedSampleGroup]] = {
            name: [] for name in run.test_names
        }
        by_name: dict[str, dict[str, MergedSampleGroup]] = {
            name: {} for name in run.test_names
        }

        for execution in run.results:
            groups = merged[execution.name]
            index = by_name[execution.name]

            for sample_group in execution.sample_groups:
                existing = index.get(sample_group.name)
                if existing is not None:
                    existing.samples.extend(sample_group.samples)
                    continue

                new_group = MergedSampleGroup(
                    test_name=execution.name,
                    definition=sample_group.definition.model_copy(),
                    samples=list(sample_group.samples),
                )
                index[sample_group.name] = new_group
                groups.append(new_group)

        logger.debug(
            "executions_merged",
            executions=len(run.results),
            tests=len(merged),
            sample_groups=sum(len(groups) for groups in merged.values()),
        )
        return merged
