"""Tests for ExecutionMerger."""

from perfreporter.loader.models import (
    PerformanceTestResult,
    PerformanceTestRun,
    SampleGroup,
    SampleGroupDefinition,
)
from perfreporter.processing.merger import ExecutionMerger


def _group(name: str, samples: list[float], **definition: object) -> SampleGroup:
    return SampleGroup(
        definition=SampleGroupDefinition(name=name, **definition),
        samples=samples,
    )


class TestExecutionMerger:
    """Tests for merging repeated executions."""

    def test_concatenates_in_execution_order(self) -> None:
        run = PerformanceTestRun(
            results=[
                PerformanceTestResult(
                    name="Test.A", sample_groups=[_group("Time", [1.0, 2.0])]
                ),
                PerformanceTestResult(
                    name="Test.A", sample_groups=[_group("Time", [3.0])]
                ),
            ]
        )

        merged = ExecutionMerger().merge(run)

        assert list(merged) == ["Test.A"]
        assert len(merged["Test.A"]) == 1
        group = merged["Test.A"][0]
        assert group.name == "Time"
        assert group.test_name == "Test.A"
        assert group.samples == [1.0, 2.0, 3.0]

    def test_merged_length_is_sum_of_inputs(self) -> None:
        first = [5.0, 4.0, 3.0]
        second = [2.0, 1.0]
        run = PerformanceTestRun(
            results=[
                PerformanceTestResult(name="T", sample_groups=[_group("G", first)]),
                PerformanceTestResult(name="T", sample_groups=[_group("G", second)]),
            ]
        )

        group = ExecutionMerger().merge(run)["T"][0]

        assert len(group.samples) == len(first) + len(second)
        assert group.samples == first + second

    def test_group_order_follows_first_appearance(self) -> None:
        run = PerformanceTestRun(
            results=[
                PerformanceTestResult(
                    name="T",
                    sample_groups=[_group("B", [1.0]), _group("A", [2.0])],
                ),
                PerformanceTestResult(
                    name="T",
                    sample_groups=[_group("C", [3.0]), _group("A", [4.0])],
                ),
            ]
        )

        groups = ExecutionMerger().merge(run)["T"]

        assert [g.name for g in groups] == ["B", "A", "C"]
        assert groups[1].samples == [2.0, 4.0]

    def test_test_order_follows_first_appearance(self) -> None:
        run = PerformanceTestRun(
            results=[
                PerformanceTestResult(name="Z", sample_groups=[_group("G", [1.0])]),
                PerformanceTestResult(name="A", sample_groups=[_group("G", [1.0])]),
                PerformanceTestResult(name="Z", sample_groups=[_group("G", [1.0])]),
            ]
        )

        assert list(ExecutionMerger().merge(run)) == ["Z", "A"]
        assert list(ExecutionMerger().merge(run)) == run.test_names

    def test_same_group_name_in_different_tests_is_kept_apart(self) -> None:
        run = PerformanceTestRun(
            results=[
                PerformanceTestResult(name="T1", sample_groups=[_group("G", [1.0])]),
                PerformanceTestResult(name="T2", sample_groups=[_group("G", [2.0])]),
            ]
        )

        merged = ExecutionMerger().merge(run)

        assert merged["T1"][0].samples == [1.0]
        assert merged["T2"][0].samples == [2.0]

    def test_first_definition_wins(self) -> None:
        run = PerformanceTestRun(
            results=[
                PerformanceTestResult(
                    name="T",
                    sample_groups=[_group("G", [1.0], threshold=0.05)],
                ),
                PerformanceTestResult(
                    name="T",
                    sample_groups=[_group("G", [2.0], threshold=0.5)],
                ),
            ]
        )

        group = ExecutionMerger().merge(run)["T"][0]

        assert group.definition.threshold == 0.05

    def test_test_without_groups_yields_empty_list(self) -> None:
        run = PerformanceTestRun(
            results=[
                PerformanceTestResult(name="Empty"),
                PerformanceTestResult(name="Empty"),
            ]
        )

        assert ExecutionMerger().merge(run) == {"Empty": []}

    def test_empty_run(self) -> None:
        assert ExecutionMerger().merge(PerformanceTestRun()) == {}

    def test_raw_run_is_not_modified(self) -> None:
        run = PerformanceTestRun(
            results=[
                PerformanceTestResult(name="T", sample_groups=[_group("G", [1.0])]),
                PerformanceTestResult(name="T", sample_groups=[_group("G", [2.0])]),
            ]
        )
        before = run.model_dump()

        ExecutionMerger().merge(run)

        assert run.model_dump() == before
        assert run.results[0].sample_groups[0].samples == [1.0]

    def test_merge_is_deterministic(self, candidate_run: PerformanceTestRun) -> None:
        merger = ExecutionMerger()
        first = merger.merge(candidate_run)
        second = merger.merge(candidate_run)

        assert {k: [g.model_dump() for g in v] for k, v in first.items()} == {
            k: [g.model_dump() for g in v] for k, v in second.items()
        }
