"""Main CLI entry point for perfreporter."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from perfreporter import __version__
from perfreporter.baseline.storage import load_result, save_result
from perfreporter.core.exceptions import InvariantViolationError, PerfReporterError
from perfreporter.core.logging import configure_logging
from perfreporter.core.settings import PerfReporterSettings, get_settings
from perfreporter.loader import load_run
from perfreporter.processor import PerformanceTestRunProcessor

# Exit codes
EXIT_SUCCESS = 0  # No regressions (or not asked to fail on them)
EXIT_FAILURE = 1  # Regressions detected
EXIT_ERROR = 2  # Error (invalid input, missing file, etc.)


class CLIContext:
    """Context object holding resolved settings."""

    def __init__(self) -> None:
        self.settings: PerfReporterSettings | None = None
        self.verbose: bool = False

    def get_settings(self) -> PerfReporterSettings:
        if self.settings is None:
            self.settings = get_settings()
        return self.settings

    def make_processor(
        self, sig_figs: int | None = None
    ) -> PerformanceTestRunProcessor:
        settings = self.get_settings()
        return PerformanceTestRunProcessor(
            sig_figs=sig_figs if sig_figs is not None else settings.sig_figs,
            aggregation_type=settings.aggregation_type,
        )


pass_cli_context = click.make_pass_decorator(CLIContext, ensure=True)


def _emit_json(data: dict[str, Any], output_file: Path | None) -> None:
    """Write JSON to a file, or to stdout when no file is given."""
    if output_file is None:
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    click.echo(f"Results written to {output_file}", err=True)


@click.group()
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, path_type=Path),
    help="Path to perfreporter.config.yaml configuration file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
@click.version_option(version=__version__, prog_name="perfreporter")
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None, verbose: bool) -> None:
    """perfreporter - performance benchmark regression tracking.

    Aggregates repeated test executions into per-test statistics and
    compares them against a saved baseline.

    Examples:

      # Aggregate a run and print the results
      perfreporter aggregate run.json

      # Save a baseline
      perfreporter baseline save run.json -o baseline.json

      # Compare a new run against the baseline
      perfreporter compare new_run.json -b baseline.json --fail-on-regression
    """
    cli_ctx = ctx.ensure_object(CLIContext)
    cli_ctx.verbose = verbose
    try:
        cli_ctx.settings = get_settings(config_file=config_file)
    except ValidationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(EXIT_ERROR)

    log_settings = cli_ctx.settings.logging
    configure_logging(
        level=logging.DEBUG if verbose else log_settings.level,
        json_output=log_settings.json_output,
        log_file=log_settings.file,
        module_levels=log_settings.module_levels,
    )


@cli.command(name="version")
def version_cmd() -> None:
    """Display perfreporter version information."""
    click.echo(f"perfreporter {__version__}")


@cli.command(name="aggregate")
@click.argument("run_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--name",
    "result_name",
    type=str,
    help="Result name (defaults to the run file name)",
)
@click.option(
    "--output-file",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file path (defaults to stdout)",
)
@pass_cli_context
def aggregate_cmd(
    cli_ctx: CLIContext,
    run_file: Path,
    result_name: str | None,
    output_file: Path | None,
) -> None:
    """Aggregate a run's repeated executions into per-test statistics.

    RUN_FILE is a JSON run record.
    """
    try:
        run = load_run(run_file)
        result, _ = cli_ctx.make_processor().process(
            run, result_name or run_file.stem
        )
        _emit_json(result.to_dict(), output_file)
    except (PerfReporterError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    sys.exit(EXIT_SUCCESS)


@cli.group()
def baseline() -> None:
    """Manage baselines for regression detection.

    Examples:

      # Save a new baseline
      perfreporter baseline save run.json -o baseline.json
    """


@baseline.command(name="save")
@click.argument("run_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output-file",
    "-o",
    type=click.Path(path_type=Path),
    required=True,
    help="Where to write the baseline",
)
@click.option(
    "--name",
    "result_name",
    type=str,
    help="Baseline name (defaults to the run file name)",
)
@pass_cli_context
def baseline_save(
    cli_ctx: CLIContext,
    run_file: Path,
    output_file: Path,
    result_name: str | None,
) -> None:
    """Aggregate a run and save it as a baseline.

    RUN_FILE is a JSON run record.
    """
    try:
        run = load_run(run_file)
        result, _ = cli_ctx.make_processor().process(
            run, result_name or run_file.stem, is_baseline=True
        )
        save_result(result, output_file)
    except (PerfReporterError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    click.echo(
        f"Baseline '{result.result_name}' saved to {output_file} "
        f"({len(result.test_results)} tests)"
    )
    sys.exit(EXIT_SUCCESS)


@cli.command(name="compare")
@click.argument("run_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--baseline",
    "-b",
    "baseline_file",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Baseline file created by 'baseline save'",
)
@click.option(
    "--sig-figs",
    type=click.IntRange(min=1),
    help="Significant figures used in comparisons (overrides config)",
)
@click.option(
    "--name",
    "result_name",
    type=str,
    help="Result name (defaults to the run file name)",
)
@click.option(
    "--output-file",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file path (defaults to stdout)",
)
@click.option(
    "--fail-on-regression",
    is_flag=True,
    help="Exit with non-zero status if regressions detected",
)
@pass_cli_context
def compare_cmd(
    cli_ctx: CLIContext,
    run_file: Path,
    baseline_file: Path,
    sig_figs: int | None,
    result_name: str | None,
    output_file: Path | None,
    fail_on_regression: bool,
) -> None:
    """Compare a run against a saved baseline.

    RUN_FILE is a JSON run record. Each sample group is classified as
    neutral, regression or progression; a test fails when any of its
    groups regressed.

    Examples:

      # Fail CI if regressions detected
      perfreporter compare run.json -b baseline.json --fail-on-regression
    """
    fail_on_regression = (
        fail_on_regression or cli_ctx.get_settings().fail_on_regression
    )

    try:
        run = load_run(run_file)
        baseline_result = load_result(baseline_file)
        result, summary = cli_ctx.make_processor(sig_figs).process(
            run, result_name or run_file.stem, baseline=baseline_result
        )
        if summary is None:
            raise InvariantViolationError("Baseline evaluation returned no summary")
        _emit_json(
            {
                "baseline": baseline_result.result_name,
                "summary": summary.to_dict(),
                "result": result.to_dict(),
            },
            output_file,
        )
    except (PerfReporterError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    if summary.has_regressions:
        click.echo(
            f"{summary.regressions} regression(s) in {summary.failed_tests} test(s)",
            err=True,
        )
        if fail_on_regression:
            sys.exit(EXIT_FAILURE)
    sys.exit(EXIT_SUCCESS)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
