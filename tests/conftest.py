"""Shared pytest fixtures for perfreporter tests."""

from pathlib import Path

import pytest

from perfreporter.core.logging import reset_logging
from perfreporter.loader import PerformanceTestRun, load_run


@pytest.fixture(autouse=True)
def reset_logging_state():  # type: ignore[misc]
    """Reset global logging configuration around each test."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def runs_dir(fixtures_dir: Path) -> Path:
    """Return path to the run record fixtures."""
    return fixtures_dir / "runs"


@pytest.fixture
def baseline_run_path(runs_dir: Path) -> Path:
    """Return path to the baseline run record."""
    return runs_dir / "baseline_run.json"


@pytest.fixture
def candidate_run_path(runs_dir: Path) -> Path:
    """Return path to the candidate run record."""
    return runs_dir / "candidate_run.json"


@pytest.fixture
def baseline_run(baseline_run_path: Path) -> PerformanceTestRun:
    """Return the loaded baseline run."""
    return load_run(baseline_run_path)


@pytest.fixture
def candidate_run(candidate_run_path: Path) -> PerformanceTestRun:
    """Return the loaded candidate run."""
    return load_run(candidate_run_path)
