"""Storage utilities for aggregated run results."""

import json
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from perfreporter.core.exceptions import LoaderError
from perfreporter.processing.models import PerformanceTestRunResult


def save_result(result: PerformanceTestRunResult, path: Path) -> None:
    """Save an aggregated run result to a JSON file.

    Args:
        result: Run result to save.
        path: Path to save the result file. Parent directories are created.

    Raises:
        OSError: If file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)


def load_result(path: Path) -> PerformanceTestRunResult:
    """Load an aggregated run result from a JSON file.

    Raises:
        LoaderError: If the file is missing, not JSON, or not a valid result.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise LoaderError("Result file not found", file_path=str(path)) from e
    except json.JSONDecodeError as e:
        raise LoaderError(
            f"Invalid JSON at line {e.lineno}: {e.msg}", file_path=str(path)
        ) from e
    except UnicodeDecodeError as e:
        raise LoaderError(
            f"Result file is not valid UTF-8: {e.reason}", file_path=str(path)
        ) from e

    try:
        return PerformanceTestRunResult.from_dict(data)
    except PydanticValidationError as e:
        raise LoaderError(f"Invalid result data: {e}", file_path=str(path)) from e
