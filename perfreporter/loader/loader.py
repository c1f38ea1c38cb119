"""Load canonical run records from JSON."""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from perfreporter.core.exceptions import LoaderError
from perfreporter.core.logging import get_logger
from perfreporter.loader.models import PerformanceTestRun

logger = get_logger(__name__)


def load_run_from_dict(
    data: dict[str, Any], source: str | None = None
) -> PerformanceTestRun:
    """Validate a run record dictionary.

    Args:
        data: Run record as parsed from JSON.
        source: Optional origin used in error messages.

    Returns:
        Validated PerformanceTestRun.

    Raises:
        LoaderError: If the data does not describe a valid run.
    """
    try:
        return PerformanceTestRun.model_validate(data)
    except PydanticValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise LoaderError(f"Invalid run record: {errors}", file_path=source) from e


def load_run(file_path: str | Path) -> PerformanceTestRun:
    """Load a run record from a JSON file.

    Raises:
        LoaderError: If the file is missing, not JSON, or not a valid run.
    """
    file_path = Path(file_path)

    try:
        with open(file_path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise LoaderError("Run file not found", file_path=str(file_path)) from e
    except json.JSONDecodeError as e:
        raise LoaderError(
            f"Invalid JSON at line {e.lineno}: {e.msg}", file_path=str(file_path)
        ) from e
    except UnicodeDecodeError as e:
        raise LoaderError(
            f"Run file is not valid UTF-8: {e.reason}", file_path=str(file_path)
        ) from e
    except OSError as e:
        raise LoaderError(f"Cannot read run file: {e}", file_path=str(file_path)) from e

    if not isinstance(data, dict):
        raise LoaderError("Run record must be a JSON object", file_path=str(file_path))

    run = load_run_from_dict(data, source=str(file_path))
    logger.debug(
        "run_loaded",
        path=str(file_path),
        test_suite=run.test_suite,
        executions=len(run.results),
    )
    return run
