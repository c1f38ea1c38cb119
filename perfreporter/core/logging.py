"""Structured logging for perfreporter.

This module provides structured logging with:
- JSON output for machine consumption, pretty output for terminals
- A common ``perfreporter_version`` field on every event
- Context binding for run-scoped fields (result name, suite)
- Log level configuration per module
- Integration with Python's standard logging

Example usage:
    from perfreporter.core.logging import bind_context, configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)

    with bind_context(result_name="nightly"):
        logger.info("test_results_aggregated", tests=12)
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from perfreporter import __version__

# Context variable for additional bound context
_bound_context: ContextVar[dict[str, Any]] = ContextVar("bound_context", default={})

# Module-level log level overrides
_module_log_levels: dict[str, int] = {}

_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "exception": logging.ERROR,
}


class bind_context:
    """Context manager to bind additional context to logs.

    Example:
        with bind_context(result_name="nightly", test_suite="Playmode"):
            logger.info("processing")  # Includes result_name and test_suite
    """

    def __init__(self, **kwargs: Any) -> None:
        self.ctx = kwargs
        self._token: Any = None

    def __enter__(self) -> "bind_context":
        new_context = {**_bound_context.get(), **self.ctx}
        self._token = _bound_context.set(new_context)
        return self

    def __exit__(self, *args: Any) -> None:
        _bound_context.reset(self._token)


# =============================================================================
# Structlog Processors
# =============================================================================


def add_bound_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add bound context variables to log events."""
    for key, value in _bound_context.get().items():
        if key not in event_dict:
            event_dict[key] = value
    return event_dict


def add_common_fields(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add the package version to every event."""
    event_dict.setdefault("perfreporter_version", __version__)
    return event_dict


def filter_by_module_level(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Filter log events based on module-specific log levels."""
    if not _module_log_levels:
        return event_dict

    logger_name = event_dict.get("logger", "")
    if not logger_name:
        return event_dict

    # Most specific matching prefix wins
    level_threshold = None
    matched_prefix = ""

    for module, level in _module_log_levels.items():
        if logger_name == module or logger_name.startswith(f"{module}."):
            if len(module) > len(matched_prefix):
                level_threshold = level
                matched_prefix = module

    if level_threshold is not None:
        current_level = _LEVEL_MAP.get(method_name.lower(), logging.INFO)
        if current_level < level_threshold:
            raise structlog.DropEvent

    return event_dict


# =============================================================================
# Logging Configuration
# =============================================================================


def set_module_log_level(module: str, level: int | str) -> None:
    """Set the log level for a specific module.

    Args:
        module: Module name (e.g., "perfreporter.processing").
        level: Log level name or numeric level.
    """
    if isinstance(level, str):
        numeric_level: int = getattr(logging, level.upper(), logging.INFO)
    else:
        numeric_level = level
    _module_log_levels[module] = numeric_level


def get_module_log_level(module: str) -> int | None:
    """Get the log level override for a module, if any."""
    return _module_log_levels.get(module)


def clear_module_log_levels() -> None:
    """Clear all module-specific log level overrides."""
    _module_log_levels.clear()


def configure_logging(
    level: str | int = logging.INFO,
    json_output: bool | None = None,
    log_file: str | None = None,
    module_levels: dict[str, str | int] | None = None,
) -> None:
    """Configure structured logging for the application.

    Console output goes to stderr so that JSON written to stdout by the
    CLI stays machine readable.

    Args:
        level: Global log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Use JSON output format. If None, auto-detects:
                     True if stderr is not a TTY, False otherwise
        log_file: Optional file path for log output
        module_levels: Dict of module name to log level for per-module config
    """
    if json_output is None:
        json_output = not sys.stderr.isatty()

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if module_levels:
        for module, mod_level in module_levels.items():
            set_module_log_level(module, mod_level)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_bound_context,
        add_common_fields,
        filter_by_module_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if json_output:
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=shared_processors,
        )
    else:
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True),
            foreign_pre_chain=shared_processors,
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        A structured logger instance.
    """
    return structlog.get_logger(name)


def reset_logging() -> None:
    """Reset logging configuration to defaults.

    Primarily used by tests to ensure clean state between cases.
    """
    clear_module_log_levels()
    _bound_context.set({})

    structlog.reset_defaults()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
