"""perfreporter configuration management.

Configuration is loaded from multiple sources with the following priority
(highest to lowest):
1. CLI arguments / explicit overrides
2. Environment variables (with PERFREPORTER_ prefix)
3. Configuration file (perfreporter.config.yaml)
4. Default values

Example usage:
    from perfreporter.core.settings import get_settings

    settings = get_settings()
    print(settings.sig_figs)

Environment variable support:
    PERFREPORTER_SIG_FIGS=3
    PERFREPORTER_LOGGING__LEVEL=DEBUG
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from perfreporter.loader.models import AggregationType

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ["perfreporter.config.yaml", "perfreporter.config.yml"]

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file by searching a directory and its parents.

    Args:
        start_dir: Directory to start search from.
            Defaults to current working directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()

    for _ in range(10):
        for filename in CONFIG_FILE_NAMES:
            config_path = search_dir / filename
            if config_path.exists():
                return config_path

        parent = search_dir.parent
        if parent == search_dir:
            break
        search_dir = parent

    return None


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Unreadable or malformed files are logged and treated as empty.
    """
    try:
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
            return config if isinstance(config, dict) else {}
    except yaml.YAMLError as e:
        logger.warning("Failed to parse config file %s: %s", config_path, e)
        return {}
    except OSError as e:
        logger.warning("Failed to read config file %s: %s", config_path, e)
        return {}


def _normalize_log_level(v: str) -> str:
    upper_v = v.upper()
    if upper_v not in VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
    return upper_v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_output: bool = Field(
        default=False,
        description="Output logs in JSON format",
    )
    file: str | None = Field(
        default=None,
        description="Log file path (optional)",
    )
    module_levels: dict[str, str] = Field(
        default_factory=dict,
        description="Log level overrides keyed by module name prefix",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        return _normalize_log_level(v)

    @field_validator("module_levels")
    @classmethod
    def validate_module_levels(cls, v: dict[str, str]) -> dict[str, str]:
        """Validate and normalize each per-module log level."""
        return {module: _normalize_log_level(level) for module, level in v.items()}


class PerfReporterSettings(BaseSettings):
    """Main perfreporter settings.

    Example:
        settings = PerfReporterSettings(sig_figs=3)
        print(settings.logging.level)
    """

    model_config = SettingsConfigDict(
        env_prefix="PERFREPORTER_",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    sig_figs: int = Field(
        default=2,
        ge=1,
        le=15,
        description="Significant figures used when comparing against a baseline",
    )
    aggregation_type: AggregationType | None = Field(
        default=AggregationType.AVERAGE,
        description=(
            "Statistic used as the aggregated value. "
            "null uses each sample group's own definition"
        ),
    )
    fail_on_regression: bool = Field(
        default=False,
        description="Exit with non-zero status when regressions are detected",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="before")
    @classmethod
    def load_from_config_file(cls, data: Any) -> Any:
        """Merge values from a discovered YAML config file under explicit data."""
        if not isinstance(data, dict):
            return data

        if data.get("_skip_file_loading"):
            data.pop("_skip_file_loading", None)
            return data

        config_path = _find_config_file()
        if config_path is None:
            return data

        file_config = _load_yaml_config(config_path)
        if not file_config:
            return data

        logger.debug("Loaded configuration from %s", config_path)
        merged = {**file_config, **data}
        if isinstance(file_config.get("logging"), dict):
            explicit = data.get("logging")
            merged["logging"] = {
                **file_config["logging"],
                **(explicit if isinstance(explicit, dict) else {}),
            }
        return merged


def get_settings(
    config_file: Path | None = None,
    **overrides: Any,
) -> PerfReporterSettings:
    """Get a settings instance.

    Args:
        config_file: Optional explicit path to a configuration file. When
            given, automatic discovery is skipped.
        **overrides: Explicit configuration overrides.

    Returns:
        Configured PerfReporterSettings instance.
    """
    if config_file and config_file.exists():
        file_config = _load_yaml_config(config_file)
        merged = {**file_config, **overrides, "_skip_file_loading": True}
        return PerfReporterSettings(**merged)

    return PerfReporterSettings(**overrides)


@lru_cache
def get_cached_settings() -> PerfReporterSettings:
    """Get the cached settings singleton.

    Clear with ``get_cached_settings.cache_clear()`` if needed.
    """
    return get_settings()
