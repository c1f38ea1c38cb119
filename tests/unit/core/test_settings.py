"""Tests for perfreporter configuration management."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from perfreporter.core.settings import (
    LoggingSettings,
    PerfReporterSettings,
    _find_config_file,
    _load_yaml_config,
    get_cached_settings,
    get_settings,
)
from perfreporter.loader.models import AggregationType


class TestPerfReporterSettings:
    """Tests for PerfReporterSettings class."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        settings = PerfReporterSettings(_skip_file_loading=True)
        assert settings.sig_figs == 2
        assert settings.aggregation_type == AggregationType.AVERAGE
        assert settings.fail_on_regression is False
        assert settings.logging.level == "INFO"
        assert settings.logging.json_output is False
        assert settings.logging.file is None

    def test_custom_values(self) -> None:
        settings = PerfReporterSettings(
            _skip_file_loading=True,
            sig_figs=4,
            aggregation_type="median",
            fail_on_regression=True,
        )
        assert settings.sig_figs == 4
        assert settings.aggregation_type == AggregationType.MEDIAN
        assert settings.fail_on_regression is True

    def test_aggregation_type_can_defer_to_definitions(self) -> None:
        """Test that null leaves the choice to each sample group."""
        settings = PerfReporterSettings(_skip_file_loading=True, aggregation_type=None)
        assert settings.aggregation_type is None

    @pytest.mark.parametrize("sig_figs", [0, -1, 16])
    def test_sig_figs_validation(self, sig_figs: int) -> None:
        with pytest.raises(ValidationError):
            PerfReporterSettings(_skip_file_loading=True, sig_figs=sig_figs)

    def test_unknown_aggregation_type(self) -> None:
        with pytest.raises(ValidationError):
            PerfReporterSettings(_skip_file_loading=True, aggregation_type="mode")

    def test_env_var_loading(self) -> None:
        """Test loading settings from environment variables."""
        with patch.dict(
            os.environ,
            {
                "PERFREPORTER_SIG_FIGS": "3",
                "PERFREPORTER_AGGREGATION_TYPE": "max",
                "PERFREPORTER_FAIL_ON_REGRESSION": "true",
            },
        ):
            settings = PerfReporterSettings(_skip_file_loading=True)
            assert settings.sig_figs == 3
            assert settings.aggregation_type == AggregationType.MAX
            assert settings.fail_on_regression is True

    def test_env_var_nested_delimiter(self) -> None:
        """Test nested settings via double underscore delimiter."""
        with patch.dict(
            os.environ,
            {
                "PERFREPORTER_LOGGING__LEVEL": "debug",
                "PERFREPORTER_LOGGING__JSON_OUTPUT": "true",
            },
        ):
            settings = PerfReporterSettings(_skip_file_loading=True)
            assert settings.logging.level == "DEBUG"
            assert settings.logging.json_output is True


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_level_is_normalized(self) -> None:
        assert LoggingSettings(level="warning").level == "WARNING"

    def test_invalid_level(self) -> None:
        with pytest.raises(ValidationError, match="Invalid log level"):
            LoggingSettings(level="LOUD")

    def test_module_levels_are_normalized(self) -> None:
        settings = LoggingSettings(module_levels={"perfreporter.processing": "debug"})
        assert settings.module_levels == {"perfreporter.processing": "DEBUG"}

    def test_invalid_module_level(self) -> None:
        with pytest.raises(ValidationError, match="Invalid log level"):
            LoggingSettings(module_levels={"perfreporter": "LOUD"})

    def test_module_levels_from_config_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text(
            "logging:\n  module_levels:\n    perfreporter.baseline: error\n"
        )

        settings = get_settings(config_file=config_file)

        assert settings.logging.module_levels == {"perfreporter.baseline": "ERROR"}


class TestConfigFileLoading:
    """Tests for YAML config file discovery and loading."""

    def test_load_yaml_config_valid(self, tmp_path: Path) -> None:
        config_file = tmp_path / "perfreporter.config.yaml"
        config_file.write_text("sig_figs: 3\nlogging:\n  level: DEBUG\n")

        config = _load_yaml_config(config_file)

        assert config == {"sig_figs": 3, "logging": {"level": "DEBUG"}}

    def test_load_yaml_config_invalid(self, tmp_path: Path) -> None:
        """Test that malformed YAML is treated as empty."""
        config_file = tmp_path / "perfreporter.config.yaml"
        config_file.write_text("sig_figs: [3\n")

        assert _load_yaml_config(config_file) == {}

    def test_load_yaml_config_not_a_mapping(self, tmp_path: Path) -> None:
        config_file = tmp_path / "perfreporter.config.yaml"
        config_file.write_text("- 1\n- 2\n")

        assert _load_yaml_config(config_file) == {}

    def test_load_yaml_config_missing(self, tmp_path: Path) -> None:
        assert _load_yaml_config(tmp_path / "nope.yaml") == {}

    def test_find_config_file_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / "perfreporter.config.yaml"
        config_file.write_text("sig_figs: 3\n")

        assert _find_config_file(tmp_path) == config_file

    def test_find_config_file_parent_dir(self, tmp_path: Path) -> None:
        """Test that discovery walks up to parent directories."""
        config_file = tmp_path / "perfreporter.config.yaml"
        config_file.write_text("sig_figs: 3\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert _find_config_file(nested) == config_file

    def test_find_config_file_yml_extension(self, tmp_path: Path) -> None:
        config_file = tmp_path / "perfreporter.config.yml"
        config_file.write_text("sig_figs: 3\n")

        assert _find_config_file(tmp_path) == config_file

    def test_settings_loads_from_config_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "perfreporter.config.yaml"
        config_file.write_text(
            "sig_figs: 4\naggregation_type: min\nlogging:\n  level: ERROR\n"
        )

        with patch(
            "perfreporter.core.settings._find_config_file", return_value=config_file
        ):
            settings = PerfReporterSettings()

        assert settings.sig_figs == 4
        assert settings.aggregation_type == AggregationType.MIN
        assert settings.logging.level == "ERROR"

    def test_discovery_from_working_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "perfreporter.config.yaml").write_text("sig_figs: 5\n")
        monkeypatch.chdir(tmp_path)

        assert PerfReporterSettings().sig_figs == 5


class TestConfigHierarchy:
    """Tests for configuration hierarchy (defaults -> file -> env -> explicit)."""

    def test_env_overrides_file(self, tmp_path: Path) -> None:
        """Test that environment variables override file values."""
        config_file = tmp_path / "perfreporter.config.yaml"
        config_file.write_text("sig_figs: 4\nfail_on_regression: true\n")

        with patch(
            "perfreporter.core.settings._find_config_file", return_value=config_file
        ):
            with patch.dict(os.environ, {"PERFREPORTER_SIG_FIGS": "6"}):
                settings = PerfReporterSettings()

        assert settings.sig_figs == 6
        assert settings.fail_on_regression is True

    def test_explicit_overrides_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "perfreporter.config.yaml"
        config_file.write_text("sig_figs: 4\n")

        with patch(
            "perfreporter.core.settings._find_config_file", return_value=config_file
        ):
            settings = PerfReporterSettings(sig_figs=7)

        assert settings.sig_figs == 7

    def test_nested_logging_values_merge(self, tmp_path: Path) -> None:
        """Test that explicit logging keys merge with file logging keys."""
        config_file = tmp_path / "perfreporter.config.yaml"
        config_file.write_text("logging:\n  level: DEBUG\n  file: run.log\n")

        with patch(
            "perfreporter.core.settings._find_config_file", return_value=config_file
        ):
            settings = PerfReporterSettings(logging={"json_output": True})

        assert settings.logging.level == "DEBUG"
        assert settings.logging.file == "run.log"
        assert settings.logging.json_output is True


class TestGetSettings:
    """Tests for the settings factories."""

    def test_get_settings_factory(self) -> None:
        settings = get_settings(_skip_file_loading=True, sig_figs=3)
        assert isinstance(settings, PerfReporterSettings)
        assert settings.sig_figs == 3

    def test_get_settings_with_config_file(self, tmp_path: Path) -> None:
        """Test get_settings with an explicit config file."""
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("sig_figs: 3\nfail_on_regression: true\n")

        settings = get_settings(config_file=config_file)

        assert settings.sig_figs == 3
        assert settings.fail_on_regression is True

    def test_overrides_beat_config_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("sig_figs: 3\n")

        assert get_settings(config_file=config_file, sig_figs=8).sig_figs == 8

    def test_get_cached_settings(self) -> None:
        """Test cached settings singleton."""
        get_cached_settings.cache_clear()

        settings1 = get_cached_settings()
        settings2 = get_cached_settings()
        assert settings1 is settings2

        get_cached_settings.cache_clear()
