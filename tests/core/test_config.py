"""Tests for settings loading."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError
import pytest

from modeflow.core.config import (
    DEFAULT_MODE_CACHING_MB,
    DEFAULT_PREEMPTIVE_LOADING,
    DEFAULT_SENSITIVITY,
    ModeSettings,
    ResourceLimits,
    load_settings,
)


def write_config(directory: Path, body: str, name: str = "modeflow.toml") -> Path:
    path = directory / name
    path.write_text(body, encoding="utf-8")
    return path


class TestModeSettingsDefaults:
    def test_defaults(self) -> None:
        settings = ModeSettings()

        assert settings.auto_switch_sensitivity == DEFAULT_SENSITIVITY
        assert settings.mode_api_configs == {}
        assert settings.mode_fallback_configs == {}
        assert settings.resource_limits.mode_caching == DEFAULT_MODE_CACHING_MB
        assert settings.resource_limits.preemptive_loading == DEFAULT_PREEMPTIVE_LOADING
        assert settings.log_level == "WARNING"

    def test_sensitivity_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ModeSettings(auto_switch_sensitivity=1.5)

    def test_resource_limits_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ResourceLimits(mode_caching=0)
        with pytest.raises(ValidationError):
            ResourceLimits(preemptive_loading=-1)


class TestModeSettingsEnvironment:
    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MODEFLOW_AUTO_SWITCH_SENSITIVITY", "0.3")

        assert ModeSettings().auto_switch_sensitivity == 0.3

    def test_nested_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MODEFLOW_RESOURCE_LIMITS__PREEMPTIVE_LOADING", "5")

        assert ModeSettings().resource_limits.preemptive_loading == 5

    def test_model_overrides_from_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MODEFLOW_MODE_API_CONFIGS", '{"frontend": "gpt-4"}')

        assert ModeSettings().mode_api_configs == {"frontend": "gpt-4"}


class TestLoadSettings:
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "absent.toml")

        assert settings.auto_switch_sensitivity == DEFAULT_SENSITIVITY

    def test_reads_modeflow_table(self, tmp_path: Path) -> None:
        path = write_config(
            tmp_path,
            """
[modeflow]
auto_switch_sensitivity = 0.6

[modeflow.mode_api_configs]
backend = "claude-3"

[modeflow.resource_limits]
preemptive_loading = 3
""",
        )

        settings = load_settings(path)

        assert settings.auto_switch_sensitivity == 0.6
        assert settings.mode_api_configs == {"backend": "claude-3"}
        assert settings.resource_limits.preemptive_loading == 3
        assert settings.resource_limits.mode_caching == DEFAULT_MODE_CACHING_MB

    def test_default_path_is_working_directory(self, tmp_path: Path) -> None:
        write_config(tmp_path, "[modeflow]\nlog_level = 'DEBUG'\n")

        assert load_settings().log_level == "DEBUG"

    def test_file_wins_over_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MODEFLOW_AUTO_SWITCH_SENSITIVITY", "0.1")
        path = write_config(tmp_path, "[modeflow]\nauto_switch_sensitivity = 0.9\n")

        assert load_settings(path).auto_switch_sensitivity == 0.9

    def test_other_tables_ignored(self, tmp_path: Path) -> None:
        path = write_config(tmp_path, "[tool]\nauto_switch_sensitivity = 0.1\n")

        assert load_settings(path).auto_switch_sensitivity == DEFAULT_SENSITIVITY

    def test_unsupported_format_warns(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = write_config(tmp_path, "auto_switch_sensitivity: 0.1\n", name="modeflow.yaml")

        with caplog.at_level(logging.WARNING, logger="modeflow.core.config"):
            settings = load_settings(path)

        assert settings.auto_switch_sensitivity == DEFAULT_SENSITIVITY
        assert "Unsupported config format" in caplog.text

    def test_invalid_values_raise(self, tmp_path: Path) -> None:
        path = write_config(tmp_path, "[modeflow]\nauto_switch_sensitivity = 2.0\n")

        with pytest.raises(ValidationError):
            load_settings(path)
