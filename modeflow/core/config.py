"""Modeflow Configuration Module

Settings consumed by the analyzers, the model selector and the resource
manager. Values come from (highest priority first) an explicit TOML file,
``MODEFLOW_*`` environment variables, a ``.env`` file, then defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path
import tomllib
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "modeflow.toml"
CONFIG_TABLE = "modeflow"

DEFAULT_SENSITIVITY = 0.8
DEFAULT_MODE_CACHING_MB = 100.0
DEFAULT_PREEMPTIVE_LOADING = 2


class ResourceLimits(BaseModel):
    """Ceilings for the resource manager."""

    mode_caching: float = Field(
        default=DEFAULT_MODE_CACHING_MB,
        gt=0.0,
        description="Maximum size of the per-mode context cache, in MB",
    )
    preemptive_loading: int = Field(
        default=DEFAULT_PREEMPTIVE_LOADING,
        ge=0,
        description="Maximum number of simultaneously loaded models",
    )


class ModeSettings(BaseSettings):
    """Runtime settings for mode selection."""

    model_config = SettingsConfigDict(
        env_prefix="MODEFLOW_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    auto_switch_sensitivity: float = Field(
        default=DEFAULT_SENSITIVITY,
        ge=0.0,
        le=1.0,
        description="Confidence required before an analyzer suggests a switch",
    )

    mode_api_configs: dict[str, str] = Field(
        default_factory=dict,
        description="Primary model override per mode slug",
    )

    mode_fallback_configs: dict[str, str] = Field(
        default_factory=dict,
        description="Fallback model override per mode slug",
    )

    resource_limits: ResourceLimits = Field(default_factory=ResourceLimits)

    log_level: str = Field(
        default="WARNING",
        description="Log level used by the command line",
    )


def _load_config_file(path: Path) -> dict[str, Any]:
    """Load the ``[modeflow]`` table from a TOML file."""
    if not path.exists():
        return {}

    if path.suffix != ".toml":
        logger.warning("Unsupported config format: %s", path)
        return {}

    with path.open("rb") as handle:
        return tomllib.load(handle).get(CONFIG_TABLE, {})


def load_settings(path: Path | None = None) -> ModeSettings:
    """Build settings, layering an optional TOML file over the environment.

    Args:
        path: Config file; defaults to ``modeflow.toml`` in the working directory

    Returns:
        Validated settings
    """
    config_path = path if path is not None else Path.cwd() / CONFIG_FILENAME
    file_data = _load_config_file(config_path)
    if file_data:
        logger.debug("Loaded settings from %s", config_path)
    return ModeSettings(**file_data)
