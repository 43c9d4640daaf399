"""Ambient services shared by the mode system: config, errors, events."""

from __future__ import annotations

from modeflow.core.config import ModeSettings, ResourceLimits, load_settings
from modeflow.core.errors import (
    FileRestrictionError,
    InvalidHandoffTargetError,
    ModeErrorType,
    ModeflowError,
    ModeNotFoundError,
    NoActiveContextError,
)
from modeflow.core.events import Disposable, EventEmitter

__all__ = [
    "Disposable",
    "EventEmitter",
    "FileRestrictionError",
    "InvalidHandoffTargetError",
    "ModeErrorType",
    "ModeNotFoundError",
    "ModeSettings",
    "ModeflowError",
    "NoActiveContextError",
    "ResourceLimits",
    "load_settings",
]
