"""Modeflow Error Types
=====================

Exceptions raised by the mode system. Only precondition failures and
transition callback failures reach the caller; pattern and rule anomalies
are logged and treated as non-matches.
"""

from __future__ import annotations

from enum import StrEnum, auto
import logging
from typing import Any

logger = logging.getLogger("modeflow.errors")


class ModeErrorType(StrEnum):
    """Categories of mode-related errors."""

    NO_ACTIVE_CONTEXT = auto()  # Engine operation called before start_task
    MODE_NOT_FOUND = auto()  # Slug not present in the registry
    INVALID_PATTERN = auto()  # File pattern failed to compile
    TRANSITION_FAILED = auto()  # Transition callback raised
    FILE_RESTRICTED = auto()  # Edit outside a group's file_regex
    CONFIG_INVALID = auto()  # Mode definitions failed validation


class ModeflowError(Exception):
    """Base class for all mode system errors."""

    error_type: ModeErrorType = ModeErrorType.CONFIG_INVALID

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def log(self, level: int = logging.WARNING) -> None:
        """Log this error with context."""
        logger.log(
            level,
            "ModeError[%s]: %s | context=%s",
            self.error_type.value,
            self.message,
            self.context,
        )


class NoActiveContextError(ModeflowError):
    """Raised when an engine operation needs a task context that does not exist."""

    error_type = ModeErrorType.NO_ACTIVE_CONTEXT


class ModeNotFoundError(ModeflowError, KeyError):
    """Raised when a mode slug cannot be resolved."""

    error_type = ModeErrorType.MODE_NOT_FOUND

    def __init__(self, slug: str) -> None:
        super().__init__(f"No mode found for slug: {slug}", {"slug": slug})
        self.slug = slug

    def __str__(self) -> str:
        return self.message


class FileRestrictionError(ModeflowError):
    """Raised when a mode may only edit files matching a pattern."""

    error_type = ModeErrorType.FILE_RESTRICTED

    def __init__(
        self, mode: str, pattern: str, description: str | None, file_path: str
    ) -> None:
        suffix = f" ({description})" if description else ""
        super().__init__(
            f"This mode ({mode}) can only edit files matching pattern: "
            f"{pattern}{suffix}. Got: {file_path}",
            {"mode": mode, "pattern": pattern, "file_path": file_path},
        )


class InvalidHandoffTargetError(ModeflowError):
    """Raised when a mode hands off to slugs that are not registered."""

    error_type = ModeErrorType.CONFIG_INVALID

    def __init__(self, slug: str, targets: list[str]) -> None:
        super().__init__(
            f"Invalid handoff targets in mode {slug}: {', '.join(targets)}",
            {"slug": slug, "targets": targets},
        )
        self.targets = targets
