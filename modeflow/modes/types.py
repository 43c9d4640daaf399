"""Modeflow Mode Types
====================

Core type definitions for the mode system.

This module contains:
- ToolGroup enum: capability groups a mode may be granted
- GroupOptions / GroupEntry: per-group restrictions
- ModeConfig: immutable definition of a single mode
- ModeContext: mutable record of the task being worked on
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

# =============================================================================
# ENUMS
# =============================================================================


class ToolGroup(StrEnum):
    """Tool groups that can be granted to a mode."""

    READ = "read"
    EDIT = "edit"
    BROWSER = "browser"
    COMMAND = "command"
    MCP = "mcp"


# =============================================================================
# MODE DEFINITIONS
# =============================================================================


class GroupOptions(BaseModel):
    """Restrictions attached to a tool group entry."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    file_regex: str | None = None
    description: str | None = None


GroupEntry = ToolGroup | tuple[ToolGroup, GroupOptions]


def get_group_name(group: GroupEntry) -> ToolGroup:
    """Extract the group name regardless of entry format."""
    return group[0] if isinstance(group, tuple) else group


def get_group_options(group: GroupEntry) -> GroupOptions | None:
    return group[1] if isinstance(group, tuple) else None


def _ensure_unique(values: tuple[str, ...] | None, label: str) -> None:
    if values is None:
        return
    seen: set[str] = set()
    for value in values:
        if value in seen:
            raise ValueError(f"Duplicate {label} are not allowed: {value}")
        seen.add(value)


class ModeConfig(BaseModel):
    """Definition of a single mode.

    Accepts both snake_case and the camelCase keys used in mode definition
    files (``roleDefinition``, ``handoffTo``, ``filePatterns``).

    Attributes:
        slug: Unique identifier
        name: Display name
        role_definition: Persona text for the mode
        custom_instructions: Optional extra instructions
        groups: Tool groups the mode may use
        capabilities: Competencies used by capability rules
        triggers: Keywords that select the mode from task text
        handoff_to: Slugs this mode may hand control to; ``None`` means unrestricted
        file_patterns: Regexes of files the mode handles; empty means every file
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    slug: str
    name: str
    role_definition: str
    custom_instructions: str | None = None
    groups: tuple[GroupEntry, ...] = ()
    capabilities: tuple[str, ...] = ()
    triggers: tuple[str, ...] = ()
    handoff_to: tuple[str, ...] | None = None
    file_patterns: tuple[str, ...] = ()

    @field_validator("groups")
    @classmethod
    def _unique_groups(cls, groups: tuple[GroupEntry, ...]) -> tuple[GroupEntry, ...]:
        _ensure_unique(tuple(get_group_name(g).value for g in groups), "groups")
        return groups

    @field_validator("capabilities", "triggers", "handoff_to")
    @classmethod
    def _unique_entries(
        cls, values: tuple[str, ...] | None, info: ValidationInfo
    ) -> tuple[str, ...] | None:
        _ensure_unique(values, info.field_name.replace("_", " "))
        return values

    @property
    def group_names(self) -> list[ToolGroup]:
        return [get_group_name(g) for g in self.groups]


# =============================================================================
# TASK CONTEXT
# =============================================================================


@dataclass
class ModeContext:
    """Tracks the task currently being routed.

    Attributes:
        current_task: Free-text task description
        current_files: Files touched by the task, in caller order
        completion_status: Completion flag per mode slug
        handoff_queue: Slugs of modes that handed off, oldest first
    """

    current_task: str
    current_files: list[str] = field(default_factory=list)
    completion_status: dict[str, bool] = field(default_factory=dict)
    handoff_queue: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize context for logging/debugging."""
        return {
            "task": self.current_task,
            "files": list(self.current_files),
            "completion": dict(self.completion_status),
            "handoffs": list(self.handoff_queue),
        }

    def clone(self) -> ModeContext:
        return copy.deepcopy(self)


def create_mode_context(task: str, files: list[str] | None = None) -> ModeContext:
    return ModeContext(current_task=task, current_files=list(files or []))


def update_completion_status(
    context: ModeContext, mode_slug: str, completed: bool
) -> ModeContext:
    """Return a new context with one completion flag changed.

    The file list and handoff queue are shared with the given context.
    """
    return replace(
        context,
        completion_status={**context.completion_status, mode_slug: completed},
    )
