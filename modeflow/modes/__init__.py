"""Modeflow Modes Package
======================

Mode definitions and the lookups built on them.

Architecture:
- types.py: Core type definitions (ModeConfig, ModeContext, ToolGroup)
- constants.py: Built-in modes and every lookup table
- registry.py: Built-in + custom mode lookup
- schema.py: Validation of caller-supplied definitions
- tools.py: Tool permission checks per mode
- prompts.py: System prompt block for a mode

Usage:
    from modeflow.modes import ModeRegistry

    registry = ModeRegistry(custom_modes=custom)
    mode = registry.get_mode_config("architect")
"""

from __future__ import annotations

from modeflow.modes.types import (
    GroupEntry,
    GroupOptions,
    ModeConfig,
    ModeContext,
    ToolGroup,
    create_mode_context,
    get_group_name,
    get_group_options,
    update_completion_status,
)

from modeflow.modes.constants import (
    ALWAYS_AVAILABLE_TOOLS,
    BUILTIN_MODES,
    DEFAULT_MODE_SLUG,
    TOOL_GROUPS,
)

from modeflow.modes.registry import ModeRegistry

from modeflow.modes.schema import (
    CustomModeSchema,
    CustomModesSettings,
    validate_custom_mode,
    validate_handoff_targets,
)

from modeflow.modes.tools import (
    does_file_match_regex,
    get_tools_for_mode,
    is_tool_allowed_for_mode,
)

from modeflow.modes.prompts import get_system_prompt_modifier

__all__ = [
    # Types
    "GroupEntry",
    "GroupOptions",
    "ModeConfig",
    "ModeContext",
    "ToolGroup",
    "create_mode_context",
    "get_group_name",
    "get_group_options",
    "update_completion_status",
    # Constants
    "ALWAYS_AVAILABLE_TOOLS",
    "BUILTIN_MODES",
    "DEFAULT_MODE_SLUG",
    "TOOL_GROUPS",
    # Registry
    "ModeRegistry",
    # Validation
    "CustomModeSchema",
    "CustomModesSettings",
    "validate_custom_mode",
    "validate_handoff_targets",
    # Tools
    "does_file_match_regex",
    "get_tools_for_mode",
    "is_tool_allowed_for_mode",
    # Prompts
    "get_system_prompt_modifier",
]
