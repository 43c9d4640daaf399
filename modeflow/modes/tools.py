"""Modeflow Tool Permissions
==========================

Decides which tools a mode may use, based on its tool groups.

Edit groups can carry a ``file_regex`` restriction; the compiled patterns
are cached at module level so repeated checks do not recompile them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import lru_cache
import logging
import re
from typing import Any

from modeflow.core.errors import FileRestrictionError
from modeflow.modes.constants import (
    ALWAYS_AVAILABLE_TOOLS,
    EDIT_PAYLOAD_PARAMS,
    TOOL_GROUPS,
)
from modeflow.modes.registry import ModeRegistry
from modeflow.modes.types import (
    GroupEntry,
    ModeConfig,
    ToolGroup,
    get_group_name,
    get_group_options,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def does_file_match_regex(file_path: str, pattern: str) -> bool:
    """Search ``file_path`` for ``pattern``; an invalid pattern never matches."""
    try:
        return _compile(pattern).search(file_path) is not None
    except re.error as e:
        logger.warning("Invalid regex pattern: %s (%s)", pattern, e)
        return False


def get_tools_for_mode(groups: Iterable[GroupEntry]) -> list[str]:
    """All tools granted by ``groups`` plus the always-available tools."""
    tools: set[str] = set()
    for group in groups:
        tools.update(TOOL_GROUPS[get_group_name(group)])
    tools.update(ALWAYS_AVAILABLE_TOOLS)
    return sorted(tools)


def is_tool_allowed_for_mode(  # noqa: PLR0911
    tool: str,
    mode_slug: str,
    custom_modes: Iterable[ModeConfig] | None = None,
    tool_requirements: Mapping[str, bool] | None = None,
    tool_params: Mapping[str, Any] | None = None,
    experiments: Mapping[str, bool] | None = None,
) -> bool:
    """Check whether a mode may run a tool.

    Args:
        tool: Tool name
        mode_slug: Mode to check against
        custom_modes: Custom modes that override or extend the built-ins
        tool_requirements: Per-tool enable flags from the host
        tool_params: Parameters of the pending tool call
        experiments: Experimental feature flags keyed by tool name

    Returns:
        True if the tool may run

    Raises:
        FileRestrictionError: if an edit targets a file outside the
            group's ``file_regex``
    """
    if tool in ALWAYS_AVAILABLE_TOOLS:
        return True

    if experiments and tool in experiments and not experiments[tool]:
        return False

    if tool_requirements and tool in tool_requirements and not tool_requirements[tool]:
        return False

    mode = ModeRegistry(custom_modes=custom_modes).get_by_slug(mode_slug)
    if mode is None:
        return False

    for group in mode.groups:
        group_name = get_group_name(group)
        if tool not in TOOL_GROUPS[group_name]:
            continue

        options = get_group_options(group)
        if options is None:
            return True

        if group_name == ToolGroup.EDIT and options.file_regex:
            params = tool_params or {}
            file_path = params.get("path")
            writes = any(params.get(key) for key in EDIT_PAYLOAD_PARAMS)
            if file_path and writes and not does_file_match_regex(file_path, options.file_regex):
                raise FileRestrictionError(
                    mode.name, options.file_regex, options.description, file_path
                )

        return True

    return False
