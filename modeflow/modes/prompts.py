"""Modeflow Mode Prompts
======================

System prompt block describing the active mode.

The block is meant to be prepended to the system prompt of whatever
agent ends up doing the work in that mode.
"""

from __future__ import annotations

from modeflow.modes.tools import get_tools_for_mode
from modeflow.modes.types import ModeConfig, get_group_name, get_group_options


def get_system_prompt_modifier(mode: ModeConfig) -> str:
    """Render the mode-specific system prompt block.

    Args:
        mode: The active mode

    Returns:
        XML-formatted mode instruction block
    """
    lines = [
        f"<active_mode>{mode.name} ({mode.slug})</active_mode>",
        f"<role>{mode.role_definition}</role>",
    ]

    if mode.custom_instructions:
        lines.append(f"<instructions>{mode.custom_instructions}</instructions>")

    if mode.capabilities:
        lines.append(f"<capabilities>{', '.join(mode.capabilities)}</capabilities>")

    restrictions: list[str] = []
    for group in mode.groups:
        options = get_group_options(group)
        if options is not None:
            detail = options.description or options.file_regex
            restrictions.append(f"{get_group_name(group).value}: {detail}")

    tools = ", ".join(get_tools_for_mode(mode.groups))
    lines.append(f"<tools>{tools}</tools>")
    if restrictions:
        lines.append(f"<restrictions>{'; '.join(restrictions)}</restrictions>")

    if mode.handoff_to:
        lines.append(f"<handoff>{', '.join(mode.handoff_to)}</handoff>")

    return "\n".join(lines)
