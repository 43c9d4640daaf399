"""Transition rules and the compiler that derives them from mode definitions.

Each mode contributes up to four rules, in this order:

- task: its trigger keywords appear in the task text (automatic)
- file: a current file matches one of its file patterns (automatic)
- capability: it holds every capability it declares (advisory)
- handoff: it completed its work and hands off to its first target (advisory)

Advisory rules only record a candidate; automatic rules switch modes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
import logging
from typing import ClassVar

from modeflow.modes.tools import does_file_match_regex
from modeflow.modes.types import ModeConfig

logger = logging.getLogger(__name__)


class RuleType(StrEnum):
    TASK = "task"
    FILE = "file"
    CAPABILITY = "capability"
    HANDOFF = "handoff"


@dataclass(frozen=True)
class TaskRule:
    target_mode: str
    condition: tuple[str, ...]
    automatic: bool = True
    type: ClassVar[RuleType] = RuleType.TASK


@dataclass(frozen=True)
class FileRule:
    target_mode: str
    condition: tuple[str, ...]
    automatic: bool = True
    type: ClassVar[RuleType] = RuleType.FILE


@dataclass(frozen=True)
class CapabilityRule:
    target_mode: str
    condition: frozenset[str]
    automatic: bool = False
    type: ClassVar[RuleType] = RuleType.CAPABILITY


@dataclass(frozen=True)
class HandoffRule:
    target_mode: str
    # Source mode slug -> whether its completion is required
    condition: Mapping[str, bool] = field(default_factory=dict, hash=False)
    automatic: bool = False
    type: ClassVar[RuleType] = RuleType.HANDOFF


TransitionRule = TaskRule | FileRule | CapabilityRule | HandoffRule


# =============================================================================
# CONDITIONS
# =============================================================================


def has_capability(mode: ModeConfig, capability: str) -> bool:
    return capability in mode.capabilities


def can_handle_file(mode: ModeConfig, file_path: str) -> bool:
    """A mode without file patterns handles every file."""
    if not mode.file_patterns:
        return True
    return any(does_file_match_regex(file_path, p) for p in mode.file_patterns)


def can_receive_handoff(from_mode: ModeConfig, to_mode: ModeConfig) -> bool:
    return from_mode.handoff_to is not None and to_mode.slug in from_mode.handoff_to


def should_trigger_for_task(mode: ModeConfig, task: str) -> bool:
    """Case-insensitive substring match of any trigger in the task text."""
    if not mode.triggers:
        return False
    lowered = task.lower()
    return any(trigger.lower() in lowered for trigger in mode.triggers)


# =============================================================================
# COMPILER
# =============================================================================


def compile_rules(modes: Iterable[ModeConfig]) -> list[TransitionRule]:
    """Derive the flat, ordered rule list for a set of modes."""
    rules: list[TransitionRule] = []
    for mode in modes:
        if mode.triggers:
            rules.append(TaskRule(target_mode=mode.slug, condition=tuple(mode.triggers)))

        if mode.file_patterns:
            rules.append(
                FileRule(target_mode=mode.slug, condition=tuple(mode.file_patterns))
            )

        if mode.capabilities:
            rules.append(
                CapabilityRule(
                    target_mode=mode.slug, condition=frozenset(mode.capabilities)
                )
            )

        if mode.handoff_to:
            rules.append(
                HandoffRule(target_mode=mode.handoff_to[0], condition={mode.slug: True})
            )

    logger.debug("Initialized %d rules", len(rules))
    return rules
