"""Rule compilation and the mode transition state machine."""

from __future__ import annotations

from modeflow.transition.engine import (
    EngineEvent,
    EngineSnapshot,
    TransitionCallback,
    TransitionEngine,
    TransitionErrorEvent,
    TransitionEvent,
    TransitionPhase,
)
from modeflow.transition.queue import EngineQueue
from modeflow.transition.rules import (
    CapabilityRule,
    FileRule,
    HandoffRule,
    RuleType,
    TaskRule,
    TransitionRule,
    can_handle_file,
    can_receive_handoff,
    compile_rules,
    has_capability,
    should_trigger_for_task,
)

__all__ = [
    "CapabilityRule",
    "EngineEvent",
    "EngineQueue",
    "EngineSnapshot",
    "FileRule",
    "HandoffRule",
    "RuleType",
    "TaskRule",
    "TransitionCallback",
    "TransitionEngine",
    "TransitionErrorEvent",
    "TransitionEvent",
    "TransitionPhase",
    "TransitionRule",
    "can_handle_file",
    "can_receive_handoff",
    "compile_rules",
    "has_capability",
    "should_trigger_for_task",
]
