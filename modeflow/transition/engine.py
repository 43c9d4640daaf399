"""Modeflow Transition Engine
==========================

State machine that decides which mode handles the current task.

The engine holds the current mode and task context, scans the compiled
rules in registration order, memoizes the candidates found for each
context, and publishes before/after/error events around every switch.

The engine is not re-entrant: all public coroutines mutate shared state
and must be serialized by the caller (see ``modeflow.transition.queue``).

Example:
    >>> engine = TransitionEngine(registry.get_all(), on_transition=notify)
    >>> await engine.start_task("implement login form", ["src/login.ts"])
    >>> engine.get_current_mode().slug
    'code'
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
import json
import logging

from modeflow.core.errors import NoActiveContextError
from modeflow.core.events import Disposable, EventEmitter
from modeflow.modes.types import (
    ModeConfig,
    ModeContext,
    create_mode_context,
    update_completion_status,
)
from modeflow.transition.rules import (
    CapabilityRule,
    FileRule,
    HandoffRule,
    TaskRule,
    TransitionRule,
    can_handle_file,
    can_receive_handoff,
    compile_rules,
    has_capability,
    should_trigger_for_task,
)

logger = logging.getLogger(__name__)


# =============================================================================
# EVENTS
# =============================================================================


class TransitionPhase(StrEnum):
    BEFORE = "beforeTransition"
    AFTER = "afterTransition"
    ERROR = "transitionError"


@dataclass(frozen=True)
class TransitionEvent:
    """Published before and after a mode switch."""

    from_mode: ModeConfig | None
    to_mode: ModeConfig
    context: ModeContext
    phase: TransitionPhase = TransitionPhase.BEFORE


@dataclass(frozen=True)
class TransitionErrorEvent:
    """Published when an operation fails before or during a switch."""

    error: Exception
    context: ModeContext | None
    attempted_mode: ModeConfig | None = None
    phase: TransitionPhase = TransitionPhase.ERROR


EngineEvent = TransitionEvent | TransitionErrorEvent
TransitionCallback = Callable[[TransitionEvent], Awaitable[None]]


def _file_list(files: Iterable[str]) -> list[str]:
    if isinstance(files, str):
        raise TypeError("files must be an iterable of paths, not a single string")
    return list(files)


@dataclass(frozen=True)
class EngineSnapshot:
    """Immutable view of the engine state after an operation."""

    current_mode: ModeConfig | None
    context: ModeContext | None

    @property
    def current_slug(self) -> str | None:
        return self.current_mode.slug if self.current_mode else None


# =============================================================================
# ENGINE
# =============================================================================


class TransitionEngine:
    """Rule-driven mode state machine."""

    def __init__(
        self,
        modes: Iterable[ModeConfig],
        on_transition: TransitionCallback | None = None,
    ) -> None:
        self._modes: list[ModeConfig] = list(modes)
        self._on_transition = on_transition
        self._events: EventEmitter[EngineEvent] = EventEmitter()
        self._rule_cache: dict[str, list[ModeConfig]] = {}
        self._context: ModeContext | None = None
        self._current_mode: ModeConfig | None = None
        self._rules: list[TransitionRule] = compile_rules(self._modes)
        logger.info("Initialized %d transition rules", len(self._rules))

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def rules(self) -> tuple[TransitionRule, ...]:
        return tuple(self._rules)

    @property
    def modes(self) -> tuple[ModeConfig, ...]:
        return tuple(self._modes)

    @property
    def cache_size(self) -> int:
        """Number of memoized evaluation results."""
        return len(self._rule_cache)

    def get_current_mode(self) -> ModeConfig | None:
        return self._current_mode

    def get_context(self) -> ModeContext | None:
        return self._context

    def snapshot(self) -> EngineSnapshot:
        context = self._context.clone() if self._context else None
        return EngineSnapshot(current_mode=self._current_mode, context=context)

    def on_transition_event(self, listener: Callable[[EngineEvent], None]) -> Disposable:
        """Subscribe to transition events.

        Returns:
            Handle whose ``dispose`` unsubscribes the listener
        """
        return self._events.event(listener)

    # -------------------------------------------------------------------------
    # Task Lifecycle
    # -------------------------------------------------------------------------

    async def start_task(self, task: str, files: Iterable[str] | None = None) -> ModeConfig | None:
        """Start a new task and evaluate the rules against it.

        Returns:
            The first candidate mode found, or None

        Raises:
            TypeError: if ``files`` is a single string
        """
        logger.info("Starting task: %s", task)
        self._context = create_mode_context(task, _file_list(files or ()))
        return await self.evaluate()

    async def update_files(self, files: Iterable[str]) -> ModeConfig | None:
        """Replace the current file list and re-evaluate.

        Raises:
            NoActiveContextError: if no task has been started
            TypeError: if ``files`` is a single string
        """
        if self._context is None:
            raise self._precondition_failure("No active context")

        files = _file_list(files)
        logger.info("Updating files: %s", ", ".join(files))
        self._context.current_files = files
        return await self.evaluate()

    async def complete_current_task(self) -> ModeConfig | None:
        """Mark the current mode's work complete and re-evaluate.

        Raises:
            NoActiveContextError: if there is no task or no current mode
        """
        if self._context is None or self._current_mode is None:
            raise self._precondition_failure("No active context or current mode")

        logger.info("Completing task for mode: %s", self._current_mode.slug)
        self._context = update_completion_status(
            self._context, self._current_mode.slug, True
        )
        return await self.evaluate()

    async def force_transition(self, target_slug: str) -> bool:
        """Switch to ``target_slug`` without evaluating any rule.

        Returns:
            False if the slug is unknown, no task is active, or the
            transition callback failed
        """
        target = self._find_mode(target_slug)
        if target is None:
            logger.warning("Force transition to unknown mode: %s", target_slug)
            return False

        try:
            await self._transition(target)
        except Exception as e:
            logger.warning("Force transition error: %s", e)
            return False
        return True

    def reset(self) -> None:
        """Drop the context, current mode and memoized results."""
        logger.info("Resetting transition engine")
        self._context = None
        self._current_mode = None
        self._rule_cache.clear()

    def dispose(self) -> None:
        self._events.dispose()

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    async def evaluate(self) -> ModeConfig | None:
        """Scan the rules and switch on the first automatic match.

        Results are memoized per (task, files, completion) key; a cached
        result is returned without scanning or switching again.
        """
        if self._context is None:
            return None

        cache_key = self.get_cache_key()
        cached = self._rule_cache.get(cache_key)
        if cached is not None:
            logger.debug("Using cached rule evaluation result")
            return cached[0] if cached else None

        logger.debug("Evaluating %d transition rules", len(self._rules))
        matching: list[ModeConfig] = []

        for rule in self._rules:
            next_mode = self._evaluate_rule(rule)
            if next_mode is None or not self.is_valid_transition(
                self._current_mode, next_mode
            ):
                continue

            matching.append(next_mode)
            if rule.automatic:
                await self._transition(next_mode)
                break

        self._rule_cache[cache_key] = matching
        return matching[0] if matching else None

    def get_cache_key(self) -> str:
        """Stable key for the current context; file order does not matter."""
        if self._context is None:
            return ""
        return json.dumps(
            {
                "task": self._context.current_task,
                "files": sorted(self._context.current_files),
                "completion": self._context.completion_status,
            },
            sort_keys=True,
        )

    def is_valid_transition(self, from_mode: ModeConfig | None, to_mode: ModeConfig) -> bool:
        """Check that ``to_mode`` may take over from ``from_mode``.

        The first transition is always valid. Afterwards the target must
        handle every current file, and a source that lists handoff targets
        may only hand control to one of them.
        """
        if from_mode is None:
            return True

        files = self._context.current_files if self._context else []
        if not all(can_handle_file(to_mode, f) for f in files):
            logger.debug("Invalid transition: %s cannot handle current files", to_mode.slug)
            return False

        if from_mode.handoff_to is not None and to_mode.slug not in from_mode.handoff_to:
            logger.debug(
                "Invalid transition: %s cannot hand off to %s",
                from_mode.slug,
                to_mode.slug,
            )
            return False

        return True

    def _evaluate_rule(self, rule: TransitionRule) -> ModeConfig | None:
        if self._context is None:
            return None

        target = self._find_mode(rule.target_mode)
        if target is None:
            return None

        context = self._context
        match rule:
            case TaskRule():
                matched = should_trigger_for_task(target, context.current_task)
            case FileRule():
                matched = any(can_handle_file(target, f) for f in context.current_files)
            case CapabilityRule():
                matched = all(has_capability(target, cap) for cap in rule.condition)
            case HandoffRule():
                matched = self._handoff_ready(rule, target)
            case _:
                logger.debug("Skipping unknown rule: %r", rule)
                return None

        return target if matched else None

    def _handoff_ready(self, rule: HandoffRule, target: ModeConfig) -> bool:
        if self._current_mode is None or self._context is None:
            return False
        completion = self._context.completion_status
        complete = all(
            not required or completion.get(slug, False)
            for slug, required in rule.condition.items()
        )
        return complete and can_receive_handoff(self._current_mode, target)

    def _find_mode(self, slug: str) -> ModeConfig | None:
        return next((mode for mode in self._modes if mode.slug == slug), None)

    # -------------------------------------------------------------------------
    # Transition
    # -------------------------------------------------------------------------

    async def _transition(self, new_mode: ModeConfig) -> None:
        """Switch to ``new_mode`` and notify listeners and the callback.

        The mode and context are updated before the callback runs and are
        left in place if it raises.
        """
        if self._context is None:
            raise NoActiveContextError("Cannot transition without context")

        try:
            before = TransitionEvent(
                from_mode=self._current_mode,
                to_mode=new_mode,
                context=self._context,
                phase=TransitionPhase.BEFORE,
            )
            self._events.fire(before)
            logger.info(
                "Transitioning from %s to %s",
                self._current_mode.slug if self._current_mode else "none",
                new_mode.slug,
            )

            previous = self._current_mode
            self._current_mode = new_mode

            if previous is not None and can_receive_handoff(previous, new_mode):
                self._context.handoff_queue.append(previous.slug)

            self._context = update_completion_status(self._context, new_mode.slug, False)

            if self._on_transition is not None:
                await self._on_transition(before)

            # Completion flags changed, memoized results are stale
            self._rule_cache.clear()

            self._events.fire(
                TransitionEvent(
                    from_mode=previous,
                    to_mode=new_mode,
                    context=self._context,
                    phase=TransitionPhase.AFTER,
                )
            )
        except Exception as e:
            self._events.fire(
                TransitionErrorEvent(error=e, context=self._context, attempted_mode=new_mode)
            )
            logger.error("Transition error: %s", e)
            raise

    def _precondition_failure(self, message: str) -> NoActiveContextError:
        error = NoActiveContextError(message)
        self._events.fire(TransitionErrorEvent(error=error, context=self._context))
        error.log()
        return error
