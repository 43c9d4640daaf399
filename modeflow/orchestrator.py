"""Wires analyzers, the transition engine, model selection and resources.

Flow: an analyzer optionally suggests a mode, the engine evaluates its
rules and switches, and on every switch the orchestrator picks the model
for the new mode, makes sure it is loaded and caches the task context.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
import logging

from modeflow.analysis.command import CommandAnalyzer, CommandContext
from modeflow.analysis.prompt import PromptAnalyzer, PromptContext
from modeflow.core.config import ModeSettings
from modeflow.core.events import Disposable
from modeflow.modes.registry import ModeRegistry
from modeflow.modes.types import ModeConfig, ModeContext
from modeflow.selection.resources import ResourceManager
from modeflow.selection.selector import ModelSelector
from modeflow.transition.engine import (
    EngineEvent,
    TransitionCallback,
    TransitionEngine,
    TransitionEvent,
)

logger = logging.getLogger(__name__)


class ModeOrchestrator:
    """Single entry point for hosts embedding the mode system."""

    def __init__(
        self,
        settings: ModeSettings | None = None,
        custom_modes: Iterable[ModeConfig] | None = None,
        on_transition: TransitionCallback | None = None,
    ) -> None:
        self.settings = settings or ModeSettings()
        self.registry = ModeRegistry(custom_modes=custom_modes)
        self.selector = ModelSelector()
        self.resources = ResourceManager(self.settings)
        self.command_analyzer = CommandAnalyzer()
        self.prompt_analyzer = PromptAnalyzer()
        self.active_model: str | None = None
        self._host_callback = on_transition
        self.engine = self._build_engine()

    def _build_engine(self) -> TransitionEngine:
        return TransitionEngine(self.registry.get_all(), on_transition=self._on_transition)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def current_mode(self) -> ModeConfig | None:
        return self.engine.get_current_mode()

    @property
    def context(self) -> ModeContext | None:
        return self.engine.get_context()

    def on_transition_event(self, listener: Callable[[EngineEvent], None]) -> Disposable:
        return self.engine.on_transition_event(listener)

    # -------------------------------------------------------------------------
    # Engine passthrough
    # -------------------------------------------------------------------------

    async def start_task(self, task: str, files: Iterable[str] | None = None) -> ModeConfig | None:
        await self.engine.start_task(task, files)
        return self.current_mode

    async def update_files(self, files: Iterable[str]) -> ModeConfig | None:
        await self.engine.update_files(files)
        return self.current_mode

    async def complete_current_task(self) -> ModeConfig | None:
        await self.engine.complete_current_task()
        return self.current_mode

    async def switch_mode(self, slug: str) -> bool:
        return await self.engine.force_transition(slug)

    # -------------------------------------------------------------------------
    # Analyzer driven switching
    # -------------------------------------------------------------------------

    async def handle_prompt(self, text: str) -> ModeConfig | None:
        """Route a prompt: start a task if none is active, then follow the
        prompt analyzer's suggestion when it names a registered mode."""
        if self.context is None:
            await self.engine.start_task(text)

        previous = self.current_mode.slug if self.current_mode else None
        suggestion = self.prompt_analyzer.analyze_prompt(
            self.settings, PromptContext(text=text, previous_mode=previous)
        )
        await self._follow_suggestion(suggestion)
        return self.current_mode

    async def handle_command(
        self, command: str, args: Sequence[str] | None = None
    ) -> ModeConfig | None:
        """Follow the command analyzer's suggestion for an active task."""
        previous = self.current_mode.slug if self.current_mode else None
        suggestion = self.command_analyzer.analyze_command(
            self.settings,
            CommandContext(command=command, args=args, previous_mode=previous),
        )
        if self.context is not None:
            await self._follow_suggestion(suggestion)
        return self.current_mode

    async def _follow_suggestion(self, suggestion: str | None) -> None:
        if suggestion is None:
            return
        if self.current_mode is not None and self.current_mode.slug == suggestion:
            return
        if self.registry.get_by_slug(suggestion) is None:
            logger.debug("Suggested mode %s is not registered", suggestion)
            return
        await self.engine.force_transition(suggestion)

    # -------------------------------------------------------------------------
    # Transition side effects
    # -------------------------------------------------------------------------

    async def _on_transition(self, event: TransitionEvent) -> None:
        slug = event.to_mode.slug
        model = self.selector.select_model_for_mode(self.settings, slug)
        self._ensure_loaded(model)
        self.active_model = model
        self.resources.cache_context(slug, event.context.current_task)

        if self._host_callback is not None:
            await self._host_callback(event)

    def _ensure_loaded(self, model: str) -> None:
        if self.resources.is_model_loaded(model):
            return
        if self.resources.preload_model(model):
            return

        loaded = self.resources.get_loaded_models()
        if loaded:
            logger.info("Model pool full, unloading %s for %s", loaded[0], model)
            self.resources.unload_model(loaded[0])
            self.resources.preload_model(model)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def update_custom_modes(self, custom_modes: Iterable[ModeConfig]) -> None:
        """Replace the custom modes.

        The engine is rebuilt, so its state and event subscriptions are dropped.
        """
        self.registry = self.registry.with_custom_modes(custom_modes)
        self.engine.dispose()
        self.engine = self._build_engine()
        self.active_model = None

    def dispose(self) -> None:
        self.engine.dispose()
        self.resources.clear_cache()
