"""Model selection per mode.

Pure functions of (mode, settings): configured overrides first, then the
built-in per-mode tables, then the global defaults. Selection never fails;
it degrades to the best available choice.
"""

from __future__ import annotations

from collections.abc import Mapping

from modeflow.core.config import ModeSettings
from modeflow.modes.constants import (
    CAPABILITY_AXES,
    DEFAULT_FALLBACK_MODEL,
    DEFAULT_MODEL,
    MODE_DEFAULT_MODELS,
    MODE_FALLBACK_MODELS,
    MODEL_CAPABILITIES,
    UNKNOWN_MODEL_SCORE,
)


class ModelSelector:
    """Chooses primary and fallback models for a mode."""

    def __init__(
        self,
        default_model: str = DEFAULT_MODEL,
        default_fallback: str = DEFAULT_FALLBACK_MODEL,
    ) -> None:
        self.default_model = default_model
        self.default_fallback = default_fallback

    def select_model_for_mode(self, state: ModeSettings | None, mode: str) -> str:
        if state is not None and state.mode_api_configs.get(mode):
            return state.mode_api_configs[mode]
        return MODE_DEFAULT_MODELS.get(mode, self.default_model)

    def select_fallback_model(self, state: ModeSettings | None, mode: str) -> str:
        if state is not None and state.mode_fallback_configs.get(mode):
            return state.mode_fallback_configs[mode]
        return MODE_FALLBACK_MODELS.get(mode, self.default_fallback)

    def handle_model_failover(
        self, state: ModeSettings | None, primary_model: str, mode: str
    ) -> str:
        """Model to use after ``primary_model`` failed for ``mode``.

        Returns the mode's fallback unless that is the model that just
        failed, in which case the global default fallback is returned.
        """
        fallback = self.select_fallback_model(state, mode)
        if fallback == primary_model:
            return self.default_fallback
        return fallback

    def evaluate_model_capabilities(self, model: str) -> dict[str, float]:
        """Score vector (complexity, creativity, accuracy, speed) for a model."""
        scores = MODEL_CAPABILITIES.get(model)
        if scores is None:
            return {axis: UNKNOWN_MODEL_SCORE for axis in CAPABILITY_AXES}
        return dict(scores)

    def meets_requirements(
        self, model: str, requirements: Mapping[str, float | None]
    ) -> bool:
        """Whether ``model`` scores at least each requirement threshold.

        An axis the model has no score for never satisfies a requirement.
        """
        capabilities = self.evaluate_model_capabilities(model)
        return all(
            axis in capabilities and capabilities[axis] >= (threshold or 0.0)
            for axis, threshold in requirements.items()
        )

    def select_model_for_task(
        self,
        state: ModeSettings | None,
        mode: str,
        requirements: Mapping[str, float | None],
    ) -> str:
        """Primary model if it fits the task, else the fallback if it does,
        else the primary anyway."""
        primary = self.select_model_for_mode(state, mode)
        if self.meets_requirements(primary, requirements):
            return primary

        fallback = self.select_fallback_model(state, mode)
        if self.meets_requirements(fallback, requirements):
            return fallback

        return primary
