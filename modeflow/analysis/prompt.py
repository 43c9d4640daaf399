"""Suggests a mode from free-text prompts."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from modeflow.analysis.base import (
    KeywordAnalyzer,
    ModeSuggestion,
    normalize,
    sensitivity_of,
)
from modeflow.core.config import ModeSettings
from modeflow.modes.constants import (
    CONTEXT_CUE_BONUS,
    PROMPT_CATEGORIES,
    PROMPT_CUE_GROUPS,
    PROMPT_KEYWORD_CAP,
    PROMPT_KEYWORD_SCORE,
    SUBSTRING_MATCH_SCORE,
)


@dataclass(frozen=True)
class PromptContext:
    text: str
    previous_mode: str | None = None


class PromptAnalyzer(KeywordAnalyzer):
    """Scores prompts against keyword tables.

    Priority order is frontend, backend, architect, security, devops, so a
    prompt mentioning both CSS and an API resolves to frontend.
    """

    def __init__(
        self, categories: Mapping[str, tuple[str, ...]] = PROMPT_CATEGORIES
    ) -> None:
        super().__init__(categories)

    def calculate_confidence(self, context: PromptContext) -> float:
        text = normalize(context.text)
        confidence = 0.0

        # Keywords shared between categories are counted once
        distinct = {
            entry
            for entries in self.categories.values()
            for entry in entries
            if entry in text
        }
        confidence += min(len(distinct) * PROMPT_KEYWORD_SCORE, PROMPT_KEYWORD_CAP)

        confidence += SUBSTRING_MATCH_SCORE * len(self.matching_categories(text))

        confidence += self.previous_mode_bonus(text, context.previous_mode)

        for cues in PROMPT_CUE_GROUPS:
            if any(cue in text for cue in cues):
                confidence += CONTEXT_CUE_BONUS

        return min(confidence, 1.0)

    def score(self, context: PromptContext, threshold: float) -> ModeSuggestion:
        return self.decide(
            normalize(context.text), self.calculate_confidence(context), threshold
        )

    def analyze_prompt(
        self, state: ModeSettings | None, context: PromptContext
    ) -> str | None:
        """Suggest a mode when confidence reaches the configured sensitivity."""
        return self.score(context, sensitivity_of(state)).mode

    def suggest_mode_for_prompt(
        self, text: str, previous_mode: str | None = None
    ) -> str | None:
        """Advisory suggestion using the fixed, lower suggestion threshold.

        ``previous_mode`` is optional; when omitted the prompt is scored
        without prior-mode context.
        """
        context = PromptContext(text=text, previous_mode=previous_mode)
        return self.score(context, self.suggestion_threshold()).mode
