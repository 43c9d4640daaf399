"""Suggests a mode from a shell command line."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from modeflow.analysis.base import (
    KeywordAnalyzer,
    ModeSuggestion,
    normalize,
    sensitivity_of,
)
from modeflow.core.config import ModeSettings
from modeflow.modes.constants import (
    COMMAND_CATEGORIES,
    CONTEXT_CUE_BONUS,
    DEVELOPMENT_FLAGS,
    EXACT_MATCH_SCORE,
    PRODUCTION_FLAGS,
    SUBSTRING_MATCH_SCORE,
)


@dataclass(frozen=True)
class CommandContext:
    command: str
    args: Sequence[str] | None = None
    previous_mode: str | None = None


class CommandAnalyzer(KeywordAnalyzer):
    """Scores commands against frontend, backend, devops and security tables.

    Example:
        >>> analyzer = CommandAnalyzer()
        >>> analyzer.analyze_command(None, CommandContext(command="npm run dev"))
        'frontend'
    """

    def __init__(
        self, categories: Mapping[str, tuple[str, ...]] = COMMAND_CATEGORIES
    ) -> None:
        super().__init__(categories)

    def calculate_confidence(self, context: CommandContext) -> float:
        command = normalize(context.command)
        confidence = 0.0

        for entries in self.categories.values():
            if command in entries:
                confidence += EXACT_MATCH_SCORE

        for entries in self.categories.values():
            if any(entry in command for entry in entries):
                confidence += SUBSTRING_MATCH_SCORE

        confidence += self.previous_mode_bonus(command, context.previous_mode)

        args = context.args or ()
        if any(flag in arg for arg in args for flag in PRODUCTION_FLAGS):
            confidence += CONTEXT_CUE_BONUS
        if any(flag in arg for arg in args for flag in DEVELOPMENT_FLAGS):
            confidence += CONTEXT_CUE_BONUS

        return min(confidence, 1.0)

    def score(self, context: CommandContext, threshold: float) -> ModeSuggestion:
        return self.decide(
            normalize(context.command), self.calculate_confidence(context), threshold
        )

    def analyze_command(
        self, state: ModeSettings | None, context: CommandContext
    ) -> str | None:
        """Suggest a mode when confidence reaches the configured sensitivity.

        Args:
            state: Settings providing ``auto_switch_sensitivity``
            context: The command and its arguments

        Returns:
            Mode slug, or None when confidence is too low or nothing matches
        """
        return self.score(context, sensitivity_of(state)).mode

    def suggest_mode_for_command(
        self,
        command: str,
        args: Sequence[str] | None = None,
        previous_mode: str | None = None,
    ) -> str | None:
        """Advisory suggestion using the fixed, lower suggestion threshold."""
        context = CommandContext(command=command, args=args, previous_mode=previous_mode)
        return self.score(context, self.suggestion_threshold()).mode
