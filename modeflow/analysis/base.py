"""Shared scoring machinery for the keyword analyzers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging

from modeflow.core.config import DEFAULT_SENSITIVITY, ModeSettings
from modeflow.modes.constants import PREVIOUS_MODE_BONUS, SUGGESTION_THRESHOLD

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModeSuggestion:
    """Outcome of scoring one input.

    Attributes:
        mode: Suggested mode slug, or None when nothing was accepted
        confidence: Score in [0, 1]
        threshold: Acceptance threshold the score was compared against
    """

    mode: str | None
    confidence: float
    threshold: float

    @property
    def accepted(self) -> bool:
        return self.mode is not None


def normalize(text: str) -> str:
    return text.strip().lower()


def sensitivity_of(state: ModeSettings | None) -> float:
    """A missing or zero sensitivity falls back to the default."""
    if state is None:
        return DEFAULT_SENSITIVITY
    return state.auto_switch_sensitivity or DEFAULT_SENSITIVITY


class KeywordAnalyzer:
    """Maps text onto categories described by keyword tables.

    The insertion order of ``categories`` is the priority order: when
    several categories match, the earliest one wins.
    """

    def __init__(self, categories: Mapping[str, tuple[str, ...]]) -> None:
        self.categories: dict[str, tuple[str, ...]] = {
            name: tuple(entry.lower() for entry in entries)
            for name, entries in categories.items()
        }

    @property
    def priority(self) -> tuple[str, ...]:
        return tuple(self.categories)

    def keywords_for(self, mode: str | None) -> tuple[str, ...]:
        if mode is None:
            return ()
        return self.categories.get(mode, ())

    def matching_categories(self, text: str) -> list[str]:
        """Categories with an entry contained in ``text``, in priority order."""
        return [
            name
            for name, entries in self.categories.items()
            if any(entry in text for entry in entries)
        ]

    def classify(self, text: str) -> str | None:
        """First category in priority order whose entries occur in ``text``."""
        matches = self.matching_categories(text)
        return matches[0] if matches else None

    def previous_mode_bonus(self, text: str, previous_mode: str | None) -> float:
        if any(entry in text for entry in self.keywords_for(previous_mode)):
            return PREVIOUS_MODE_BONUS
        return 0.0

    def decide(self, text: str, confidence: float, threshold: float) -> ModeSuggestion:
        confidence = min(confidence, 1.0)
        if confidence < threshold:
            logger.debug(
                "Confidence %.2f below threshold %.2f, no suggestion",
                confidence,
                threshold,
            )
            return ModeSuggestion(None, confidence, threshold)
        return ModeSuggestion(self.classify(text), confidence, threshold)

    @staticmethod
    def suggestion_threshold() -> float:
        return SUGGESTION_THRESHOLD
