"""Advisory analyzers that map commands, prompts and files to mode slugs."""

from __future__ import annotations

from modeflow.analysis.base import KeywordAnalyzer, ModeSuggestion
from modeflow.analysis.command import CommandAnalyzer, CommandContext
from modeflow.analysis.project import (
    FileContext,
    ProjectAnalyzer,
    ProjectStructure,
    TechStack,
)
from modeflow.analysis.prompt import PromptAnalyzer, PromptContext

__all__ = [
    "CommandAnalyzer",
    "CommandContext",
    "FileContext",
    "KeywordAnalyzer",
    "ModeSuggestion",
    "ProjectAnalyzer",
    "ProjectStructure",
    "PromptAnalyzer",
    "PromptContext",
    "TechStack",
]
