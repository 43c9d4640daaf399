"""Modeflow
========

Mode transition and selection engine: decides which mode (operating
persona) handles the work next, enforces which transitions between modes
are legal, and manages cached per-mode context and a bounded pool of
loaded models.

Architecture:
- modes/: Mode definitions, registry, validation, tool permissions
- analysis/: Confidence-scored suggestions from commands, prompts, files
- transition/: Rule compiler, transition engine, single-writer queue
- selection/: Model selection, context cache, resource manager
- orchestrator.py: Wires the pieces together for a host

Usage:
    from modeflow import ModeOrchestrator

    orchestrator = ModeOrchestrator()
    await orchestrator.start_task("implement login form", ["src/login.ts"])
"""

from __future__ import annotations

from modeflow.analysis import CommandAnalyzer, PromptAnalyzer
from modeflow.core import ModeSettings, load_settings
from modeflow.modes import ModeConfig, ModeContext, ModeRegistry
from modeflow.orchestrator import ModeOrchestrator
from modeflow.selection import ModeCache, ModelSelector, ResourceManager
from modeflow.transition import EngineQueue, TransitionEngine

__version__ = "0.1.0"

__all__ = [
    "CommandAnalyzer",
    "EngineQueue",
    "ModeCache",
    "ModeConfig",
    "ModeContext",
    "ModeOrchestrator",
    "ModeRegistry",
    "ModeSettings",
    "ModelSelector",
    "PromptAnalyzer",
    "ResourceManager",
    "TransitionEngine",
    "load_settings",
]
