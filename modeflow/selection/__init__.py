"""Model selection and bounded resource management."""

from __future__ import annotations

from modeflow.selection.cache import CacheEntry, ModeCache
from modeflow.selection.resources import ResourceManager
from modeflow.selection.selector import ModelSelector

__all__ = ["CacheEntry", "ModeCache", "ModelSelector", "ResourceManager"]
