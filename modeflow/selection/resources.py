"""Bounded pools: loaded model identifiers and cached per-mode context."""

from __future__ import annotations

from collections.abc import Callable
import logging
import time

from modeflow.core.config import ModeSettings, ResourceLimits
from modeflow.modes.constants import CACHE_MAX_AGE_SECONDS, EXPIRING_CACHE_MODES
from modeflow.selection.cache import CacheEntry, ModeCache

logger = logging.getLogger(__name__)


class ResourceManager:
    """Tracks which models are loaded and caches context per mode.

    Preloading never evicts: a full pool rejects new models until one is
    unloaded or ``optimize_resources`` trims it.

    Example:
        >>> resources = ResourceManager(settings)
        >>> resources.preload_model("gpt-4")
        True
    """

    def __init__(
        self,
        state: ModeSettings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        limits = state.resource_limits if state is not None else ResourceLimits()
        self.max_preloaded_models = limits.preemptive_loading
        self._clock = clock
        # dict keeps insertion order, the earliest-loaded model comes first
        self._loaded_models: dict[str, None] = {}
        self._mode_cache = ModeCache(limits.mode_caching)

    # -------------------------------------------------------------------------
    # Models
    # -------------------------------------------------------------------------

    def preload_model(self, model: str) -> bool:
        """Mark a model as loaded.

        Returns:
            False if it is already loaded or the pool is full
        """
        if model in self._loaded_models:
            return False
        if len(self._loaded_models) >= self.max_preloaded_models:
            logger.debug("Model pool full, not preloading %s", model)
            return False

        self._loaded_models[model] = None
        logger.debug("Preloaded model %s", model)
        return True

    def unload_model(self, model: str) -> bool:
        if model not in self._loaded_models:
            return False
        del self._loaded_models[model]
        return True

    def is_model_loaded(self, model: str) -> bool:
        return model in self._loaded_models

    def get_loaded_models(self) -> list[str]:
        return list(self._loaded_models)

    def set_max_preloaded_models(self, limit: int) -> None:
        """Change the pool capacity; an overfull pool is trimmed by optimize_resources()."""
        if limit < 0:
            raise ValueError("Model pool capacity cannot be negative")
        self.max_preloaded_models = limit

    # -------------------------------------------------------------------------
    # Context cache
    # -------------------------------------------------------------------------

    def cache_context(self, mode: str, context: str) -> None:
        self._mode_cache.set(mode, CacheEntry(context=context, timestamp=self._clock()))

    def get_cached_context(self, mode: str) -> str | None:
        entry = self._mode_cache.get(mode)
        return entry.context if entry is not None else None

    def get_cache_size(self) -> float:
        """Cache usage in MB."""
        return self._mode_cache.size()

    def clear_cache(self) -> None:
        self._mode_cache.clear()

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def optimize_resources(self) -> None:
        """Trim the model pool to capacity and expire stale cached context.

        Models are unloaded earliest-loaded first. Cached context of the
        well-known modes expires after 30 minutes.
        """
        while len(self._loaded_models) > self.max_preloaded_models:
            oldest = next(iter(self._loaded_models))
            logger.info("Unloading model %s to stay within capacity", oldest)
            self.unload_model(oldest)

        now = self._clock()
        for mode in EXPIRING_CACHE_MODES:
            entry = self._mode_cache.get(mode)
            if entry is not None and now - entry.timestamp > CACHE_MAX_AGE_SECONDS:
                logger.debug("Expiring cached context for %s", mode)
                self._mode_cache.delete(mode)
