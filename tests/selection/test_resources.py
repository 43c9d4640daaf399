"""Tests for the resource manager."""

from __future__ import annotations

import pytest

from modeflow.core.config import ModeSettings, ResourceLimits
from modeflow.modes.constants import CACHE_MAX_AGE_SECONDS
from modeflow.selection.resources import ResourceManager


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def manager_with(models: int = 2, clock: FakeClock | None = None) -> ResourceManager:
    settings = ModeSettings(resource_limits=ResourceLimits(preemptive_loading=models))
    return ResourceManager(settings, clock=clock or FakeClock())


class TestModelPool:
    def test_preload_until_full(self) -> None:
        resources = manager_with(models=2)

        assert resources.preload_model("a") is True
        assert resources.preload_model("b") is True
        assert resources.preload_model("c") is False
        assert not resources.is_model_loaded("c")

    def test_capacity_enforced(self) -> None:
        resources = manager_with(models=1)

        assert resources.preload_model("claude-3") is True
        assert resources.preload_model("gpt-4") is False
        assert resources.get_loaded_models() == ["claude-3"]

    def test_duplicate_preload(self) -> None:
        resources = manager_with()
        resources.preload_model("gpt-4")

        assert resources.preload_model("gpt-4") is False
        assert resources.get_loaded_models() == ["gpt-4"]

    def test_unload(self) -> None:
        resources = manager_with()
        resources.preload_model("gpt-4")

        assert resources.unload_model("gpt-4") is True
        assert resources.unload_model("gpt-4") is False
        assert not resources.is_model_loaded("gpt-4")

    def test_default_capacity(self) -> None:
        resources = ResourceManager()

        assert resources.max_preloaded_models == 2

    def test_negative_capacity_rejected(self) -> None:
        with pytest.raises(ValueError):
            manager_with().set_max_preloaded_models(-1)

    def test_optimize_unloads_earliest(self) -> None:
        resources = manager_with(models=3)
        for model in ("a", "b", "c"):
            resources.preload_model(model)

        resources.set_max_preloaded_models(1)
        resources.optimize_resources()

        assert resources.get_loaded_models() == ["c"]


class TestContextCache:
    def test_cache_roundtrip(self) -> None:
        resources = manager_with()

        resources.cache_context("code", "implement login")

        assert resources.get_cached_context("code") == "implement login"
        assert resources.get_cached_context("ask") is None
        assert resources.get_cache_size() > 0

    def test_clear_cache(self) -> None:
        resources = manager_with()
        resources.cache_context("code", "implement login")

        resources.clear_cache()

        assert resources.get_cache_size() == 0
        assert resources.get_cached_context("code") is None

    def test_stale_context_expires(self) -> None:
        clock = FakeClock()
        resources = manager_with(clock=clock)
        resources.cache_context("code", "implement login")
        resources.cache_context("architect", "design schema")

        clock.now = CACHE_MAX_AGE_SECONDS + 1
        resources.optimize_resources()

        assert resources.get_cached_context("code") is None
        # only the well-known modes expire
        assert resources.get_cached_context("architect") == "design schema"

    def test_context_at_max_age_kept(self) -> None:
        clock = FakeClock()
        resources = manager_with(clock=clock)
        resources.cache_context("backend", "add endpoint")

        clock.now = CACHE_MAX_AGE_SECONDS
        resources.optimize_resources()

        assert resources.get_cached_context("backend") == "add endpoint"
