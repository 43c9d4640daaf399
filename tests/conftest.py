from __future__ import annotations

import os
from unittest.mock import AsyncMock

import pytest

from modeflow.core.config import ModeSettings
from modeflow.modes.types import ModeConfig


def build_mode(slug: str, **kwargs) -> ModeConfig:
    """Build a ModeConfig with throwaway name and role text."""
    kwargs.setdefault("name", slug.title())
    kwargs.setdefault("role_definition", f"{slug} mode for testing")
    return ModeConfig(slug=slug, **kwargs)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep MODEFLOW_* variables and stray .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("MODEFLOW_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> ModeSettings:
    return ModeSettings()


@pytest.fixture
def on_transition() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def scenario_modes() -> list[ModeConfig]:
    """A code mode that hands off to a markdown-only architect mode."""
    return [
        build_mode("code", triggers=("implement",), handoff_to=("architect",)),
        build_mode("architect", triggers=("architecture",), file_patterns=(r"\.md$",)),
    ]


@pytest.fixture
def team_modes() -> list[ModeConfig]:
    return [
        build_mode(
            "code",
            capabilities=("implement", "test"),
            triggers=("code", "implement"),
            handoff_to=("architect", "tester"),
            file_patterns=(r"\.ts$", r"\.js$"),
        ),
        build_mode(
            "architect",
            capabilities=("design", "review"),
            triggers=("architecture", "design"),
            handoff_to=("code",),
            file_patterns=(r"\.md$",),
        ),
        build_mode(
            "tester",
            capabilities=("test", "verify"),
            triggers=("verify",),
            handoff_to=("code",),
            file_patterns=(r"test\.ts$",),
        ),
    ]


@pytest.fixture
def make_mode():
    """Factory for ModeConfig instances with placeholder name and role."""
    return build_mode
