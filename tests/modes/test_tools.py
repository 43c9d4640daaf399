"""Tests for tool permissions per mode."""

from __future__ import annotations

import logging

import pytest

from modeflow.core.errors import FileRestrictionError
from modeflow.modes.constants import ALWAYS_AVAILABLE_TOOLS
from modeflow.modes.tools import (
    does_file_match_regex,
    get_tools_for_mode,
    is_tool_allowed_for_mode,
)
from modeflow.modes.types import GroupOptions, ModeConfig, ToolGroup


class TestFileRegex:
    def test_search_semantics(self) -> None:
        assert does_file_match_regex("docs/guide.md", r"\.md$")
        assert does_file_match_regex("src/docs/guide.txt", r"docs/")
        assert not does_file_match_regex("src/app.ts", r"\.md$")

    def test_invalid_pattern_never_matches(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="modeflow.modes.tools"):
            assert does_file_match_regex("a.md", "[unclosed") is False

        assert "Invalid regex pattern" in caplog.text


class TestGetToolsForMode:
    def test_read_only(self) -> None:
        tools = get_tools_for_mode([ToolGroup.READ])

        assert "read_file" in tools
        assert "write_to_file" not in tools
        assert ALWAYS_AVAILABLE_TOOLS <= set(tools)
        assert tools == sorted(tools)

    def test_restricted_group_still_grants_tools(self) -> None:
        tools = get_tools_for_mode([(ToolGroup.EDIT, GroupOptions(file_regex=r"\.md$"))])

        assert "apply_diff" in tools


class TestIsToolAllowedForMode:
    def test_always_available(self) -> None:
        assert is_tool_allowed_for_mode("switch_mode", "ghost")

    def test_unknown_mode(self) -> None:
        assert not is_tool_allowed_for_mode("read_file", "ghost")

    def test_group_membership(self) -> None:
        assert is_tool_allowed_for_mode("execute_command", "code")
        assert not is_tool_allowed_for_mode("execute_command", "architect")
        assert not is_tool_allowed_for_mode("not_a_tool", "code")

    def test_disabled_by_requirements(self) -> None:
        assert not is_tool_allowed_for_mode(
            "read_file", "code", tool_requirements={"read_file": False}
        )
        assert is_tool_allowed_for_mode(
            "read_file", "code", tool_requirements={"read_file": True}
        )

    def test_disabled_by_experiment(self) -> None:
        assert not is_tool_allowed_for_mode(
            "browser_action", "code", experiments={"browser_action": False}
        )

    def test_restricted_edit_matching_file(self) -> None:
        assert is_tool_allowed_for_mode(
            "write_to_file",
            "architect",
            tool_params={"path": "docs/plan.md", "content": "# Plan"},
        )

    def test_restricted_edit_rejects_other_files(self) -> None:
        with pytest.raises(FileRestrictionError, match="Markdown files only"):
            is_tool_allowed_for_mode(
                "write_to_file",
                "architect",
                tool_params={"path": "src/app.ts", "content": "x"},
            )

    def test_restricted_edit_without_payload(self) -> None:
        assert is_tool_allowed_for_mode(
            "apply_diff", "ask", tool_params={"path": "src/app.ts"}
        )

    def test_custom_mode_consulted(self) -> None:
        custom = ModeConfig(
            slug="runner",
            name="Runner",
            role_definition="Runs commands",
            groups=(ToolGroup.COMMAND,),
        )

        assert is_tool_allowed_for_mode("execute_command", "runner", custom_modes=[custom])
        assert not is_tool_allowed_for_mode("read_file", "runner", custom_modes=[custom])
