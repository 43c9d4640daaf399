"""Tests for the command analyzer."""

from __future__ import annotations

import pytest

from modeflow.analysis.command import CommandAnalyzer, CommandContext
from modeflow.core.config import ModeSettings


@pytest.fixture
def analyzer() -> CommandAnalyzer:
    return CommandAnalyzer()


class TestCalculateConfidence:
    def test_exact_and_substring(self, analyzer: CommandAnalyzer) -> None:
        assert analyzer.calculate_confidence(CommandContext("npm run dev")) == 1.0

    def test_substring_only(self, analyzer: CommandAnalyzer) -> None:
        confidence = analyzer.calculate_confidence(CommandContext("kubectl apply -f app.yaml"))

        assert confidence == pytest.approx(0.5)

    def test_case_and_whitespace_ignored(self, analyzer: CommandAnalyzer) -> None:
        assert analyzer.calculate_confidence(CommandContext("  NPM RUN DEV ")) == 1.0

    def test_flags_and_previous_mode(self, analyzer: CommandAnalyzer) -> None:
        context = CommandContext(
            "kubectl apply", args=["--prod", "--dev"], previous_mode="devops"
        )

        assert analyzer.calculate_confidence(context) == pytest.approx(0.9)

    def test_previous_mode_needs_matching_keyword(self, analyzer: CommandAnalyzer) -> None:
        context = CommandContext("kubectl apply", previous_mode="frontend")

        assert analyzer.calculate_confidence(context) == pytest.approx(0.5)

    def test_unrelated_command(self, analyzer: CommandAnalyzer) -> None:
        assert analyzer.calculate_confidence(CommandContext("ls -la")) == 0.0


class TestAnalyzeCommand:
    def test_unknown_script_below_high_sensitivity(self, analyzer: CommandAnalyzer) -> None:
        settings = ModeSettings(auto_switch_sensitivity=0.9)

        assert analyzer.analyze_command(settings, CommandContext("npm run custom-script")) is None

    def test_confident_suggestion(self, analyzer: CommandAnalyzer) -> None:
        assert analyzer.analyze_command(None, CommandContext("npm run dev")) == "frontend"

    def test_priority_order(self, analyzer: CommandAnalyzer) -> None:
        # backend and devops both match; backend comes first
        assert analyzer.analyze_command(None, CommandContext("docker-compose up")) == "backend"

    def test_below_sensitivity(self, analyzer: CommandAnalyzer) -> None:
        assert analyzer.analyze_command(None, CommandContext("kubectl apply")) is None

    def test_uses_configured_sensitivity(self, analyzer: CommandAnalyzer) -> None:
        settings = ModeSettings(auto_switch_sensitivity=0.4)

        assert analyzer.analyze_command(settings, CommandContext("kubectl apply")) == "devops"

    def test_zero_sensitivity_uses_default(self, analyzer: CommandAnalyzer) -> None:
        settings = ModeSettings(auto_switch_sensitivity=0.0)

        assert analyzer.analyze_command(settings, CommandContext("kubectl apply")) is None
        assert analyzer.analyze_command(settings, CommandContext("npm run dev")) == "frontend"

    def test_bonuses_reach_threshold(self, analyzer: CommandAnalyzer) -> None:
        context = CommandContext(
            "kubectl apply", args=["--prod", "--dev"], previous_mode="devops"
        )

        assert analyzer.analyze_command(None, context) == "devops"

    def test_score_reports_threshold(self, analyzer: CommandAnalyzer) -> None:
        suggestion = analyzer.score(CommandContext("ls"), 0.8)

        assert suggestion.mode is None
        assert not suggestion.accepted
        assert suggestion.threshold == 0.8


class TestSuggestModeForCommand:
    def test_lower_threshold(self, analyzer: CommandAnalyzer) -> None:
        assert analyzer.suggest_mode_for_command("kubectl get pods") == "devops"

    def test_security_tool(self, analyzer: CommandAnalyzer) -> None:
        assert analyzer.suggest_mode_for_command("trivy image app:latest") == "security"

    def test_no_match(self, analyzer: CommandAnalyzer) -> None:
        assert analyzer.suggest_mode_for_command("echo hello") is None
