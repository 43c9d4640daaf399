"""Heuristics over individual files and whole project layouts."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import re

from modeflow.analysis.base import sensitivity_of
from modeflow.core.config import ModeSettings

_FRONTEND_FILE = re.compile(r"\.(css|html|jsx?|tsx?)$")
_BACKEND_FILE = re.compile(r"\.(py|java|go|rs)$")
_ROUTE_MARKERS = ("app.post", "app.get")

_FRONTEND_DEPENDENCIES = ("react", "vue", "angular")
_BACKEND_DEPENDENCIES = ("express", "fastify", "nest")
_LANGUAGE_DEPENDENCIES = {"typescript": "typescript", "babel": "javascript", "python": "python"}


@dataclass(frozen=True)
class FileContext:
    file_name: str
    content: str = ""


@dataclass(frozen=True)
class ProjectStructure:
    type: str
    confidence: float


@dataclass
class TechStack:
    frontend: list[str] = field(default_factory=list)
    backend: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)


class ProjectAnalyzer:
    """Suggests modes from file names and contents."""

    def analyze_context(self, file: FileContext) -> float:
        confidence = 0.0
        if _FRONTEND_FILE.search(file.file_name):
            confidence += 0.6
        if _BACKEND_FILE.search(file.file_name):
            confidence += 0.6
        if any(marker in file.content for marker in _ROUTE_MARKERS):
            confidence += 0.3
        if "class" in file.content and "extends" in file.content:
            confidence += 0.2
        return min(confidence, 1.0)

    def should_switch_mode(
        self, state: ModeSettings | None, file: FileContext
    ) -> str | None:
        """Suggest a mode for a file being worked on.

        Extension checks come first, then content markers.
        """
        if self.analyze_context(file) < sensitivity_of(state):
            return None

        if _FRONTEND_FILE.search(file.file_name):
            return "frontend"
        if _BACKEND_FILE.search(file.file_name):
            return "backend"
        if any(marker in file.content for marker in _ROUTE_MARKERS):
            return "backend"
        if "class" in file.content and "extends" in file.content:
            return "code"
        return None

    def analyze_project_structure(self, paths: Iterable[str]) -> ProjectStructure:
        entries = set(paths)
        confidence = 0.0
        project_type = "unknown"

        if "src/components/" in entries and "package.json" in entries:
            confidence += 0.5
            project_type = "react-app"

        if "src/api/" in entries or "src/routes/" in entries:
            confidence += 0.4
            project_type = "fullstack-app" if project_type == "react-app" else "backend-app"

        return ProjectStructure(type=project_type, confidence=min(confidence, 1.0))

    def analyze_tech_stack(self, dependencies: Mapping[str, str]) -> TechStack:
        stack = TechStack()
        stack.frontend = [dep for dep in _FRONTEND_DEPENDENCIES if dep in dependencies]
        stack.backend = [dep for dep in _BACKEND_DEPENDENCIES if dep in dependencies]
        stack.languages = [
            language
            for dep, language in _LANGUAGE_DEPENDENCIES.items()
            if dep in dependencies
        ]
        return stack
