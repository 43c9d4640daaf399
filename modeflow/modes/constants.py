"""Modeflow Mode Constants
========================

All constants, mappings, and built-in definitions for the mode system.

This module contains:
- Built-in mode definitions
- Tool group membership
- Analyzer keyword and command tables
- Model default, fallback and capability tables
- Resource maintenance constants
"""

from __future__ import annotations

from modeflow.modes.types import GroupOptions, ModeConfig, ToolGroup

# =============================================================================
# BUILT-IN MODES
# =============================================================================

_MARKDOWN_ONLY = GroupOptions(file_regex=r"\.md$", description="Markdown files only")

BUILTIN_MODES: tuple[ModeConfig, ...] = (
    ModeConfig(
        slug="code",
        name="Code",
        role_definition=(
            "You are a highly skilled software engineer with extensive knowledge "
            "in many programming languages, frameworks, design patterns, and "
            "best practices."
        ),
        groups=(
            ToolGroup.READ,
            ToolGroup.EDIT,
            ToolGroup.BROWSER,
            ToolGroup.COMMAND,
            ToolGroup.MCP,
        ),
        capabilities=("implement", "test", "debug", "refactor"),
        triggers=("code", "implement", "develop", "fix", "test"),
        handoff_to=("architect", "ask"),
        file_patterns=(
            r".*\.(ts|js|jsx|tsx)$",
            r".*\.(py|java|cpp|cs)$",
            r".*\.(html|css|scss)$",
        ),
    ),
    ModeConfig(
        slug="architect",
        name="Architect",
        role_definition=(
            "You are a software architecture expert specializing in analyzing "
            "codebases, identifying patterns, and providing high-level technical "
            "guidance. You can edit markdown documentation files to record "
            "architectural decisions and patterns."
        ),
        groups=(
            ToolGroup.READ,
            (ToolGroup.EDIT, _MARKDOWN_ONLY),
            ToolGroup.BROWSER,
            ToolGroup.MCP,
        ),
        capabilities=("design", "review", "document", "analyze"),
        triggers=("architecture", "design", "pattern", "structure"),
        handoff_to=("code", "ask"),
        file_patterns=(r".*\.md$", r"docs/.*", r"architecture/.*"),
    ),
    ModeConfig(
        slug="ask",
        name="Ask",
        role_definition=(
            "You are a knowledgeable technical assistant focused on answering "
            "questions about software development and technology. You keep a "
            "read-only approach to the codebase but may create and edit markdown "
            "files to document and explain concepts."
        ),
        groups=(
            ToolGroup.READ,
            (ToolGroup.EDIT, _MARKDOWN_ONLY),
            ToolGroup.BROWSER,
            ToolGroup.MCP,
        ),
        capabilities=("explain", "research", "document", "analyze"),
        triggers=("explain", "how", "what", "why", "help"),
        handoff_to=("code", "architect"),
        file_patterns=(r".*\.md$", r"docs/.*"),
    ),
)

DEFAULT_MODE_SLUG: str = BUILTIN_MODES[0].slug

# =============================================================================
# TOOL GROUPS
# =============================================================================

TOOL_GROUPS: dict[ToolGroup, frozenset[str]] = {
    ToolGroup.READ: frozenset({
        "read_file",
        "search_files",
        "list_files",
        "list_code_definition_names",
    }),
    ToolGroup.EDIT: frozenset({
        "write_to_file",
        "apply_diff",
        "insert_content",
        "search_and_replace",
    }),
    ToolGroup.BROWSER: frozenset({"browser_action"}),
    ToolGroup.COMMAND: frozenset({"execute_command"}),
    ToolGroup.MCP: frozenset({"use_mcp_tool", "access_mcp_resource"}),
}

# Tools available regardless of mode
ALWAYS_AVAILABLE_TOOLS: frozenset[str] = frozenset({
    "ask_followup_question",
    "attempt_completion",
    "switch_mode",
    "new_task",
})

# Tool parameters that indicate an edit is about to be written
EDIT_PAYLOAD_PARAMS: tuple[str, ...] = ("diff", "content", "operations")

# =============================================================================
# COMMAND ANALYZER TABLES
# =============================================================================

COMMAND_CATEGORIES: dict[str, tuple[str, ...]] = {
    "frontend": ("npm run dev", "npm start", "yarn dev", "ng serve", "vue serve"),
    "backend": (
        "node server.js",
        "npm run server",
        "python manage.py runserver",
        "go run",
        "docker-compose up",
    ),
    "devops": ("docker", "kubectl", "terraform", "aws", "gcloud"),
    "security": ("npm audit", "yarn audit", "snyk test", "trivy", "sonarqube"),
}

PRODUCTION_FLAGS: tuple[str, ...] = ("--prod", "--production")
DEVELOPMENT_FLAGS: tuple[str, ...] = ("--dev", "--development")

# =============================================================================
# PROMPT ANALYZER TABLES
# =============================================================================

PROMPT_CATEGORIES: dict[str, tuple[str, ...]] = {
    "frontend": (
        "css",
        "html",
        "layout",
        "styling",
        "responsive",
        "ui",
        "ux",
        "component",
        "animation",
        "design",
    ),
    "backend": (
        "api",
        "database",
        "server",
        "endpoint",
        "authentication",
        "middleware",
        "cache",
        "performance",
    ),
    "architect": (
        "architecture",
        "design pattern",
        "system design",
        "scalability",
        "microservices",
        "integration",
        "workflow",
    ),
    "security": (
        "security",
        "vulnerability",
        "authentication",
        "authorization",
        "encryption",
        "audit",
        "compliance",
    ),
    "devops": (
        "deployment",
        "infrastructure",
        "pipeline",
        "monitoring",
        "kubernetes",
        "docker",
        "ci/cd",
    ),
}

# Each group adds a small bonus when any of its verbs appears
PROMPT_CUE_GROUPS: tuple[tuple[str, ...], ...] = (
    ("create", "implement"),
    ("improve", "optimize"),
    ("fix", "debug"),
)

# =============================================================================
# SCORING
# =============================================================================

EXACT_MATCH_SCORE = 0.8
SUBSTRING_MATCH_SCORE = 0.5
PROMPT_KEYWORD_SCORE = 0.2
PROMPT_KEYWORD_CAP = 0.8
PREVIOUS_MODE_BONUS = 0.2
CONTEXT_CUE_BONUS = 0.1
SUGGESTION_THRESHOLD = 0.5

# =============================================================================
# MODEL SELECTION
# =============================================================================

DEFAULT_MODEL = "gpt-4"
DEFAULT_FALLBACK_MODEL = "gpt-3.5-turbo"

MODE_DEFAULT_MODELS: dict[str, str] = {
    "frontend": "claude-3",
    "backend": "gpt-4",
    "security": "claude-3",
}

MODE_FALLBACK_MODELS: dict[str, str] = {
    "frontend": "gpt-4",
    "backend": "gpt-3.5-turbo",
    "security": "gpt-4",
}

CAPABILITY_AXES: tuple[str, ...] = ("complexity", "creativity", "accuracy", "speed")

MODEL_CAPABILITIES: dict[str, dict[str, float]] = {
    "gpt-4": {"complexity": 0.9, "creativity": 0.8, "accuracy": 0.9, "speed": 0.7},
    "claude-3": {"complexity": 0.85, "creativity": 0.9, "accuracy": 0.85, "speed": 0.8},
    "gpt-3.5-turbo": {"complexity": 0.7, "creativity": 0.7, "accuracy": 0.7, "speed": 0.9},
}

UNKNOWN_MODEL_SCORE = 0.5

# =============================================================================
# RESOURCE MAINTENANCE
# =============================================================================

BYTES_PER_MB = 1024 * 1024

# Cached contexts older than this are dropped by optimize_resources()
CACHE_MAX_AGE_SECONDS = 30 * 60

# Modes whose cached context is checked for expiry
EXPIRING_CACHE_MODES: tuple[str, ...] = ("code", "frontend", "backend", "security")
