"""Validation of caller-supplied mode definitions.

``ModeConfig`` only enforces the structural invariants (no duplicate
entries). The schema here is what a configuration loader should run on
untrusted definitions before handing them to the engine.
"""

from __future__ import annotations

from collections.abc import Iterable
import re
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from modeflow.core.errors import InvalidHandoffTargetError
from modeflow.modes.types import GroupEntry, ModeConfig, get_group_options

SLUG_PATTERN = r"^[a-zA-Z0-9-]+$"


def _check_regex(pattern: str, label: str) -> None:
    try:
        re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid {label}: {pattern} ({e})") from e


class CustomModeSchema(ModeConfig):
    """Strict form of ``ModeConfig`` for definitions read from settings."""

    slug: str = Field(pattern=SLUG_PATTERN)
    name: str = Field(min_length=1)
    role_definition: str = Field(min_length=1)
    groups: tuple[GroupEntry, ...] = Field(min_length=1)

    @field_validator("groups")
    @classmethod
    def _group_regexes_compile(
        cls, groups: tuple[GroupEntry, ...]
    ) -> tuple[GroupEntry, ...]:
        for group in groups:
            options = get_group_options(group)
            if options is not None and options.file_regex:
                _check_regex(options.file_regex, "regular expression pattern")
        return groups

    @field_validator("file_patterns")
    @classmethod
    def _file_patterns_compile(cls, patterns: tuple[str, ...]) -> tuple[str, ...]:
        for pattern in patterns:
            _check_regex(pattern, "file pattern regex")
        return patterns

    @model_validator(mode="after")
    def _non_empty_when_given(self) -> Self:
        for name in ("capabilities", "triggers"):
            if name in self.model_fields_set and not getattr(self, name):
                raise ValueError(f"At least one {name.rstrip('s')} is required")
        return self


class CustomModesSettings(BaseModel):
    """A whole ``{"customModes": [...]}`` settings document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    custom_modes: list[CustomModeSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def _cross_mode_checks(self) -> Self:
        slugs: set[str] = set()
        for mode in self.custom_modes:
            if mode.slug in slugs:
                raise ValueError("Duplicate mode slugs are not allowed")
            slugs.add(mode.slug)

        for mode in self.custom_modes:
            if mode.handoff_to and any(t not in slugs for t in mode.handoff_to):
                raise ValueError("Handoff targets must refer to valid mode slugs")
        return self


def validate_custom_mode(data: Any) -> ModeConfig:
    """Validate one mode definition.

    Raises:
        pydantic.ValidationError: if the definition is invalid
    """
    if isinstance(data, ModeConfig):
        data = data.model_dump(exclude_unset=True)
    return CustomModeSchema.model_validate(data)


def validate_handoff_targets(mode: ModeConfig, available: Iterable[ModeConfig]) -> None:
    """Check that every handoff target names one of ``available``.

    Raises:
        InvalidHandoffTargetError: listing the unknown targets
    """
    if not mode.handoff_to:
        return

    valid = {m.slug for m in available}
    invalid = [target for target in mode.handoff_to if target not in valid]
    if invalid:
        raise InvalidHandoffTargetError(mode.slug, invalid)
