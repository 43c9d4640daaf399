"""Mode registry: built-in definitions overlaid with caller-supplied ones."""

from __future__ import annotations

from collections.abc import Iterable
import logging

from modeflow.core.errors import ModeNotFoundError
from modeflow.modes.constants import BUILTIN_MODES
from modeflow.modes.types import ModeConfig

logger = logging.getLogger(__name__)


class ModeRegistry:
    """Lookup over the built-in modes and a list of custom modes.

    Custom modes take precedence: a custom mode whose slug matches a
    built-in replaces it in place, any other custom mode is appended.

    Example:
        >>> registry = ModeRegistry(custom_modes=[my_mode])
        >>> registry.get_by_slug("code").name
        'Code'
    """

    def __init__(
        self,
        custom_modes: Iterable[ModeConfig] | None = None,
        builtin_modes: Iterable[ModeConfig] = BUILTIN_MODES,
    ) -> None:
        self._builtin: tuple[ModeConfig, ...] = tuple(builtin_modes)
        self._custom: tuple[ModeConfig, ...] = tuple(custom_modes or ())

    @property
    def builtin_modes(self) -> tuple[ModeConfig, ...]:
        return self._builtin

    @property
    def custom_modes(self) -> tuple[ModeConfig, ...]:
        return self._custom

    @property
    def default_mode_slug(self) -> str:
        return self._builtin[0].slug

    def get_by_slug(self, slug: str) -> ModeConfig | None:
        """Find a mode by slug, checking custom modes first."""
        for mode in self._custom:
            if mode.slug == slug:
                return mode
        for mode in self._builtin:
            if mode.slug == slug:
                return mode
        return None

    def get_mode_config(self, slug: str) -> ModeConfig:
        """Like ``get_by_slug`` but raises ``ModeNotFoundError`` on a miss."""
        mode = self.get_by_slug(slug)
        if mode is None:
            raise ModeNotFoundError(slug)
        return mode

    def get_all(self) -> list[ModeConfig]:
        """All modes, built-ins first, with custom modes overlaid or appended."""
        all_modes = list(self._builtin)
        if not self._custom:
            return all_modes

        for custom in self._custom:
            for index, mode in enumerate(all_modes):
                if mode.slug == custom.slug:
                    all_modes[index] = custom
                    break
            else:
                all_modes.append(custom)
        return all_modes

    def is_custom(self, slug: str) -> bool:
        """Whether a slug is defined (or overridden) by a custom mode."""
        return any(mode.slug == slug for mode in self._custom)

    def get_role_definition(self, slug: str) -> str:
        mode = self.get_by_slug(slug)
        if mode is None:
            logger.warning("No mode found for slug: %s", slug)
            return ""
        return mode.role_definition

    def default_prompts(self) -> dict[str, str]:
        """Role definition of each built-in mode, keyed by slug."""
        return {mode.slug: mode.role_definition for mode in self._builtin}

    def with_custom_modes(self, custom_modes: Iterable[ModeConfig]) -> ModeRegistry:
        """Return a registry over the same built-ins with new custom modes."""
        return ModeRegistry(custom_modes=custom_modes, builtin_modes=self._builtin)
