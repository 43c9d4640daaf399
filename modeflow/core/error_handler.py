"""Modeflow Error Display
======================

Rich-formatted error panels for the command line.

Usage:
    from modeflow.core.error_handler import ModeErrorHandler

    try:
        await engine.update_files(files)
    except ModeflowError as e:
        ModeErrorHandler.display_error(e, context="Route")
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.traceback import Traceback

from modeflow.core.errors import ModeflowError

# Shared console instance
_console = Console()

COLORS = {
    "error": "#FF4444",
    "warning": "#FFB800",
    "info": "#00D26A",
    "muted": "#666666",
}


class ModeErrorHandler:
    """Consistent error display for the command line."""

    @staticmethod
    def display_error(
        error: Exception,
        context: str = "Operation",
        show_traceback: bool = False,
        console: Console | None = None,
    ) -> None:
        """Display a formatted error panel.

        Args:
            error: The exception that occurred
            context: Description of what was happening
            show_traceback: Whether to show the full traceback
            console: Optional custom console (uses default if not provided)
        """
        con = console or _console

        content = Text()
        content.append(f"{type(error).__name__}\n", style=f"bold {COLORS['error']}")
        if isinstance(error, ModeflowError):
            content.append(f"{error.error_type.value}: ", style=COLORS["warning"])
            content.append(error.message, style=COLORS["muted"])
            for key, value in error.context.items():
                content.append(f"\n  {key}: ", style=COLORS["muted"])
                content.append(str(value))
        else:
            content.append(str(error), style=COLORS["muted"])

        con.print()
        con.print(
            Panel(
                content,
                title=f"[{COLORS['error']}]{context} Failed[/{COLORS['error']}]",
                border_style=COLORS["error"],
                padding=(1, 2),
            )
        )

        if show_traceback and error.__traceback__:
            con.print()
            con.print(
                Traceback.from_exception(
                    type(error),
                    error,
                    error.__traceback__,
                    show_locals=False,
                    max_frames=10,
                )
            )

    @staticmethod
    def display_warning(
        message: str, context: str = "Warning", console: Console | None = None
    ) -> None:
        """Display a formatted warning panel."""
        con = console or _console
        con.print()
        con.print(
            Panel(
                Text(message, style=COLORS["muted"]),
                title=f"[{COLORS['warning']}]{context}[/{COLORS['warning']}]",
                border_style=COLORS["warning"],
                padding=(0, 2),
            )
        )

    @staticmethod
    def format_error_message(error: Exception, context: str = "Error") -> str:
        """Format an error for logging without Rich markup."""
        return f"[{context}] {type(error).__name__}: {error}"


__all__ = ["COLORS", "ModeErrorHandler"]
