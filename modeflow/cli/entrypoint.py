"""Modeflow CLI Entrypoint.

Inspect modes, ask the analyzers for a suggestion, or route a task through
the transition engine from the command line.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
import tomllib

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from modeflow.analysis.base import sensitivity_of
from modeflow.analysis.command import CommandAnalyzer, CommandContext
from modeflow.analysis.prompt import PromptAnalyzer, PromptContext
from modeflow.core.config import ModeSettings, load_settings
from modeflow.core.error_handler import ModeErrorHandler
from modeflow.core.errors import ModeflowError
from modeflow.modes.registry import ModeRegistry
from modeflow.orchestrator import ModeOrchestrator
from modeflow.transition.engine import EngineEvent, TransitionEvent, TransitionPhase


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="modeflow",
        description="Modeflow - mode transition and selection engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  modeflow modes                                   # List registered modes
  modeflow suggest --prompt "style the login page"  # Ask the prompt analyzer
  modeflow suggest --command "npm run dev"          # Ask the command analyzer
  modeflow route "implement feature" --file src/app.ts --complete
        """,
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to modeflow.toml")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="action", required=True)

    sub.add_parser("modes", help="List registered modes")

    suggest = sub.add_parser("suggest", help="Suggest a mode for a prompt or command")
    source = suggest.add_mutually_exclusive_group(required=True)
    source.add_argument("--prompt", default=None, help="Free-text prompt")
    source.add_argument("--command", default=None, help="Shell command line")
    suggest.add_argument(
        "--arg", dest="args", action="append", default=[], help="Command argument"
    )
    suggest.add_argument("--previous", default=None, help="Previously active mode")

    route = sub.add_parser("route", help="Route a task through the transition engine")
    route.add_argument("task", help="Task description")
    route.add_argument(
        "--file", dest="files", action="append", default=[], help="File touched by the task"
    )
    route.add_argument(
        "--complete",
        action="store_true",
        help="Complete the current mode's work after starting",
    )
    route.add_argument(
        "--then-files",
        nargs="+",
        default=None,
        help="Files to switch to after completing",
    )

    return parser.parse_args(argv)


def configure_logging(level: str, verbose: bool = False) -> None:
    logging.basicConfig(
        level="DEBUG" if verbose else level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def show_modes(console: Console, registry: ModeRegistry) -> None:
    table = Table(title="Modes")
    table.add_column("Slug", style="bold")
    table.add_column("Name")
    table.add_column("Triggers")
    table.add_column("Handoff")
    table.add_column("Custom")
    for mode in registry.get_all():
        table.add_row(
            mode.slug,
            mode.name,
            ", ".join(mode.triggers),
            ", ".join(mode.handoff_to or ()),
            "yes" if registry.is_custom(mode.slug) else "",
        )
    console.print(table)


def show_suggestion(console: Console, settings: ModeSettings, args: argparse.Namespace) -> None:
    if args.prompt is not None:
        analyzer = PromptAnalyzer()
        context = PromptContext(text=args.prompt, previous_mode=args.previous)
        auto = analyzer.score(context, sensitivity_of(settings))
        hint = analyzer.suggest_mode_for_prompt(args.prompt, args.previous)
    else:
        analyzer = CommandAnalyzer()
        context = CommandContext(
            command=args.command, args=args.args, previous_mode=args.previous
        )
        auto = analyzer.score(context, sensitivity_of(settings))
        hint = analyzer.suggest_mode_for_command(args.command, args.args, args.previous)

    console.print(f"Confidence: [bold]{auto.confidence:.2f}[/bold]")
    console.print(
        f"Auto switch (>= {auto.threshold:.2f}): [bold]{auto.mode or 'none'}[/bold]"
    )
    console.print(f"Suggestion: [bold]{hint or 'none'}[/bold]")


async def route_task(
    console: Console, settings: ModeSettings, args: argparse.Namespace
) -> None:
    orchestrator = ModeOrchestrator(settings)

    def _report(event: EngineEvent) -> None:
        if isinstance(event, TransitionEvent) and event.phase == TransitionPhase.AFTER:
            source = event.from_mode.slug if event.from_mode else "none"
            console.print(f"[dim]{source} -> {event.to_mode.slug}[/dim]")

    orchestrator.on_transition_event(_report)
    try:
        await orchestrator.start_task(args.task, args.files)
        if args.complete:
            await orchestrator.complete_current_task()
        if args.then_files:
            await orchestrator.update_files(args.then_files)

        mode = orchestrator.current_mode
        context = orchestrator.context
        console.print(f"Mode: [bold]{mode.slug if mode else 'none'}[/bold]")
        console.print(f"Model: [bold]{orchestrator.active_model or 'none'}[/bold]")
        if context is not None and context.handoff_queue:
            console.print(f"Handoffs: {', '.join(context.handoff_queue)}")
    finally:
        orchestrator.dispose()


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    args = parse_arguments(argv)
    con = console or Console()

    try:
        settings = load_settings(args.config)
    except (ValidationError, tomllib.TOMLDecodeError) as e:
        ModeErrorHandler.display_error(e, context="Configuration", console=con)
        return 1

    configure_logging(settings.log_level, args.verbose)

    try:
        if args.action == "modes":
            show_modes(con, ModeRegistry())
        elif args.action == "suggest":
            show_suggestion(con, settings, args)
        elif args.action == "route":
            asyncio.run(route_task(con, settings, args))
    except ModeflowError as e:
        ModeErrorHandler.display_error(e, context=args.action.title(), console=con)
        return 1

    return 0
