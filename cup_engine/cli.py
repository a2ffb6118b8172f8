"""Inquiry Cup CLI - run, validate and inspect match scripts.

Usage:
    cup run examples/s1m001.yaml
    cup run examples/s1m001.yaml --pace 0 --matrix
    cup validate examples/s1m001.yaml
    cup info examples/s1m001.yaml
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from cup_core import __version__
from cup_core.errors import ConfigurationError, CupError, ScriptLoadError, ScriptValidationError
from cup_core.logging import get_logger, log_error, setup_logging
from cup_core.match import MatchScript, Team
from cup_core.state import MatchState
from cup_dispatch.base import Dispatcher
from cup_dispatch.console import ConsoleDispatcher
from cup_dispatch.matrix import MatrixConfig, MatrixDispatcher

from .config import EngineOptions, get_default_pace_ms, get_log_dir, get_log_level
from .engine import MatchEngine
from .loader import load_match_script, read_script_document
from .validator import validate_script

app = typer.Typer(
    name="cup",
    help="Inquiry Cup - performed inquiry staged as football",
    add_completion=False,
)

console = Console()
logger = get_logger("cli")


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else get_log_level()
    log_dir = get_log_dir()
    setup_logging(level=level, log_dir=log_dir)


def _load_or_exit(script_path: Path) -> MatchScript:
    try:
        return load_match_script(script_path)
    except ScriptLoadError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except ScriptValidationError as e:
        _print_messages(e.result.warnings, e.errors)
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _print_messages(warnings: list[str], errors: list[str]) -> None:
    if warnings:
        console.print("\n[yellow]Warnings:[/yellow]")
        for w in warnings:
            console.print(f"   {escape(w)}")
    if errors:
        console.print("\n[red]Errors:[/red]")
        for e in errors:
            console.print(f"   {escape(e)}")


def _print_roster(team: Team) -> None:
    console.print(f"\n  [bold]{escape(team.code)} Roster:[/bold]")
    console.print(f"    GK  {escape(team.tender.name)}")
    for p in team.field:
        console.print(f"    {p.role.value[:3].upper():<3} {escape(p.name)}")


def build_dispatchers(use_console: bool, use_matrix: bool) -> list[Dispatcher]:
    """Dispatchers for a run, in notification order."""
    dispatchers: list[Dispatcher] = []
    if use_console:
        dispatchers.append(ConsoleDispatcher())
    if use_matrix:
        dispatchers.append(MatrixDispatcher(MatrixConfig.from_env()))
    return dispatchers


async def _run_match(script: MatchScript, options: EngineOptions) -> MatchState:
    """Start dispatchers, replay the match, always stop what was started."""
    started: list[Dispatcher] = []
    try:
        for dispatcher in options.dispatchers:
            await dispatcher.start()
            started.append(dispatcher)
        return await MatchEngine(script, options).run()
    finally:
        for dispatcher in reversed(started):
            try:
                await dispatcher.stop()
            except Exception as e:
                log_error(logger, f"stop {dispatcher.name}", e)


@app.command("run")
def run_match(
    script: Annotated[Path, typer.Argument(help="Path to match script YAML file")],
    pace: Annotated[
        Optional[int],
        typer.Option("--pace", "-p", min=0, help="Milliseconds between events (0 disables pacing) [default: CUP_PACE_MS or 4000]"),
    ] = None,
    matrix: Annotated[bool, typer.Option("--matrix", help="Also dispatch to Matrix")] = False,
    no_console: Annotated[bool, typer.Option("--no-console", help="Disable console output")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Run a match from a YAML script."""
    try:
        _configure_logging(verbose)
        pace_ms = get_default_pace_ms() if pace is None else pace
        match_script = _load_or_exit(script)
        dispatchers = build_dispatchers(use_console=not no_console, use_matrix=matrix)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    options = EngineOptions(pace_ms=pace_ms, dispatchers=dispatchers)
    try:
        asyncio.run(_run_match(match_script, options))
    except CupError as e:
        console.print(f"[red]Match aborted:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Match interrupted.[/yellow]")
        raise typer.Exit(130)


@app.command("validate")
def validate_match(
    script: Annotated[Path, typer.Argument(help="Path to match script YAML file")],
) -> None:
    """Validate a match script without running it."""
    try:
        document = read_script_document(script)
    except ScriptLoadError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    result = validate_script(document)
    _print_messages(result.warnings, result.errors)

    if result.valid:
        console.print("\n[green]Script is valid.[/green]\n")
    else:
        console.print(f"\n[red]Script has {len(result.errors)} error(s).[/red]\n")
        raise typer.Exit(1)


@app.command("info")
def match_info(
    script: Annotated[Path, typer.Argument(help="Path to match script YAML file")],
) -> None:
    """Display match metadata and rosters."""
    match_script = _load_or_exit(script)
    match = match_script.match

    console.print(Panel(
        f"[bold]Match:[/bold]    {escape(match.id)}\n"
        f"[bold]Season:[/bold]   {match.season}\n"
        f"[bold]Title:[/bold]    {escape(match.title)}\n"
        f"[bold]Home:[/bold]     {escape(match.home.name)} ({escape(match.home.code)})\n"
        f"[bold]Away:[/bold]     {escape(match.away.name)} ({escape(match.away.code)})\n"
        f"[bold]Events:[/bold]   {len(match_script.events)}\n"
        f"[bold]Referee:[/bold]  {escape(match.officials.referee.name)}\n"
        f"[bold]PbP:[/bold]      {escape(match.officials.pbp.name)}\n"
        f"[bold]Color:[/bold]    {escape(match.officials.color.name)}",
        title="Inquiry Cup",
        border_style="cyan",
    ))

    _print_roster(match.home)
    _print_roster(match.away)
    console.print()


@app.command("version")
def show_version() -> None:
    """Print the Inquiry Cup version."""
    console.print(f"inquiry-cup {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
