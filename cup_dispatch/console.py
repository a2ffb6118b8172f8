"""Console dispatcher - renders the match to the terminal with rich.

Primary development / preview output.
"""

from __future__ import annotations

import textwrap
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from cup_core.events import (
    AnnounceEvent,
    CardColor,
    CardEvent,
    CommentEvent,
    EventKind,
    MoveEvent,
    PassEvent,
    ScriptEvent,
    SpeakEvent,
)
from cup_core.match import Team
from cup_core.pitch import describe_zone
from cup_core.state import MatchState, TeamSide
from cup_engine.clock import format_clock

from .base import Dispatcher

HOME_STYLE = "cyan"
AWAY_STYLE = "magenta"
WRAP_WIDTH = 70
INDENT = " " * 11


class ConsoleDispatcher(Dispatcher):
    """Writes a live match report to a rich Console."""

    name = "console"

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(highlight=False)

    async def on_match_start(self, state: MatchState) -> None:
        meta = state.meta

        header = Text()
        header.append("INQUIRY CUP", style="bold white")
        header.append(f"  Season {meta.season}\n", style="yellow")
        header.append(meta.title, style="bold white")
        self.console.print()
        self.console.print(Panel(header, border_style="white"))

        matchup = Text("  ")
        matchup.append(meta.home.name, style=f"bold {HOME_STYLE}")
        matchup.append("  vs  ", style="dim")
        matchup.append(meta.away.name, style=f"bold {AWAY_STYLE}")
        self.console.print(matchup)
        self.console.print()

        self._print_roster("HOME", meta.home, HOME_STYLE)
        self._print_roster("AWAY", meta.away, AWAY_STYLE)

        officials = meta.officials
        self.console.print(f"  Referee: {officials.referee.name}", style="dim", markup=False)
        self.console.print(f"  PbP:     {officials.pbp.name}", style="dim", markup=False)
        self.console.print(f"  Color:   {officials.color.name}", style="dim", markup=False)
        self.console.print()

    async def on_event(self, event: ScriptEvent, state: MatchState) -> None:
        clock = Text(f"[{format_clock(state.clock):>6}]  ", style="dim")
        kind = event.kind

        if kind == EventKind.WHISTLE:
            self._line(clock, ("WHISTLE ", "bold yellow"), (event.reason_label or "", "dim"))

        elif isinstance(event, SpeakEvent):
            self.console.print()
            self._line(clock, (f"{event.actor or '???'}:", f"bold {self._team_style(event.actor, state)}"))
            for line in textwrap.wrap(event.text or "", WRAP_WIDTH):
                self.console.print(f"{INDENT}{line}", style="white", markup=False)
            if event.direction:
                self.console.print(f"{INDENT}[{event.direction}]", style="dim italic", markup=False)

        elif isinstance(event, AnnounceEvent):
            self.console.print()
            self._line(clock, (event.text or "", "green"))

        elif isinstance(event, CommentEvent):
            self._line(clock, (event.text or "", "dim italic"))

        elif isinstance(event, PassEvent):
            self._line(clock, (f"{event.from_ or '?'} -> {event.to or '?'}", "white"))

        elif kind == EventKind.INTERCEPT:
            self._line(clock, (f"{event.actor or '?'} intercepts!", "bold red"))

        elif kind == EventKind.HOLD:
            self._line(clock, (f"{event.actor or '?'} holds", "white"))

        elif isinstance(event, MoveEvent):
            self._render_move(clock, event, state)

        elif isinstance(event, CardEvent):
            if event.card == CardColor.RED:
                label, style = "RED CARD", "bold red"
            else:
                label, style = "YELLOW CARD", "bold yellow"
            self._line(clock, (f"{label} ", style), (f"{event.actor or '?'} - {event.reason or ''}", "white"))

        elif kind == EventKind.GOAL:
            self.console.print()
            self._line(clock, ("GOOOAL! ", "bold white"), (f"{event.actor or '?'}!", "bold"))
            self.console.print(f"{INDENT}{state.scoreline()}", style="bold", markup=False)
            self.console.print()

        elif kind == EventKind.PENALTY:
            self._line(clock, ("PENALTY ", "bold red"), (f"- {getattr(event, 'reason', None) or ''}", "white"))

        elif kind == EventKind.PAUSE:
            self._line(clock, ("...", "dim"))

        elif kind == EventKind.HALFTIME:
            self._score_banner("HALFTIME", state)

        elif kind == EventKind.FULLTIME:
            self._score_banner("FULL TIME", state)

        elif kind == EventKind.DEAD_BALL:
            self._line(clock, ("Dead ball", "dim"))

        elif kind == EventKind.EXIT:
            self._line(clock, (f"{event.actor or '?'} leaves the pitch", "red"))

    async def on_match_end(self, state: MatchState) -> None:
        meta, score = state.meta, state.score
        final = Text("FINAL: ", style="bold white")
        final.append(f"{meta.home.name} {score.home}", style=f"bold {HOME_STYLE}")
        final.append(" - ", style="dim")
        final.append(f"{score.away} {meta.away.name}", style=f"bold {AWAY_STYLE}")
        self.console.print()
        self.console.print(Panel(final, border_style="white"))

    # ========== Helpers ==========

    def _line(self, clock: Text, *parts: tuple[str, str]) -> None:
        line = clock.copy()
        for content, style in parts:
            line.append(content, style=style)
        self.console.print(line)

    def _render_move(self, clock: Text, event: MoveEvent, state: MatchState) -> None:
        ps = state.player(event.actor)
        if event.direction:
            self._line(clock, (f"-> {event.actor or '?'} {event.direction}", "dim"))
        elif ps is not None and event.position is not None:
            self._line(clock, (f"-> {ps.name} moves to {describe_zone(event.position, ps.team)}", "dim"))

    def _score_banner(self, label: str, state: MatchState) -> None:
        self.console.print()
        self.console.print(f"  --- {label} ---", style="bold white", markup=False)
        self.console.print(f"  {state.scoreline()}", style="bold", markup=False)
        self.console.print()

    def _print_roster(self, label: str, team: Team, style: str) -> None:
        self.console.print(f"  {label}: {team.name} ({team.code})", style=style, markup=False)
        self.console.print(f"    GK  {team.tender.name}", style=style, markup=False)
        for p in team.field:
            self.console.print(f"    {p.role.value[:3].upper():<3} {p.name}", style=style, markup=False)
        self.console.print()

    @staticmethod
    def _team_style(actor: Optional[str], state: MatchState) -> str:
        ps = state.player(actor)
        if ps is None:
            return "white"
        return HOME_STYLE if ps.team == TeamSide.HOME else AWAY_STYLE
