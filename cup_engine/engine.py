"""Inquiry Cup match engine.

The MatchEngine replays a validated script:
1. Builds the initial MatchState (formations, dead ball at center, 0-0, PRE)
2. For each event, in document order:
   a. advances the clock
   b. applies the event through the EventApplier
   c. notifies every dispatcher with the post-mutation state
   d. waits a paced delay (never after the last event)
3. Notifies dispatchers of match start and end around the loop

Dispatchers are awaited one at a time in registration order. A dispatcher
that raises aborts the rest of the replay.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from cup_core.events import EventKind, PauseEvent, ScriptEvent, is_speech
from cup_core.logging import get_logger, log_error
from cup_core.match import MatchScript, Team
from cup_core.state import (
    FORMATION_SLOTS,
    MatchState,
    PlayerState,
    TeamSide,
    default_positions,
)

from .clock import advance_clock, format_clock, initial_clock
from .config import EngineOptions
from .event_applier import EventApplier

logger = get_logger("engine")

READING_MS_PER_WORD = 200


async def _pause(ms: float) -> None:
    await asyncio.sleep(ms / 1000)


class MatchEngine:
    """Replays a match script and drives its dispatchers.

    Usage:
        engine = MatchEngine(script, EngineOptions(pace_ms=4000, dispatchers=[ConsoleDispatcher()]))
        final_state = await engine.run()
    """

    def __init__(self, script: MatchScript, options: Optional[EngineOptions] = None):
        """Initialize engine with a validated script.

        Args:
            script: Script that already passed ``validate_script``
            options: Pacing and dispatchers; defaults to no pacing, no outputs
        """
        self.script = script
        self.events = list(script.events)
        self.options = options or EngineOptions()
        self._state = self._initialize_state(script)
        self.applier = EventApplier(self._state)

    @property
    def state(self) -> MatchState:
        return self._state

    def _initialize_state(self, script: MatchScript) -> MatchState:
        meta = script.match
        players: dict[str, PlayerState] = {}
        for side, team in ((TeamSide.HOME, meta.home), (TeamSide.AWAY, meta.away)):
            players.update(self._line_up(team, side))

        return MatchState(meta=meta, players=players, total_events=len(self.events))

    @staticmethod
    def _line_up(team: Team, side: TeamSide) -> dict[str, PlayerState]:
        positions = default_positions(side)
        lineup = {team.tender.name: PlayerState(player=team.tender, team=side, position=positions["tender"])}
        for i, player in enumerate(team.field):
            slot = FORMATION_SLOTS[i % len(FORMATION_SLOTS)]
            lineup[player.name] = PlayerState(player=player, team=side, position=positions[slot])
        return lineup

    async def run(self) -> MatchState:
        """Run the full match from start to finish.

        Returns:
            The final MatchState
        """
        state = self._state
        dispatchers = self.options.dispatchers
        state.clock = initial_clock()

        logger.info(
            f"Kickoff {state.meta.id}: {state.meta.home.code} vs {state.meta.away.code}, "
            f"{len(self.events)} events, pace={self.options.pace_ms}ms, "
            f"dispatchers={[d.name for d in dispatchers]}"
        )

        for dispatcher in dispatchers:
            await self._notify(dispatcher, "on_match_start", state)

        last = len(self.events) - 1
        for i, event in enumerate(self.events):
            state.event_index = i
            state.clock = advance_clock(state.clock, event.minute, event.added)
            self.applier.apply_event(event)

            logger.debug(f"[{format_clock(state.clock):>6}] #{i} {event.kind.value}")

            for dispatcher in dispatchers:
                await self._notify(dispatcher, "on_event", event, state)

            if self.options.pace_ms > 0 and i < last:
                await _pause(self.event_delay(event))

        for dispatcher in dispatchers:
            await self._notify(dispatcher, "on_match_end", state)

        logger.info(f"Final whistle {state.meta.id}: {state.scoreline()}")
        return state

    async def _notify(self, dispatcher, hook: str, *args) -> None:
        try:
            await getattr(dispatcher, hook)(*args)
        except Exception as e:
            log_error(
                logger,
                f"dispatch {hook}",
                e,
                {"dispatcher": dispatcher.name, "event_index": self._state.event_index},
            )
            raise

    def event_delay(self, event: ScriptEvent) -> float:
        """Milliseconds to wait after ``event`` before the next one."""
        base = self.options.pace_ms
        kind = event.kind

        if isinstance(event, PauseEvent):
            return event.pause_ms if event.pause_ms is not None else base * 2

        if is_speech(event):
            # Longer lines get more reading time
            text = getattr(event, "text", None)
            if text:
                words = len(text.split())
                return max(base, words * READING_MS_PER_WORD)
            return base

        if kind == EventKind.GOAL:
            return base * 3
        if kind == EventKind.HALFTIME:
            return base * 2
        if kind == EventKind.WHISTLE:
            return base * 0.5
        return base
