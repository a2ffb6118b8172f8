"""Event application for the Inquiry Cup engine.

The EventApplier mutates MatchState based on script events. During a replay
this is the only place state changes.

Unknown names are absorbed as no-ops: the script was validated before the
run, and a partially broken script should degrade during playback rather
than stop the broadcast.
"""

from __future__ import annotations

from typing import Callable, Optional

from cup_core.events import (
    CardEvent,
    DeadBallEvent,
    EventKind,
    ExitEvent,
    FulltimeEvent,
    GoalEvent,
    HalftimeEvent,
    HoldEvent,
    InterceptEvent,
    MoveEvent,
    PassEvent,
    ScriptEvent,
    WhistleEvent,
    WhistleReason,
)
from cup_core.logging import get_logger
from cup_core.state import CENTER, MatchPeriod, MatchState, TeamSide

logger = get_logger("applier")


class EventApplier:
    """Applies script events to a MatchState.

    Kinds without an entry in the handler table (speak, announce, comment,
    penalty, pause) leave state untouched.
    """

    def __init__(self, state: MatchState):
        """Initialize event applier.

        Args:
            state: The engine's runtime state, mutated in place
        """
        self.state = state
        self._handlers: dict[EventKind, Callable] = {
            EventKind.WHISTLE: self._apply_whistle,
            EventKind.HALFTIME: self._apply_halftime,
            EventKind.FULLTIME: self._apply_fulltime,
            EventKind.PASS: self._apply_pass,
            EventKind.INTERCEPT: self._apply_take,
            EventKind.HOLD: self._apply_take,
            EventKind.MOVE: self._apply_move,
            EventKind.EXIT: self._apply_exit,
            EventKind.CARD: self._apply_card,
            EventKind.GOAL: self._apply_goal,
            EventKind.DEAD_BALL: self._apply_dead_ball,
        }

    def apply_event(self, event: ScriptEvent) -> None:
        handler = self._handlers.get(event.kind)
        if handler is not None:
            handler(event)

    # ========== Possession ==========

    def give_ball(self, name: Optional[str]) -> None:
        """Transfer possession to ``name``; unknown names leave the ball alone."""
        receiver = self.state.player(name)
        if receiver is None:
            logger.debug(f"Ignoring possession change to unknown player {name!r}")
            return

        previous = self.state.holder()
        if previous is not None:
            previous.has_ball = False

        receiver.has_ball = True
        ball = self.state.ball
        ball.holder = receiver.name
        ball.position = receiver.position
        ball.dead = False

    def clear_possession(self, recenter: bool = False) -> None:
        """Kill the ball and take it off whoever holds it."""
        previous = self.state.holder()
        if previous is not None:
            previous.has_ball = False

        ball = self.state.ball
        ball.holder = None
        ball.dead = True
        if recenter:
            ball.position = CENTER

    # ========== Match flow ==========

    def _apply_whistle(self, event: WhistleEvent) -> None:
        reason = event.reason
        if reason == WhistleReason.KICKOFF:
            # Home tender starts with the ball
            self.give_ball(self.state.meta.home.tender.name)
        elif reason == WhistleReason.HALFTIME:
            self.clear_possession(recenter=True)
            self.state.clock.period = MatchPeriod.HALFTIME
        elif reason == WhistleReason.FULLTIME:
            self.clear_possession(recenter=True)
            self.state.clock.period = MatchPeriod.FULLTIME
        elif reason == WhistleReason.STOPPAGE:
            self.state.ball.dead = True
        elif reason == WhistleReason.RESTART:
            self.state.ball.dead = False

    def _apply_halftime(self, event: HalftimeEvent) -> None:
        self.state.clock.period = MatchPeriod.HALFTIME
        self.clear_possession(recenter=True)

    def _apply_fulltime(self, event: FulltimeEvent) -> None:
        self.state.clock.period = MatchPeriod.FULLTIME
        self.clear_possession()

    def _apply_dead_ball(self, event: DeadBallEvent) -> None:
        self.clear_possession(recenter=True)

    # ========== Ball movement ==========

    def _apply_pass(self, event: PassEvent) -> None:
        if event.to:
            self.give_ball(event.to)

    def _apply_take(self, event: InterceptEvent | HoldEvent) -> None:
        if event.actor:
            self.give_ball(event.actor)

    # ========== Players ==========

    def _apply_move(self, event: MoveEvent) -> None:
        ps = self.state.player(event.actor)
        if ps is None or event.position is None:
            return
        ps.position = event.position

    def _apply_exit(self, event: ExitEvent) -> None:
        ps = self.state.player(event.actor)
        if ps is None:
            return
        ps.on_pitch = False
        if ps.has_ball:
            self.clear_possession()

    def _apply_card(self, event: CardEvent) -> None:
        # A red card does not remove the player; scripts author an exit for that
        ps = self.state.player(event.actor)
        if ps is None or event.card is None:
            return
        ps.cards.append(event.card)

    def _apply_goal(self, event: GoalEvent) -> None:
        scorer = self.state.player(event.actor)
        if scorer is not None:
            if scorer.team == TeamSide.HOME:
                self.state.score.home += 1
            else:
                self.state.score.away += 1
        else:
            logger.debug(f"Goal by unknown scorer {event.actor!r}; score unchanged")
        self.clear_possession(recenter=True)
