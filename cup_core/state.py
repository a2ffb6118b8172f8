"""Runtime state models for a match replay.

The engine builds one ``MatchState`` per run and is its only writer.
Dispatchers receive the live instance and must treat it as read-only.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from .events import CardColor, PitchPosition
from .match import MatchMeta, Player


class TeamSide(str, Enum):
    HOME = "home"
    AWAY = "away"


class MatchPeriod(str, Enum):
    """Mutually exclusive match phases."""
    PRE = "pre"
    FIRST_HALF = "first_half"
    HALFTIME = "halftime"
    SECOND_HALF = "second_half"
    FULLTIME = "fulltime"


CENTER = PitchPosition(x=0, y=0)


# ============================================================================
# Player / Ball / Score / Clock
# ============================================================================


class PlayerState(BaseModel):
    """Per-player runtime record."""
    player: Player
    team: TeamSide
    position: PitchPosition
    has_ball: bool = False
    on_pitch: bool = True
    cards: list[CardColor] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.player.name


class BallState(BaseModel):
    holder: Optional[str] = Field(default=None, description="Player name, None when loose or dead")
    position: PitchPosition = CENTER
    dead: bool = True


class Score(BaseModel):
    home: int = Field(default=0, ge=0)
    away: int = Field(default=0, ge=0)


class ClockState(BaseModel):
    minute: Union[int, float] = 0
    added: Union[int, float] = 0
    period: MatchPeriod = MatchPeriod.PRE


# ============================================================================
# Full Match State
# ============================================================================


class MatchState(BaseModel):
    """Authoritative world model for one replay."""
    meta: MatchMeta
    clock: ClockState = Field(default_factory=ClockState)
    score: Score = Field(default_factory=Score)
    ball: BallState = Field(default_factory=BallState)
    players: dict[str, PlayerState] = Field(default_factory=dict)
    event_index: int = 0
    total_events: int = 0

    def player(self, name: Optional[str]) -> Optional[PlayerState]:
        if name is None:
            return None
        return self.players.get(name)

    def holder(self) -> Optional[PlayerState]:
        return self.player(self.ball.holder)

    def players_for(self, side: TeamSide) -> list[PlayerState]:
        return [ps for ps in self.players.values() if ps.team == side]

    def scoreline(self) -> str:
        return f"{self.meta.home.code} {self.score.home} - {self.score.away} {self.meta.away.code}"


# ============================================================================
# Default Pitch Positions
# ============================================================================


FORMATION_SLOTS = ("defender", "midfielder_left", "midfielder_right", "forward")


def default_positions(side: TeamSide) -> dict[str, PitchPosition]:
    """Kickoff formation for one side.

    Home lines up in the negative-x half and attacks +x; away is the mirror
    image across x = 0.
    """
    sign = -1 if side == TeamSide.HOME else 1
    return {
        "tender": PitchPosition(x=sign * 46, y=0),
        "defender": PitchPosition(x=sign * 30, y=0),
        "midfielder_left": PitchPosition(x=sign * 15, y=-12),
        "midfielder_right": PitchPosition(x=sign * 15, y=12),
        "forward": PitchPosition(x=sign * 5, y=0),
    }
