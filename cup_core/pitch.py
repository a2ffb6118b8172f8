"""Pitch coordinate helpers.

The pitch is a conceptual space:
  - Origin (0, 0) at the center circle
  - X axis: -50 (home goal) to +50 (away goal)
  - Y axis: -35 (near sideline) to +35 (far sideline)

Home attacks right (+x), away attacks left (-x). The pitch is roughly 20%
larger than a standard one to leave room between players.
"""

from __future__ import annotations

import math

from .events import PitchPosition
from .state import TeamSide


# ============================================================================
# Named Zones
# ============================================================================


ZONES: dict[str, PitchPosition] = {
    # Center
    "CENTER": PitchPosition(x=0, y=0),
    "CENTER_LEFT": PitchPosition(x=0, y=-10),
    "CENTER_RIGHT": PitchPosition(x=0, y=10),

    # Home defensive third (x < -17)
    "HOME_GOAL": PitchPosition(x=-48, y=0),
    "HOME_BOX": PitchPosition(x=-42, y=0),
    "HOME_DEF_LEFT": PitchPosition(x=-30, y=-15),
    "HOME_DEF_RIGHT": PitchPosition(x=-30, y=15),
    "HOME_DEF_CENTER": PitchPosition(x=-30, y=0),

    # Home midfield (-17 to 0)
    "HOME_MID_LEFT": PitchPosition(x=-12, y=-15),
    "HOME_MID_RIGHT": PitchPosition(x=-12, y=15),
    "HOME_MID_CENTER": PitchPosition(x=-12, y=0),

    # Away midfield (0 to 17)
    "AWAY_MID_LEFT": PitchPosition(x=12, y=-15),
    "AWAY_MID_RIGHT": PitchPosition(x=12, y=15),
    "AWAY_MID_CENTER": PitchPosition(x=12, y=0),

    # Away defensive third (x > 17)
    "AWAY_GOAL": PitchPosition(x=48, y=0),
    "AWAY_BOX": PitchPosition(x=42, y=0),
    "AWAY_DEF_LEFT": PitchPosition(x=30, y=-15),
    "AWAY_DEF_RIGHT": PitchPosition(x=30, y=15),
    "AWAY_DEF_CENTER": PitchPosition(x=30, y=0),

    # Sidelines / tunnel
    "TUNNEL_HOME": PitchPosition(x=-50, y=-35),
    "TUNNEL_AWAY": PitchPosition(x=50, y=-35),

    # Referee area (off the ball but tracked)
    "REF_POSITION": PitchPosition(x=0, y=-30),
}

GOAL_LINE_X = 48


def distance(a: PitchPosition, b: PitchPosition) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def describe_zone(pos: PitchPosition, side: TeamSide = TeamSide.HOME) -> str:
    """Name the zone a position falls in, from ``side``'s point of view.

    Away positions are mirrored across x = 0 first so "own half" always means
    the half the side defends.
    """
    x = pos.x if side == TeamSide.HOME else -pos.x
    if x < -35:
        return "deep in own half"
    if x < -17:
        return "own defensive third"
    if x < 0:
        return "own midfield"
    if x == 0 and abs(pos.y) < 5:
        return "center circle"
    if x < 17:
        return "opponent's midfield"
    if x < 35:
        return "attacking third"
    return "deep in opponent's half"


def is_near_goal(pos: PitchPosition, side: TeamSide) -> bool:
    """Whether a position is close to the side's own goal (tender constraint)."""
    goal_x = -GOAL_LINE_X if side == TeamSide.HOME else GOAL_LINE_X
    return abs(pos.x - goal_x) < 10 and abs(pos.y) < 15
