"""Inquiry Cup Core - script schema and runtime state.

This package provides the data foundation for Inquiry Cup matches:

Match (Authored Script):
- Player, Official, Officials, Team, MatchMeta, MatchScript
- PositionRole

Events (Tagged Union):
- WhistleEvent, DeadBallEvent, SpeakEvent, AnnounceEvent, CommentEvent
- PassEvent, InterceptEvent, HoldEvent, MoveEvent, ExitEvent
- CardEvent, PenaltyEvent, GoalEvent, PauseEvent, HalftimeEvent, FulltimeEvent
- EventKind, WhistleReason, CardColor, PitchPosition

State (Runtime, engine-owned):
- MatchState, PlayerState, BallState, Score, ClockState
- MatchPeriod, TeamSide, default_positions

ARCHITECTURAL PRINCIPLES:
1. The script is the only authored artifact; state is derived
2. Names are one namespace across players and officials
3. Only the engine writes MatchState; dispatchers read it
"""

# ============================================================================
# Events
# ============================================================================

from .events import (
    EVENT_TYPES,
    SPEECH_KINDS,
    AnnounceEvent,
    CardColor,
    CardEvent,
    CommentEvent,
    DeadBallEvent,
    EventKind,
    ExitEvent,
    FulltimeEvent,
    GoalEvent,
    HalftimeEvent,
    HoldEvent,
    InterceptEvent,
    MatchEvent,
    MoveEvent,
    PassEvent,
    PauseEvent,
    PenaltyEvent,
    PitchPosition,
    ScriptEvent,
    SpeakEvent,
    WhistleEvent,
    WhistleReason,
    get_event_class,
    is_speech,
)

# ============================================================================
# Match Script
# ============================================================================

from .match import (
    MatchMeta,
    MatchScript,
    Official,
    Officials,
    Player,
    PositionRole,
    Team,
)

# ============================================================================
# Runtime State
# ============================================================================

from .state import (
    CENTER,
    BallState,
    ClockState,
    MatchPeriod,
    MatchState,
    PlayerState,
    Score,
    TeamSide,
    default_positions,
)

from .errors import (
    ConfigurationError,
    CupError,
    ScriptLoadError,
    ScriptValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Events
    "EVENT_TYPES",
    "SPEECH_KINDS",
    "AnnounceEvent",
    "CardColor",
    "CardEvent",
    "CommentEvent",
    "DeadBallEvent",
    "EventKind",
    "ExitEvent",
    "FulltimeEvent",
    "GoalEvent",
    "HalftimeEvent",
    "HoldEvent",
    "InterceptEvent",
    "MatchEvent",
    "MoveEvent",
    "PassEvent",
    "PauseEvent",
    "PenaltyEvent",
    "PitchPosition",
    "ScriptEvent",
    "SpeakEvent",
    "WhistleEvent",
    "WhistleReason",
    "get_event_class",
    "is_speech",
    # Match
    "MatchMeta",
    "MatchScript",
    "Official",
    "Officials",
    "Player",
    "PositionRole",
    "Team",
    # State
    "CENTER",
    "BallState",
    "ClockState",
    "MatchPeriod",
    "MatchState",
    "PlayerState",
    "Score",
    "TeamSide",
    "default_positions",
    # Errors
    "ConfigurationError",
    "CupError",
    "ScriptLoadError",
    "ScriptValidationError",
]
