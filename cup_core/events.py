"""Event models for Inquiry Cup match scripts.

Every entry in a script's ``events`` list is one of the concrete event
classes below. The ``type`` key is the discriminator: pydantic picks the
model for the kind and only that kind's fields are read.

Pitch Coordinates
=================
Origin (0, 0) is the center circle. X runs left to right, Y bottom to top.
x ∈ [-50, 50], y ∈ [-35, 35] (arbitrary units, roughly metres).
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt


# ============================================================================
# Enums
# ============================================================================


class EventKind(str, Enum):
    """Discriminator values for script events."""
    # Match flow
    WHISTLE = "whistle"
    DEAD_BALL = "dead_ball"

    # Speech acts
    SPEAK = "speak"
    ANNOUNCE = "announce"
    COMMENT = "comment"

    # Ball movement
    PASS = "pass"
    INTERCEPT = "intercept"
    HOLD = "hold"

    # Player movement
    MOVE = "move"
    EXIT = "exit"

    # Authority
    CARD = "card"
    PENALTY = "penalty"
    GOAL = "goal"

    # Timing
    PAUSE = "pause"
    HALFTIME = "halftime"
    FULLTIME = "fulltime"


class WhistleReason(str, Enum):
    """Reasons the referee blows the whistle."""
    KICKOFF = "kickoff"
    HALFTIME = "halftime"
    FULLTIME = "fulltime"
    STOPPAGE = "stoppage"
    RESTART = "restart"


class CardColor(str, Enum):
    YELLOW = "yellow"
    RED = "red"


SPEECH_KINDS = frozenset({EventKind.SPEAK, EventKind.ANNOUNCE, EventKind.COMMENT})

# Numbers are taken as authored: no coercion from strings or bools, and
# whole minutes stay ints.
Minute = Union[Annotated[StrictInt, Field(ge=0, le=90)], Annotated[StrictFloat, Field(ge=0, le=90)]]
NonNegative = Union[Annotated[StrictInt, Field(ge=0)], Annotated[StrictFloat, Field(ge=0)]]


# ============================================================================
# Pitch Position
# ============================================================================


class PitchPosition(BaseModel):
    """A point on the pitch."""
    x: StrictFloat = Field(ge=-50, le=50, description="Left/right axis, home goal at -50")
    y: StrictFloat = Field(ge=-35, le=35, description="Sideline axis")

    model_config = ConfigDict(frozen=True)


# ============================================================================
# Event Base Class
# ============================================================================


class ScriptEvent(BaseModel):
    """Fields shared by every event kind.

    Attributes:
        minute: Match minute the event is stamped with (0-90)
        added: Stoppage-time minutes on top of ``minute``
        actor: Player or official name (or a role alias) performing the event
        direction: Stage direction; metadata only, never spoken
    """

    minute: Minute = Field(description="Match minute")
    added: Optional[NonNegative] = Field(default=None, description="Stoppage time minutes")
    actor: Optional[str] = Field(default=None, description="Player/official name")
    direction: Optional[str] = Field(default=None, description="Stage direction")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def kind(self) -> EventKind:
        return EventKind(self.type)


class _SpeechEvent(ScriptEvent):
    text: Optional[str] = Field(default=None, description="Dialogue or narration")
    tone: Optional[str] = Field(default=None, description="Prosody hint: measured, sharp, quiet...")


# ============================================================================
# Concrete Event Types
# ============================================================================


class WhistleEvent(ScriptEvent):
    """Referee whistle: kickoff, halftime, fulltime, stoppage or restart."""
    type: Literal["whistle"] = "whistle"
    reason: Optional[Union[WhistleReason, str]] = None

    @property
    def reason_label(self) -> Optional[str]:
        """Reason as plain text, whether or not it is a standard one."""
        if isinstance(self.reason, WhistleReason):
            return self.reason.value
        return self.reason


class DeadBallEvent(ScriptEvent):
    """Ball snaps back to the center spot."""
    type: Literal["dead_ball"] = "dead_ball"
    reason: Optional[str] = None


class SpeakEvent(_SpeechEvent):
    """A player delivers a line of the inquiry."""
    type: Literal["speak"] = "speak"


class AnnounceEvent(_SpeechEvent):
    """Play-by-play narration."""
    type: Literal["announce"] = "announce"


class CommentEvent(_SpeechEvent):
    """Color commentary."""
    type: Literal["comment"] = "comment"


class PassEvent(ScriptEvent):
    """Ball changes hands between two named players."""
    type: Literal["pass"] = "pass"
    from_: Optional[str] = Field(default=None, alias="from", description="Pass origin")
    to: Optional[str] = Field(default=None, description="Pass destination")


class InterceptEvent(ScriptEvent):
    """Defensive take; the actor ends up with the ball."""
    type: Literal["intercept"] = "intercept"


class HoldEvent(ScriptEvent):
    """The actor holds the ball."""
    type: Literal["hold"] = "hold"


class MoveEvent(ScriptEvent):
    """The actor relocates on the pitch."""
    type: Literal["move"] = "move"
    position: Optional[PitchPosition] = None


class ExitEvent(ScriptEvent):
    """The actor leaves the pitch (red card, injury, walk-off)."""
    type: Literal["exit"] = "exit"
    reason: Optional[str] = None


class CardEvent(ScriptEvent):
    """Yellow or red card shown to the actor."""
    type: Literal["card"] = "card"
    card: Optional[CardColor] = None
    reason: Optional[str] = None


class PenaltyEvent(ScriptEvent):
    type: Literal["penalty"] = "penalty"
    reason: Optional[str] = None


class GoalEvent(ScriptEvent):
    """Goal credited to the actor's side."""
    type: Literal["goal"] = "goal"


class PauseEvent(ScriptEvent):
    """Deliberate silence / beat."""
    type: Literal["pause"] = "pause"
    pause_ms: Optional[NonNegative] = Field(default=None, description="Pause duration override")


class HalftimeEvent(ScriptEvent):
    type: Literal["halftime"] = "halftime"


class FulltimeEvent(ScriptEvent):
    type: Literal["fulltime"] = "fulltime"


MatchEvent = Annotated[
    Union[
        WhistleEvent,
        DeadBallEvent,
        SpeakEvent,
        AnnounceEvent,
        CommentEvent,
        PassEvent,
        InterceptEvent,
        HoldEvent,
        MoveEvent,
        ExitEvent,
        CardEvent,
        PenaltyEvent,
        GoalEvent,
        PauseEvent,
        HalftimeEvent,
        FulltimeEvent,
    ],
    Field(discriminator="type"),
]


# ============================================================================
# Event Registry
# ============================================================================


EVENT_TYPES: dict[str, type[ScriptEvent]] = {
    EventKind.WHISTLE.value: WhistleEvent,
    EventKind.DEAD_BALL.value: DeadBallEvent,
    EventKind.SPEAK.value: SpeakEvent,
    EventKind.ANNOUNCE.value: AnnounceEvent,
    EventKind.COMMENT.value: CommentEvent,
    EventKind.PASS.value: PassEvent,
    EventKind.INTERCEPT.value: InterceptEvent,
    EventKind.HOLD.value: HoldEvent,
    EventKind.MOVE.value: MoveEvent,
    EventKind.EXIT.value: ExitEvent,
    EventKind.CARD.value: CardEvent,
    EventKind.PENALTY.value: PenaltyEvent,
    EventKind.GOAL.value: GoalEvent,
    EventKind.PAUSE.value: PauseEvent,
    EventKind.HALFTIME.value: HalftimeEvent,
    EventKind.FULLTIME.value: FulltimeEvent,
}


def get_event_class(kind: str) -> type[ScriptEvent]:
    """Get the event model for a given kind."""
    if kind not in EVENT_TYPES:
        raise KeyError(f"Unknown event type: {kind}")
    return EVENT_TYPES[kind]


def is_speech(event: ScriptEvent) -> bool:
    return event.kind in SPEECH_KINDS
