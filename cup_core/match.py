"""Match script models: participants, teams, officials and metadata.

A match script is the only authored artifact. Everything the engine holds at
runtime is derived from it.

Schema-level checks live here (required fields, primitive types, ranges, the
team-code length). Cross-entity rules such as name uniqueness and the 4-player
formation belong to ``cup_engine.validator``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from .events import MatchEvent


# ============================================================================
# Participants
# ============================================================================


class PositionRole(str, Enum):
    """Player roles in the 5-a-side inquiry."""
    TENDER = "tender"
    DEFENDER = "defender"
    MIDFIELDER = "midfielder"
    FORWARD = "forward"


class Player(BaseModel):
    """A player: unique name, tactical role and assigned TTS voice."""
    name: str = Field(description="Unique across the whole match")
    role: PositionRole
    voice: str = Field(description="Azure TTS voice name")

    model_config = ConfigDict(frozen=True)


class Official(BaseModel):
    name: str
    voice: str = Field(description="Azure TTS voice name")

    model_config = ConfigDict(frozen=True)


class Officials(BaseModel):
    """Referee plus the two commentators."""
    referee: Official
    pbp: Official
    color: Official

    model_config = ConfigDict(frozen=True)


# ============================================================================
# Team
# ============================================================================


class Team(BaseModel):
    """One side: a tender and its field players.

    ``field`` carries no length constraint here; a roster that is not exactly
    four players is reported by the validator as a ``[formation]`` error.
    """
    code: str = Field(min_length=3, max_length=3, description="3-letter team code")
    name: str
    tender: Player
    field: list[Player]

    model_config = ConfigDict(frozen=True)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.upper()

    @property
    def players(self) -> list[Player]:
        return [self.tender, *self.field]


# ============================================================================
# Match Metadata
# ============================================================================


class MatchMeta(BaseModel):
    id: str = Field(pattern=r"^S\d+M\d+$", description="Format: S1M001")
    season: StrictInt = Field(gt=0)
    title: str
    home: Team
    away: Team
    officials: Officials

    model_config = ConfigDict(frozen=True)


# ============================================================================
# Match Script (full document)
# ============================================================================


class MatchScript(BaseModel):
    """Metadata plus the ordered event sequence."""
    match: MatchMeta
    events: list[MatchEvent]

    def to_document(self) -> dict:
        """Dump back to the authored document shape (``from`` keys restored)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
