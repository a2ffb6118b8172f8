"""Matrix dispatcher - posts match events as messages to a Matrix room.

Readable markdown/HTML for Element and other clients; SSML metadata rides in
a custom content namespace for voice-enabled frontends. Talks to the
Client-Server API (v3) directly over httpx.
"""

from __future__ import annotations

import html
import json
import uuid
from typing import Any, Optional
from urllib.parse import quote

import httpx
import markdown
from pydantic import BaseModel, Field

from cup_core.errors import CupError
from cup_core.events import (
    AnnounceEvent,
    CardColor,
    CardEvent,
    CommentEvent,
    EventKind,
    PassEvent,
    ScriptEvent,
    SpeakEvent,
    is_speech,
)
from cup_core.logging import get_logger
from cup_core.state import MatchState
from cup_engine.clock import format_clock
from cup_engine.config import read_matrix_env

from .base import Dispatcher
from .ssml import generate_announcer_ssml, generate_ssml

logger = get_logger("matrix")

CONTENT_NAMESPACE = "institute.inquiry.cup"
API_PREFIX = "/_matrix/client/v3"

# Kinds that would only spam the room
SILENT_KINDS = frozenset({
    EventKind.MOVE,
    EventKind.PAUSE,
    EventKind.DEAD_BALL,
    EventKind.HOLD,
    EventKind.EXIT,
    EventKind.PENALTY,
})


class MatrixError(CupError):
    """Matrix homeserver request failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MatrixConfig(BaseModel):
    homeserver_url: str = Field(min_length=1)
    access_token: str = Field(min_length=1)
    room_id: str = Field(min_length=1)

    @classmethod
    def from_env(cls) -> "MatrixConfig":
        """Build from MATRIX_HOMESERVER_URL, MATRIX_ACCESS_TOKEN and MATCH_ROOM_ID."""
        return cls(**read_matrix_env())


class MatrixDispatcher(Dispatcher):
    """Posts one room message per notable match event."""

    name = "matrix"

    def __init__(
        self,
        config: MatrixConfig,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.access_token}",
            "Content-Type": "application/json",
        }

    @property
    def room_path(self) -> str:
        return quote(self.config.room_id, safe="")

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.homeserver_url.rstrip("/"),
                headers=self.headers,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def start(self) -> None:
        """Join the match room (a no-op on the server if already joined)."""
        client = self._get_client()
        response = await client.post(f"{API_PREFIX}/join/{self.room_path}", json={})
        if response.status_code >= 400:
            self._handle_error(response)
        logger.info(f"Joined Matrix room {self.config.room_id}")

    async def stop(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    # ========== Lifecycle ==========

    async def on_match_start(self, state: MatchState) -> None:
        meta = state.meta
        officials = meta.officials
        body = "\n".join([
            f"🏆 **INQUIRY CUP** - Season {meta.season}",
            f"**{meta.title}**",
            "",
            f"**{meta.home.name}** ({meta.home.code}) vs **{meta.away.name}** ({meta.away.code})",
            "",
            f"Referee: {officials.referee.name}",
            f"Commentary: {officials.pbp.name} & {officials.color.name}",
        ])
        await self.send_message(body, "match_start")

    async def on_event(self, event: ScriptEvent, state: MatchState) -> None:
        if event.kind in SILENT_KINDS:
            return

        body = self.format_event(event, state)
        if body is None:
            return

        ssml = None
        if is_speech(event) and event.text:
            ssml = self.build_ssml(event, state)

        await self.send_message(body, event.kind.value, ssml)

    async def on_match_end(self, state: MatchState) -> None:
        meta, score = state.meta, state.score
        body = "\n".join([
            "🏆 **FINAL**",
            f"**{meta.home.name} {score.home} - {score.away} {meta.away.name}**",
        ])
        await self.send_message(body, "match_end")

    # ========== Formatting ==========

    def format_event(self, event: ScriptEvent, state: MatchState) -> Optional[str]:
        """Markdown body for an event, or None when it has nothing to say."""
        clock = format_clock(state.clock)
        kind = event.kind

        if kind == EventKind.WHISTLE:
            return f"🔔 **[{clock}]** Whistle - {event.reason_label or 'play'}"
        if isinstance(event, SpeakEvent):
            return f"**[{clock}] {event.actor}:** {event.text}"
        if isinstance(event, AnnounceEvent):
            return f"📢 *[{clock}] {event.text}*"
        if isinstance(event, CommentEvent):
            return f"💬 *{event.text}*"
        if isinstance(event, PassEvent):
            return f"⚽ [{clock}] {event.from_} → {event.to}"
        if kind == EventKind.INTERCEPT:
            return f"✋ **[{clock}] {event.actor} intercepts!**"
        if kind == EventKind.GOAL:
            return f"⚽ **GOAL! [{clock}] {event.actor}!**\n**{state.scoreline()}**"
        if isinstance(event, CardEvent):
            suffix = f": {event.reason}" if event.reason else ""
            if event.card == CardColor.RED:
                return f"🟥 **[{clock}] Red card** - {event.actor}{suffix}"
            return f"🟨 **[{clock}] Yellow card** - {event.actor}{suffix}"
        if kind == EventKind.HALFTIME:
            return f"⏸️ **HALFTIME** - {state.scoreline()}"
        if kind == EventKind.FULLTIME:
            return f"🏁 **FULL TIME** - {state.scoreline()}"
        return None

    def build_ssml(self, event: ScriptEvent, state: MatchState) -> Optional[str]:
        """SSML for a speech event, or None when no voice resolves."""
        officials = state.meta.officials
        actor = event.actor
        # Announcements and commentary default to the booth when unattributed
        if actor is None and isinstance(event, AnnounceEvent):
            actor = "pbp"
        elif actor is None and isinstance(event, CommentEvent):
            actor = "color"

        voice = self.resolve_voice(actor, state)
        if voice is None:
            logger.debug(f"No voice for {actor!r}; posting without SSML")
            return None

        if actor in ("pbp", officials.pbp.name):
            return generate_announcer_ssml(event.text, voice, "pbp")
        if actor in ("color", officials.color.name):
            return generate_announcer_ssml(event.text, voice, "color")
        return generate_ssml(event.text, voice, event.tone)

    @staticmethod
    def resolve_voice(actor: Optional[str], state: MatchState) -> Optional[str]:
        """Voice for a player name, an official's name or a booth role alias."""
        if not actor:
            return None

        ps = state.player(actor)
        if ps is not None:
            return ps.player.voice

        officials = state.meta.officials
        for alias in ("referee", "pbp", "color"):
            official = getattr(officials, alias)
            if actor in (alias, official.name):
                return official.voice
        return None

    # ========== Transport ==========

    async def send_message(self, body: str, event_type: str, ssml: Optional[str] = None) -> dict:
        """PUT one m.room.message into the match room."""
        meta: dict[str, Any] = {"event_type": event_type}
        if ssml:
            meta["ssml"] = ssml

        content = {
            "msgtype": "m.text",
            "body": body,
            "format": "org.matrix.custom.html",
            # Script text is plain; only the markdown we add may become HTML
            "formatted_body": markdown.markdown(html.escape(body, quote=False), extensions=["nl2br"]),
            CONTENT_NAMESPACE: meta,
        }

        txn_id = uuid.uuid4().hex
        client = self._get_client()
        response = await client.put(
            f"{API_PREFIX}/rooms/{self.room_path}/send/m.room.message/{txn_id}",
            json=content,
        )
        if response.status_code >= 400:
            self._handle_error(response)

        logger.debug(f"Posted {event_type} to {self.config.room_id}")
        return response.json()

    def _handle_error(self, response: httpx.Response) -> None:
        """Raise MatrixError with the homeserver's errcode and message."""
        try:
            error_data = response.json()
            error_message = f"{error_data.get('errcode', 'M_UNKNOWN')}: {error_data.get('error', error_data)}"
        except (json.JSONDecodeError, AttributeError):
            error_message = response.text or f"HTTP {response.status_code}"

        if response.status_code in (401, 403):
            raise MatrixError(f"Matrix authorization failed: {error_message}", status_code=response.status_code)
        raise MatrixError(f"Matrix API error: {error_message}", status_code=response.status_code)
