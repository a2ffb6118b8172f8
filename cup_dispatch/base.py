"""
Base class for Inquiry Cup dispatchers.

A dispatcher receives engine lifecycle notifications and delivers them to an
output channel (terminal, Matrix room, ...). The state it receives is the
engine's live instance and must not be modified.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from cup_core.events import ScriptEvent
from cup_core.state import MatchState


class Dispatcher(ABC):
    """Abstract base class for match output channels."""

    name: str = "dispatcher"

    async def start(self) -> None:
        """Open connections before the run. Default: nothing to do."""

    async def stop(self) -> None:
        """Release connections after the run. Default: nothing to do."""

    @abstractmethod
    async def on_match_start(self, state: MatchState) -> None:
        """Called once, before any event, with the initialized state."""
        ...

    @abstractmethod
    async def on_event(self, event: ScriptEvent, state: MatchState) -> None:
        """Called once per event after its mutation has been applied."""
        ...

    @abstractmethod
    async def on_match_end(self, state: MatchState) -> None:
        """Called once after the final event."""
        ...
