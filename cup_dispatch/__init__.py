"""Inquiry Cup Dispatch - output channels for a match replay.

Dispatchers receive engine lifecycle notifications (match start, each
event, match end) and deliver them somewhere:

- ConsoleDispatcher: rich terminal report
- MatrixDispatcher: messages in a Matrix room, with SSML metadata
- ssml: speech markup for voice frontends
"""

from .base import Dispatcher
from .console import ConsoleDispatcher
from .matrix import MatrixConfig, MatrixDispatcher, MatrixError
from .ssml import TONE_MAP, generate_announcer_ssml, generate_ssml

__all__ = [
    "Dispatcher",
    "ConsoleDispatcher",
    "MatrixConfig",
    "MatrixDispatcher",
    "MatrixError",
    "TONE_MAP",
    "generate_ssml",
    "generate_announcer_ssml",
]
