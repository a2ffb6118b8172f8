"""Inquiry Cup Engine - validation and deterministic replay of match scripts.

Components:
- validate_script: schema + semantic checks, results returned as data
- MatchEngine: replays a validated script, notifying dispatchers in order
- EventApplier: the single writer of MatchState during a replay
- clock helpers: period derivation and display formatting
- loader: YAML script files in, typed MatchScript out
"""

from .clock import advance_clock, derive_period, format_clock, initial_clock
from .config import DEFAULT_PACE_MS, EngineOptions
from .engine import MatchEngine
from .event_applier import EventApplier
from .loader import load_match_script, read_script_document
from .validator import ScriptValidator, ValidationResult, validate_script

__all__ = [
    "advance_clock",
    "derive_period",
    "format_clock",
    "initial_clock",
    "DEFAULT_PACE_MS",
    "EngineOptions",
    "MatchEngine",
    "EventApplier",
    "load_match_script",
    "read_script_document",
    "ScriptValidator",
    "ValidationResult",
    "validate_script",
]
