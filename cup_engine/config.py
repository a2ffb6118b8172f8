"""Runtime configuration for Inquiry Cup.

Values come from the environment (a ``.env`` file is loaded early so CLI
runs pick it up). Only the variables for the selected outputs are read.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from cup_core.errors import ConfigurationError

if TYPE_CHECKING:
    from cup_dispatch.base import Dispatcher

# Load .env early so helpers work in CLI contexts
load_dotenv()

DEFAULT_PACE_MS = 4000

# Environment variable names
ENV_PACE_MS = "CUP_PACE_MS"
ENV_LOG_LEVEL = "CUP_LOG_LEVEL"
ENV_LOG_DIR = "CUP_LOG_DIR"

MATRIX_ENV_MAP: dict[str, str] = {
    "homeserver_url": "MATRIX_HOMESERVER_URL",
    "access_token": "MATRIX_ACCESS_TOKEN",
    "room_id": "MATCH_ROOM_ID",
}


@dataclass
class EngineOptions:
    """Engine construction inputs besides the script.

    Attributes:
        pace_ms: Base delay between events in milliseconds; 0 disables pacing
        dispatchers: Collaborators notified in this order
    """

    pace_ms: float = 0
    dispatchers: list["Dispatcher"] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.pace_ms < 0:
            raise ValueError("pace_ms must be >= 0")


def get_default_pace_ms() -> int:
    """Return the default pacing interval from env, falling back to 4000ms."""
    raw = os.getenv(ENV_PACE_MS)
    if not raw:
        return DEFAULT_PACE_MS
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{ENV_PACE_MS} must be an integer, got {raw!r}")
    if value < 0:
        raise ConfigurationError(f"{ENV_PACE_MS} must be >= 0, got {value}")
    return value


def get_log_level() -> str:
    level = (os.getenv(ENV_LOG_LEVEL) or "INFO").strip().upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        raise ConfigurationError(f"{ENV_LOG_LEVEL} must be DEBUG, INFO, WARNING or ERROR, got {level!r}")
    return level


def get_log_dir() -> str | None:
    return os.getenv(ENV_LOG_DIR) or None


def read_matrix_env() -> dict[str, str]:
    """Collect the Matrix settings, failing with every missing variable named."""
    values = {key: os.getenv(var, "") for key, var in MATRIX_ENV_MAP.items()}
    missing = [MATRIX_ENV_MAP[key] for key, value in values.items() if not value]
    if missing:
        raise ConfigurationError(f"Matrix requires {', '.join(missing)}")
    return values
