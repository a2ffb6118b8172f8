"""SSML generation for Inquiry Cup text-to-speech.

Produces Azure-compatible SSML from match dialogue, with prosody driven by
the tone hints in the match script. Markup lives in Jinja2 templates under
``templates/``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal, Optional

from jinja2 import Environment, FileSystemLoader

from cup_core.logging import get_logger

logger = get_logger("ssml")

TEMPLATES_DIR = Path(__file__).parent / "templates"

# Tone hint -> prosody attributes
TONE_MAP: dict[str, dict[str, str]] = {
    "measured": {"rate": "slow", "pitch": "low", "volume": "medium"},
    "sharp": {"rate": "fast", "pitch": "high", "volume": "loud"},
    "quiet": {"rate": "slow", "pitch": "low", "volume": "soft"},
    "forceful": {"rate": "medium", "pitch": "high", "volume": "loud"},
    "hesitant": {"rate": "slow", "pitch": "medium", "volume": "soft"},
    "declarative": {"rate": "medium", "pitch": "low", "volume": "loud"},
    "ironic": {"rate": "slow", "pitch": "high", "volume": "medium"},
    "warm": {"rate": "medium", "pitch": "medium", "volume": "medium"},
    "cold": {"rate": "fast", "pitch": "low", "volume": "medium"},
}

ANNOUNCER_PROSODY: dict[str, tuple[str, str]] = {
    "pbp": ("medium", "medium"),
    "color": ("slow", "low"),
}

_DIALOGUE_BREAKS = (
    (re.compile(r"\.\s+"), '.<break time="400ms"/> '),
    (re.compile(r"\?\s+"), '?<break time="500ms"/> '),
    (re.compile(r"!\s+"), '!<break time="300ms"/> '),
    (re.compile("\u2014"), '<break time="300ms"/>'),
)

_ANNOUNCER_BREAKS = (
    (re.compile(r"\.\s+"), '.<break time="300ms"/> '),
    (re.compile("\u2014"), '<break time="200ms"/>'),
)


def _insert_breaks(text, rules) -> str:
    result = str(text)
    for pattern, replacement in rules:
        result = pattern.sub(replacement, result)
    return result


def _build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        trim_blocks=True,
        lstrip_blocks=True,
        autoescape=False,
    )
    env.filters["dialogue_breaks"] = lambda text: _insert_breaks(text, _DIALOGUE_BREAKS)
    env.filters["announcer_breaks"] = lambda text: _insert_breaks(text, _ANNOUNCER_BREAKS)
    return env


_env = _build_environment()


def generate_ssml(text: str, voice: str, tone: Optional[str] = None) -> str:
    """Render SSML for a line of dialogue.

    Args:
        text: Spoken line (plain text, escaped here)
        voice: TTS voice name
        tone: Optional tone hint; unknown tones render without prosody

    Returns:
        SSML document string
    """
    prosody = TONE_MAP.get(tone) if tone else None
    if tone and prosody is None:
        logger.debug(f"No prosody for tone {tone!r}")
    return _env.get_template("dialogue.ssml.j2").render(text=text, voice=voice, prosody=prosody)


def generate_announcer_ssml(text: str, voice: str, style: Literal["pbp", "color"] = "pbp") -> str:
    """Render SSML for play-by-play or color commentary.

    Announcers get a neutral delivery: play-by-play at medium rate and
    pitch, color commentary slower and lower.
    """
    rate, pitch = ANNOUNCER_PROSODY.get(style, ANNOUNCER_PROSODY["pbp"])
    return _env.get_template("announcer.ssml.j2").render(text=text, voice=voice, rate=rate, pitch=pitch)
