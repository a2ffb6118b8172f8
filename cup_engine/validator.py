"""Script validation for Inquiry Cup.

The validator is the gate between an untrusted document and the engine. It
never raises for malformed input: problems come back as data so the caller
decides whether to proceed, log, or abort.

Validation steps (only step 1 short-circuits):
1. Schema (pydantic) - structure, types, ranges, team-code length
2. Identity uniqueness across players and officials
3. Formation - exactly 4 field players per team
4. Non-empty event sequence
5. Minute ordering (warning)
6. Referential integrity of actor / from / to
7. Kind-specific required fields (speak/announce text, pass from/to)
8. Bookending: opening whistle, closing fulltime (warnings)

Every message starts with a bracketed category tag: ``[schema]``,
``[identity]``, ``[formation]``, ``[events]`` or ``[sequence]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError

from cup_core.events import EventKind, PassEvent, ScriptEvent
from cup_core.logging import get_logger
from cup_core.match import MatchScript, Team

logger = get_logger("validator")

FIELD_PLAYER_COUNT = 4
ROLE_ALIASES = frozenset({"referee", "pbp", "color"})
TEXT_REQUIRED_KINDS = (EventKind.SPEAK, EventKind.ANNOUNCE)


@dataclass
class ValidationResult:
    """Verdict for one script.

    ``valid`` depends only on ``errors``; warnings never block a replay.
    ``script`` holds the parsed script whenever schema validation passed.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    script: Optional[MatchScript] = None

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


def _format_loc(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def _raw_name(raw_event: dict, key: str) -> Optional[str]:
    value = raw_event.get(key)
    return None if value is None else str(value)


class ScriptValidator:
    """Checks a raw match document against the schema and semantic rules."""

    def validate(self, raw: Any) -> ValidationResult:
        """Validate a parsed (but untyped) match document.

        Args:
            raw: Whatever the loader produced (normally a dict from YAML)

        Returns:
            ValidationResult with errors and warnings collected
        """
        result = ValidationResult()

        try:
            script = MatchScript.model_validate(raw)
        except ValidationError as exc:
            for issue in exc.errors():
                result.errors.append(f"[schema] {_format_loc(issue['loc'])}: {issue['msg']}")
            logger.debug(f"Schema validation failed with {len(result.errors)} issue(s)")
            return result

        result.script = script
        known_names = self._check_identity(script, result)
        self._check_formation(script.match.home, result)
        self._check_formation(script.match.away, result)
        self._check_sequence(script.events, result)
        self._check_references(script.events, raw["events"], known_names | ROLE_ALIASES, result)
        self._check_bookends(script.events, result)

        logger.debug(
            f"Validated {script.match.id}: {len(result.errors)} error(s), "
            f"{len(result.warnings)} warning(s)"
        )
        return result

    def _check_identity(self, script: MatchScript, result: ValidationResult) -> set[str]:
        """Every participant name must be unique across the whole match."""
        match = script.match
        seen: set[str] = set()

        entries: list[tuple[str, str]] = [(match.home.tender.name, f"{match.home.code} tender")]
        entries += [(p.name, f"{match.home.code} field") for p in match.home.field]
        entries.append((match.away.tender.name, f"{match.away.code} tender"))
        entries += [(p.name, f"{match.away.code} field") for p in match.away.field]
        entries += [
            (match.officials.referee.name, "referee"),
            (match.officials.pbp.name, "pbp"),
            (match.officials.color.name, "color"),
        ]

        for name, context in entries:
            if name in seen:
                result.errors.append(f'[identity] Duplicate name "{name}" in {context}')
            seen.add(name)
        return seen

    def _check_formation(self, team: Team, result: ValidationResult) -> None:
        count = len(team.field)
        if count != FIELD_PLAYER_COUNT:
            result.errors.append(
                f"[formation] {team.code} has {count} field players, expected {FIELD_PLAYER_COUNT}"
            )

    def _check_sequence(self, events: list[ScriptEvent], result: ValidationResult) -> None:
        if not events:
            result.errors.append("[events] Match has no events")
            return

        for i in range(1, len(events)):
            current, previous = events[i].minute, events[i - 1].minute
            if current < previous:
                result.warnings.append(f"[sequence] Event {i}: minute {current} < previous {previous}")

    def _check_references(
        self,
        events: list[ScriptEvent],
        raw_events: list[Any],
        known: frozenset[str] | set[str],
        result: ValidationResult,
    ) -> None:
        """Names on every event must resolve.

        Only passes declare ``from``/``to``, but the keys are still checked on
        other kinds, read from the raw document since parsing drops them.
        """
        for i, (ev, raw_ev) in enumerate(zip(events, raw_events)):
            if ev.actor and ev.actor not in known:
                result.errors.append(f'[events] Event {i}: unknown actor "{ev.actor}"')

            if isinstance(ev, PassEvent):
                origin, target = ev.from_, ev.to
            else:
                origin, target = (_raw_name(raw_ev, key) for key in ("from", "to"))
            if origin and origin not in known:
                result.errors.append(f"[events] Event {i}: unknown 'from' \"{origin}\"")
            if target and target not in known:
                result.errors.append(f"[events] Event {i}: unknown 'to' \"{target}\"")

            if isinstance(ev, PassEvent):
                if not ev.from_:
                    result.errors.append(f"[events] Event {i}: pass missing 'from'")
                if not ev.to:
                    result.errors.append(f"[events] Event {i}: pass missing 'to'")

            if ev.kind in TEXT_REQUIRED_KINDS:
                text = getattr(ev, "text", None)
                if not text or not text.strip():
                    result.errors.append(f"[events] Event {i}: {ev.kind.value} event has no text")

    def _check_bookends(self, events: list[ScriptEvent], result: ValidationResult) -> None:
        if not events:
            return
        if events[0].kind != EventKind.WHISTLE:
            result.warnings.append("[sequence] Match does not begin with a whistle")
        if events[-1].kind != EventKind.FULLTIME:
            result.warnings.append("[sequence] Match does not end with fulltime")


_default_validator = ScriptValidator()


def validate_script(raw: Any) -> ValidationResult:
    """Validate a parsed match document with the default validator."""
    return _default_validator.validate(raw)
