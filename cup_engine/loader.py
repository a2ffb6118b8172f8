"""Loading match scripts from YAML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from cup_core.errors import ScriptLoadError, ScriptValidationError
from cup_core.logging import get_logger, log_operation
from cup_core.match import MatchScript

from .validator import ValidationResult, validate_script

logger = get_logger("loader")


def read_script_document(path: str | Path) -> Any:
    """Read and parse a YAML script without validating it.

    Raises:
        ScriptLoadError: File missing, unreadable or not valid YAML
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ScriptLoadError(f"Cannot read match script {path}: {e}", path=str(path)) from e

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ScriptLoadError(f"Invalid YAML in {path}: {e}", path=str(path)) from e


def check_script_file(path: str | Path) -> ValidationResult:
    """Read a script file and return its validation result."""
    return validate_script(read_script_document(path))


def load_match_script(path: str | Path) -> MatchScript:
    """Load and validate a match script.

    Warnings are logged; errors raise.

    Returns:
        The typed MatchScript

    Raises:
        ScriptLoadError: The file could not be read or parsed
        ScriptValidationError: The script failed validation
    """
    result = check_script_file(path)

    for warning in result.warnings:
        logger.warning(warning)

    if not result.valid:
        for error in result.errors:
            logger.error(error)
        raise ScriptValidationError(result, path=str(path))

    script = result.script
    log_operation(
        logger,
        "Loaded match script",
        {"id": script.match.id, "events": len(script.events), "path": path},
    )
    return script
