"""Exception types shared across Inquiry Cup packages.

Validation problems are returned as data by ``validate_script``; these
exceptions exist for callers that decide to turn them into a failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cup_engine.validator import ValidationResult


class CupError(Exception):
    """Base exception for Inquiry Cup errors."""
    pass


class ScriptLoadError(CupError):
    """A script file could not be read or parsed."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ScriptValidationError(CupError):
    """A script was rejected by the validator."""

    def __init__(self, result: "ValidationResult", path: str | None = None):
        count = len(result.errors)
        super().__init__(f"Match script validation failed ({count} error{'s' if count != 1 else ''})")
        self.result = result
        self.path = path

    @property
    def errors(self) -> list[str]:
        return list(self.result.errors)


class ConfigurationError(CupError):
    """Required configuration is missing or malformed."""
    pass
