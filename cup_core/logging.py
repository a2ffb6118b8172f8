"""
Logging for Inquiry Cup.

Library modules only call ``get_logger``. The command-line front end calls
``setup_logging`` once; log lines go to stderr so stdout carries nothing but
the match report, plus ``cup.log`` when a log directory is configured.
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

ROOT_LOGGER = "cup"
LOG_FILENAME = "cup.log"

_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
_RESET = "\033[0m"


class CupFormatter(logging.Formatter):
    """``[time] LEVEL [component] message``, coloured on terminals.

    Component names drop the ``cup.`` prefix, so ``cup.engine`` shows as
    ``engine``.
    """

    def __init__(self, use_colors: bool = False):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%d %H:%M:%S")
        level = f"{record.levelname:8}"
        if self.use_colors:
            level = f"{_LEVEL_COLORS.get(record.levelno, '')}{level}{_RESET}"
        component = record.name.removeprefix(f"{ROOT_LOGGER}.")

        line = f"[{timestamp}] {level} [{component:12}] {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "INFO", log_dir: str | Path | None = None) -> logging.Logger:
    """Attach stderr (and optional file) handlers to the ``cup`` logger.

    Calling it again replaces the previous handlers.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers = []
    logger.propagate = False

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(CupFormatter(use_colors=sys.stderr.isatty()))
    logger.addHandler(stderr_handler)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path / LOG_FILENAME, encoding="utf-8")
        file_handler.setFormatter(CupFormatter())
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for one component, e.g. ``get_logger("engine")`` -> ``cup.engine``."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def log_operation(logger: logging.Logger, operation: str, details: dict | None = None) -> None:
    if details:
        operation = f"{operation}: " + ", ".join(f"{k}={v}" for k, v in details.items())
    logger.info(operation)


def log_error(
    logger: logging.Logger,
    operation: str,
    error: Exception,
    context: dict | None = None,
) -> None:
    """Log a failed operation with its exception and optional context."""
    msg = f"FAILED {operation}: {type(error).__name__}: {error}"
    if context:
        msg += " | " + ", ".join(f"{k}={v}" for k, v in context.items())
    logger.error(msg, exc_info=error)
