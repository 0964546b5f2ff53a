"""
Logging setup for aicli.

Console output goes through rich; when a log file is configured, records are
also appended to it as JSON lines.
"""

import json
import logging
import time
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LEVELS = {
    "debug": logging.DEBUG,
    "verbose": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

ROOT_LOGGER = "aicli"


class JsonFormatter(logging.Formatter):
    """Custom formatter that outputs logs as structured JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": int(time.time() * 1000),  # Unix timestamp in milliseconds
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "funcName": record.funcName,
            "lineno": record.lineno,
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def resolve_level(name: Optional[str]) -> int:
    """Map a configured level name to a logging level; unknown names mean INFO."""
    if not name:
        return logging.INFO
    return LEVELS.get(str(name).strip().lower(), logging.INFO)


def configure_logging(
    level: Optional[str] = "info",
    log_file: Optional[str] = None,
    console: Optional[Console] = None,
) -> logging.Logger:
    """Configure the ``aicli`` logger.

    Replaces any handlers installed by an earlier call, so running this once
    per command is safe.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except (OSError, TypeError) as e:
            logger.warning(f"Cannot open log file {log_file}: {e}")
        else:
            file_handler.setFormatter(JsonFormatter())
            logger.addHandler(file_handler)

    logger.setLevel(resolve_level(level))
    logger.propagate = False
    return logger
