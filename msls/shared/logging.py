"""Logging configuration for the application.

LOG_LEVEL picks the level (debug, info, warn/warning, error); LOG_FORMAT=json
emits one JSON object per record through python-json-logger, anything else
uses the plain text format. Output goes to stdout.
"""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from msls.core.config import LogSettings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(message)s"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def resolve_level(name: str) -> int:
    """Map a LOG_LEVEL value to a logging level; unknown names mean INFO."""
    return _LEVELS.get(name.strip().lower(), logging.INFO)


def build_formatter(fmt: str) -> logging.Formatter:
    """Return the JSON formatter for "json", else the text formatter."""
    if fmt.strip().lower() == "json":
        return JsonFormatter(
            JSON_FIELDS,
            rename_fields={"asctime": "time", "levelname": "level", "name": "logger"},
        )
    return logging.Formatter(TEXT_FORMAT)


def setup_logging(log_settings: LogSettings) -> None:
    """Configure application-wide logging on the root logger.

    Safe to call more than once (e.g. per test app); handlers are replaced.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(log_settings.format))
    logging.basicConfig(
        level=resolve_level(log_settings.level),
        handlers=[handler],
        force=True,
    )
