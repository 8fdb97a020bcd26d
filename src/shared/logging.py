"""Logging setup: plain text, structured JSON, and TeamCity service messages."""
from __future__ import annotations

import contextvars
import json
import logging
import uuid
from typing import Any

from src.shared.constants import LOG_FORMATS, LOGGER_NAMESPACE
from src.shared.utils import now_iso

# Context variable for the current verification run
run_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "run_id", default=""
)

_TEXT_FORMAT = "%(levelname)s %(message)s"

# Order matters: "|" must be escaped first
_TEAMCITY_ESCAPES: list[tuple[str, str]] = [
    ("|", "||"),
    ("'", "|'"),
    ("\r", "|r"),
    ("\n", "|n"),
    ("[", "|["),
    ("]", "|]"),
]


class JSONFormatter(logging.Formatter):
    """Custom JSON log formatter."""

    def __init__(self, service_name: str = "unknown") -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": now_iso(),
            "level": record.levelname,
            "service_name": self.service_name,
            "run_id": run_id_var.get(""),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


def teamcity_escape(value: str) -> str:
    """Escape *value* for use inside a TeamCity service message attribute."""
    for raw, escaped in _TEAMCITY_ESCAPES:
        value = value.replace(raw, escaped)
    return value


class TeamCityFormatter(logging.Formatter):
    """Wraps warnings and errors in ``##teamcity[message ...]`` lines.

    Lower-severity records are passed through as plain text so build logs
    stay readable.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno >= logging.ERROR:
            status = "ERROR"
        elif record.levelno >= logging.WARNING:
            status = "WARNING"
        else:
            return message
        return (
            f"##teamcity[message text='{teamcity_escape(message)}' "
            f"status='{status}']"
        )


def new_run_id() -> str:
    """Start a new run: generate a run id and bind it to the current context."""
    run_id = str(uuid.uuid4())
    run_id_var.set(run_id)
    return run_id


def setup_logging(
    service_name: str,
    level: str = "INFO",
    log_format: str = "text",
    teamcity: bool = False,
) -> logging.Logger:
    """Configure logging for the coherence tooling.

    Args:
        service_name: Name of the service for structured log entries.
        level: Log level string (e.g. "INFO", "DEBUG").
        log_format: ``"text"`` or ``"json"``.  Ignored when *teamcity* is set.
        teamcity: Emit TeamCity service messages for warnings and errors.

    Returns:
        The configured package logger.
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(
            f"Unknown log format {log_format!r}; expected one of {LOG_FORMATS}"
        )

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if teamcity:
        handler.setFormatter(TeamCityFormatter())
    elif log_format == "json":
        handler.setFormatter(JSONFormatter(service_name=service_name))
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    logger.addHandler(handler)

    return logger
