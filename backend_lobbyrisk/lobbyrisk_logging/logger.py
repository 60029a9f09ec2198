"""
Structured logging: timestamp, level, event_type, logger name.

structlog renders one JSON object per line (or colored console output for
local runs). Level and format come from Settings (LOG_LEVEL / LOG_FORMAT, .env
included); configure_structlog() is called again once settings are loaded, and
loggers resolve the active configuration on every use, so module-level loggers
pick up the new level.

Uses only stdlib logging and structlog; no backend_lobbyrisk imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"


def level_value(level: str | int) -> int:
    """Map a level name ('warning') or number to the stdlib logging constant."""
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).strip().upper(), logging.INFO)


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog 'event' becomes event_type; message mirrors it unless given."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def _stdout_logger_factory(*args: Any) -> structlog.PrintLogger:
    """PrintLogger on whatever sys.stdout is at resolution time."""
    return structlog.PrintLogger(sys.stdout)


def configure_structlog(level: str | int = DEFAULT_LOG_LEVEL, fmt: str = DEFAULT_LOG_FORMAT) -> None:
    """(Re)configure structlog. Safe to call repeatedly; the last call wins."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if (fmt or "").strip().lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value(level)),
        context_class=dict,
        logger_factory=_stdout_logger_factory,
        cache_logger_on_first_use=False,
    )


# Defaults until settings are loaded
if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> Any:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("cache_hit", identity="7656119...", risk_score=40.0)

    The logger name is carried as an initial value rather than bound eagerly,
    so the returned proxy follows later configure_structlog() calls.
    """
    return structlog.get_logger(name, logger_name=name)


def bind_identity(identity: str, name: str = "backend_lobbyrisk") -> Any:
    """Logger with identity bound to every call; used per pipeline task."""
    return get_logger(name).bind(identity=identity)
