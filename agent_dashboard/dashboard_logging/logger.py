"""
Dashboard log output: one structlog event per line, keyed by event_type.

Relay subscriptions, history samples and view failures all log through
get_logger(__name__) with a snake_case event name plus keyword context:
    logger.info("relay_collect_done", relay="wss://...", events=3, reason="eose")

LOG_LEVEL picks the threshold (WARN and FATAL are accepted as aliases) and
LOG_FORMAT=console switches from JSON lines to structlog's dev renderer.
The same LOG_LEVEL is translated for uvicorn's access/error loggers.

Imports nothing from agent_dashboard so any module can log at import time.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

# LOG_LEVEL spellings -> stdlib level
LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": logging.DEBUG,
}

# uvicorn.run(log_level=...) only knows these names
UVICORN_LEVELS = {
    "CRITICAL": "critical",
    "FATAL": "critical",
    "ERROR": "error",
    "WARNING": "warning",
    "WARN": "warning",
    "INFO": "info",
    "DEBUG": "debug",
    "TRACE": "trace",
}


def resolve_log_level(name: str | None) -> int:
    """Stdlib level for a LOG_LEVEL value; unknown or empty values mean INFO."""
    return LEVELS.get((name or "").strip().upper(), logging.INFO)


def uvicorn_log_level(name: str | None) -> str:
    """uvicorn level name for a LOG_LEVEL value, e.g. "WARN" -> "warning"."""
    return UVICORN_LEVELS.get((name or "").strip().upper(), "info")


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_LEVEL_VALUE = resolve_log_level(LOG_LEVEL)
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    # UTC, ISO 8601; callers may pass their own
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Store the event name under event_type, and as message unless one was given."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog(level: int = LOG_LEVEL_VALUE, fmt: str = LOG_FORMAT) -> None:
    """(Re)configure the dashboard's structlog pipeline; fmt is "json" or "console"."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger bound to the module name, e.g. {"logger": "agent_dashboard.history.store", ...}."""
    return structlog.get_logger(name).bind(logger=name)
