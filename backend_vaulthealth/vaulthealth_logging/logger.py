"""
Structured logging for report cycles.

Every record is one JSON object (or a console line with LOG_FORMAT=console)
carrying timestamp, level, event_type, logger and cycle context such as
user_id and the weak/total counts. Credential material never reaches the
output: the redaction processor drops password and username fields even if a
caller passes them by mistake.

Depends only on stdlib logging and structlog so every backend_vaulthealth
module can import it.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

ROOT_LOGGER_NAME = "backend_vaulthealth"

# Fields that may hold credential material
REDACTED_FIELDS = frozenset({"password", "username", "user_inputs", "token", "authorization"})


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _redact_credentials(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Drop credential fields; the event itself is kept."""
    for key in REDACTED_FIELDS.intersection(event_dict):
        del event_dict[key]
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog() -> None:
    """Configure structlog from LOG_FORMAT and LOG_LEVEL."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        _add_timestamp,
        _redact_credentials,
        _normalize_event,
    ]
    if LOG_FORMAT == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    else:
        processors.append(structlog.processors.JSONRenderer())
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("report_cycle_scheduled", user_id=uid, delay_sec=3.0)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_user(user_id: str, name: str = ROOT_LOGGER_NAME) -> structlog.BoundLogger:
    """Logger for one user's report cycle; user_id rides on every event."""
    return get_logger(name).bind(user_id=user_id)
