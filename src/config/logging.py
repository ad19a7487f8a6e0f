"""
Structured logging for RxDesk.

Every event passes through a redaction step before rendering: credential
fields are masked and patient identifiers never reach the log stream,
whatever the renderer. Development gets the colored console renderer,
other environments emit one JSON object per line.
"""

import logging
import sys
from collections.abc import Iterable
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from src.config.settings import get_settings

REDACTED = "[REDACTED]"

CREDENTIAL_KEYS = frozenset({"password", "passwordhash", "password_hash", "token", "secret"})

# Patient-identifying fields; allowed in audit rows, never in logs
PATIENT_KEYS = frozenset({"patient_name", "patient_id", "customer_name", "fhir_bundle"})

QUIET_LOGGERS = ("aiosqlite", "uvicorn.access")


def redact(value: Any, keys: Iterable[str]) -> Any:
    """Mask the values of ``keys`` (case-insensitive) anywhere in a JSON-like payload."""
    keys = frozenset(k.lower() for k in keys)

    def walk(node: Any) -> Any:
        if isinstance(node, dict):
            return {
                k: REDACTED if isinstance(k, str) and k.lower() in keys else walk(v)
                for k, v in node.items()
            }
        if isinstance(node, list):
            return [walk(v) for v in node]
        return node

    return walk(value)


def redact_event(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor: strip credentials and patient identifiers from an event."""
    return redact(event_dict, CREDENTIAL_KEYS | PATIENT_KEYS)


def add_service_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag events with the service name and environment."""
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def build_processors(environment: str) -> list[Processor]:
    """Processor chain for an environment; redaction always runs before rendering."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_service_context,
        redact_event,
    ]
    if environment == "development":
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend(
            [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        )
    return processors


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger from settings."""
    settings = get_settings()

    structlog.configure(
        processors=build_processors(settings.environment),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
