"""
relay_invoker.observability.logging

Structured logging configuration and the error-logger collaborator.

Responsibilities:
- Configure `structlog` for JSON logs suitable for ELK/Splunk/Datadog.
- Provide a small wrapper for obtaining bound loggers.
- Adapt bound loggers to the `ErrorLogger` protocol used by the invocation runner.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Protocol

import structlog


class ErrorLogger(Protocol):
    """
    Collaborator that receives classified invocation failures.

    `message` is a `str.format` template with positional placeholders ({0}, {1}, ...).
    `error`, when given, is attached to the entry for diagnosis.
    """

    def write_error(
        self, message: str, *args: Any, error: BaseException | None = None
    ) -> None: ...


def configure_logging(*, service_name: str, level: str) -> None:
    """
    Structured JSON logs for ingestion in Splunk/ELK/Datadog.
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class StructlogErrorLogger:
    """Writes runner failures as structlog `error` events."""

    def __init__(self, name: str = "relay_invoker", *, log: Any | None = None) -> None:
        self._log = log if log is not None else get_logger(name)

    def write_error(
        self, message: str, *args: Any, error: BaseException | None = None
    ) -> None:
        event = message.format(*args) if args else message
        if error is None:
            self._log.error(event)
        else:
            # exc_info accepts the exception instance; dict_tracebacks renders it.
            self._log.error(event, exc_info=error, error_type=type(error).__name__)


class NullErrorLogger:
    """Discards everything; for callers that deliberately ignore failures."""

    def write_error(
        self, message: str, *args: Any, error: BaseException | None = None
    ) -> None:
        return None


# --- Module Notes -----------------------------------------------------------
# The runner only ever calls `write_error`; it never looks a logger up globally.
