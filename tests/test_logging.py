"""
tests.test_logging

Error-logger adapters.
"""

from __future__ import annotations

from typing import Any

from relay_invoker.observability.logging import NullErrorLogger, StructlogErrorLogger


class _StubLog:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def error(self, event: str, **kw: Any) -> None:
        self.calls.append((event, kw))


def test_structlog_error_logger_formats_positional_arguments() -> None:
    log = _StubLog()

    StructlogErrorLogger(log=log).write_error("service {0} at {1}", "loader", "https://ns/loader")

    assert log.calls == [("service loader at https://ns/loader", {})]


def test_structlog_error_logger_attaches_the_error() -> None:
    log = _StubLog()
    boom = RuntimeError("boom")

    StructlogErrorLogger(log=log).write_error("failed on {0}", "loader", error=boom)

    assert log.calls == [
        ("failed on loader", {"exc_info": boom, "error_type": "RuntimeError"})
    ]


def test_message_without_arguments_is_not_formatted() -> None:
    log = _StubLog()

    StructlogErrorLogger(log=log).write_error("literal {braces}")

    assert log.calls == [("literal {braces}", {})]


def test_null_error_logger_discards() -> None:
    assert NullErrorLogger().write_error("anything {0}", 1, error=ValueError()) is None
