"""
tests.conftest

Shared fixtures for relay client tests.

Responsibilities:
- Provide fixed settings and a recording error logger.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from relay_invoker.settings import Settings

SHARED_KEY = "k3y-material-for-tests-0123456789abcdef"


@dataclass
class LoggedError:
    message: str
    args: tuple[Any, ...]
    error: BaseException | None

    @property
    def text(self) -> str:
        return self.message.format(*self.args)


class RecordingErrorLogger:
    def __init__(self) -> None:
        self.records: list[LoggedError] = []

    def write_error(self, message: str, *args: Any, error: BaseException | None = None) -> None:
        self.records.append(LoggedError(message=message, args=args, error=error))


@pytest.fixture
def settings() -> Settings:
    return Settings(bus_namespace="contoso", shared_key=SHARED_KEY, api_name="loader")


@pytest.fixture
def error_logger() -> RecordingErrorLogger:
    return RecordingErrorLogger()
