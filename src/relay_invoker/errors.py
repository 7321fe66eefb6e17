"""
relay_invoker.errors

Failure taxonomy for relay invocations.

Responsibilities:
- Define the exceptions raised by resolution, channels and the runner.
- Classify arbitrary exceptions as communication or unexpected failures.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import httpx


class RelayInvokerError(Exception):
    pass


class InvalidArgument(RelayInvokerError, ValueError):
    """A required argument was missing; raised before any resource is built."""


class InvalidConfiguration(RelayInvokerError, ValueError):
    """Identity, key or binding data cannot describe a reachable endpoint."""


class ChannelStateError(RelayInvokerError):
    """A channel or factory was used outside its lifecycle."""


class CommunicationFailure(RelayInvokerError):
    """
    Transport, connectivity or remote-availability problem.
    `status_code` is set when the relay or service answered with an error status.
    """

    def __init__(self, message: str, *, uri: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.uri = uri
        self.status_code = status_code


class FailureKind(enum.StrEnum):
    communication = "COMMUNICATION"
    unexpected = "UNEXPECTED"


@dataclass(frozen=True, slots=True)
class Failure:
    # Stage is where in the invocation the error surfaced (operation, close, ...).
    kind: FailureKind
    stage: str
    error: BaseException


_COMMUNICATION_ERRORS: tuple[type[BaseException], ...] = (
    CommunicationFailure,
    httpx.RequestError,
    httpx.HTTPStatusError,
)


def classify(exc: BaseException) -> FailureKind:
    if isinstance(exc, _COMMUNICATION_ERRORS):
        return FailureKind.communication
    return FailureKind.unexpected


# --- Module Notes -----------------------------------------------------------
# Only InvalidArgument and InvalidConfiguration are allowed to escape the runner;
# everything else is turned into a `Failure` and logged.
