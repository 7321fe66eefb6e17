"""
relay_invoker.relay.channel

Channel to a single relayed service endpoint.

Responsibilities:
- Track the channel lifecycle (CREATED -> OPEN -> CLOSED, or -> FAULTED).
- Invoke named remote operations over the factory's HTTP client.
- Map transport/HTTP errors to `CommunicationFailure` and fault the channel.
"""

from __future__ import annotations

import enum
from typing import Any

import httpx

from relay_invoker.errors import ChannelStateError, CommunicationFailure
from relay_invoker.relay.endpoint import ServiceIdentity


class ChannelState(enum.StrEnum):
    created = "CREATED"
    open = "OPEN"
    closed = "CLOSED"
    faulted = "FAULTED"


class Channel:
    """
    A channel is single-use: once CLOSED or FAULTED it never sends again.
    Opening is implicit on the first `call`; construction does no network I/O.
    """

    def __init__(self, *, http: httpx.Client, uri: str, identity: ServiceIdentity) -> None:
        self._http: httpx.Client | None = http
        self._uri = uri
        self._identity = identity
        self._state = ChannelState.created

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def identity(self) -> ServiceIdentity:
        return self._identity

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def released(self) -> bool:
        return self._http is None

    @property
    def is_live(self) -> bool:
        return not self.released and self._state in (ChannelState.created, ChannelState.open)

    def open(self) -> None:
        if self.released:
            raise ChannelStateError(f"Channel to {self._uri} has been released")
        if self._state is ChannelState.created:
            self._state = ChannelState.open
        elif self._state is not ChannelState.open:
            raise ChannelStateError(f"Channel to {self._uri} is {self._state}; it cannot be reused")

    def call(
        self,
        operation: str,
        *,
        method: str = "GET",
        path: str | None = None,
        json: Any = None,
    ) -> Any:
        """
        Invoke `operation` and return the decoded JSON reply (None for an empty body).
        `path` defaults to the operation name, relative to the service URI.
        """

        self.open()
        http = self._http
        if http is None:
            raise ChannelStateError(f"Channel to {self._uri} has been released")
        url = f"{self._uri}/{(path if path is not None else operation).lstrip('/')}"

        try:
            r = http.request(method, url, json=json)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._state = ChannelState.faulted
            raise CommunicationFailure(
                f"{operation} on {self._uri} failed with HTTP {e.response.status_code}",
                uri=self._uri,
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            # Covers transport errors and undecodable replies (e.g. corrupt content-encoding).
            self._state = ChannelState.faulted
            raise CommunicationFailure(
                f"{operation} on {self._uri} failed: {e}", uri=self._uri
            ) from e

        if not r.content:
            return None
        return r.json()

    def close(self) -> None:
        if self._state in (ChannelState.created, ChannelState.open):
            self._state = ChannelState.closed
        # Closing a FAULTED channel is an abort: nothing to flush, state stays FAULTED.

    def release(self) -> None:
        # The HTTP client belongs to the factory; the channel only drops its reference.
        self._http = None


# --- Module Notes -----------------------------------------------------------
# Channels are handed to exactly one operation closure by the runner and must
# not be retained after `invoke` returns.
