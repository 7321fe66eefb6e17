"""
relay_invoker.relay.factory

Channel factory: secured binding + token behaviour -> channels.

Responsibilities:
- Describe the relay binding (end-to-end transport security, no client auth at transport level).
- Own the pooled HTTP client and the outbound token behaviour.
- Create at most one live channel at a time; dispose exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import httpx

from relay_invoker.auth.tokens import AuthToken
from relay_invoker.errors import ChannelStateError, InvalidConfiguration
from relay_invoker.relay.channel import Channel
from relay_invoker.relay.endpoint import ServiceIdentity


@dataclass(frozen=True, slots=True)
class RelayBinding:
    # "transport" requires https end to end; "none" is for local relays/tests over http.
    security_mode: Literal["transport", "none"] = "transport"
    # Clients authenticate with the token behaviour, never at the transport layer.
    client_authentication: Literal["none"] = "none"
    timeout_seconds: float = 60.0

    @classmethod
    def from_settings(cls, settings: Any) -> RelayBinding:
        return cls(timeout_seconds=getattr(settings, "request_timeout_seconds", 60.0))

    def validate(self, uri: str) -> None:
        if self.security_mode == "transport" and not uri.startswith("https://"):
            raise InvalidConfiguration(f"Transport security requires an https endpoint, got {uri}")


class TokenBehavior:
    """httpx request hook that stamps the token header on every outbound request."""

    def __init__(self, token: AuthToken) -> None:
        self._token = token

    def __call__(self, request: httpx.Request) -> None:
        request.headers[self._token.header_name] = self._token.header_value()


class ChannelFactory:
    def __init__(
        self,
        binding: RelayBinding | None = None,
        *,
        channel_type: type[Channel] = Channel,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._binding = binding or RelayBinding()
        self._channel_type = channel_type
        self._transport = transport
        self._http: httpx.Client | None = None
        self._channel: Channel | None = None
        self._disposed = False

    @property
    def binding(self) -> RelayBinding:
        return self._binding

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _build_client(self) -> httpx.Client:
        # Constructing the client opens no sockets; connections are made on first request.
        # Env proxy mounts would bypass an injected transport, so they only apply without one.
        return httpx.Client(
            timeout=self._binding.timeout_seconds,
            verify=True,
            follow_redirects=False,
            transport=self._transport,
            trust_env=self._transport is None,
        )

    def create_channel(self, identity: ServiceIdentity, token: AuthToken) -> Channel:
        if self._disposed:
            raise ChannelStateError("Channel factory has been disposed")
        if self._channel is not None and self._channel.is_live:
            raise ChannelStateError(
                f"Channel factory already owns a live channel to {self._channel.uri}"
            )
        if token.issued_for != identity:
            raise InvalidConfiguration(
                f"Token was issued for service {token.issued_for.service_name!r}, "
                f"not {identity.service_name!r}"
            )

        uri = identity.uri
        self._binding.validate(uri)

        if self._http is None:
            self._http = self._build_client()
        self._http.event_hooks = {"request": [TokenBehavior(token)], "response": []}

        self._channel = self._channel_type(http=self._http, uri=uri, identity=identity)
        return self._channel

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._channel = None
        if self._http is not None:
            http, self._http = self._http, None
            http.close()

    def __enter__(self) -> ChannelFactory:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()


# --- Module Notes -----------------------------------------------------------
# A factory is never reused after the runner call that built it returns; the
# runner disposes it after the channel is closed and released.
