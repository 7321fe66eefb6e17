"""
tests.test_channel

Channel lifecycle and error mapping.
"""

from __future__ import annotations

import json

import httpx
import pytest

from relay_invoker.errors import ChannelStateError, CommunicationFailure
from relay_invoker.relay.channel import Channel, ChannelState
from relay_invoker.relay.endpoint import ServiceIdentity

IDENTITY = ServiceIdentity(namespace_address="myns", service_name="mysvc")


def _channel(handler) -> tuple[Channel, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def _record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http = httpx.Client(transport=httpx.MockTransport(_record), trust_env=False)
    return Channel(http=http, uri=IDENTITY.uri, identity=IDENTITY), seen


def test_channel_connects_lazily_on_first_call() -> None:
    channel, seen = _channel(lambda r: httpx.Response(200, json={"ok": True}))

    assert channel.state is ChannelState.created
    assert seen == []

    assert channel.call("Ping") == {"ok": True}
    assert channel.state is ChannelState.open
    assert str(seen[0].url) == "https://myns/mysvc/Ping"


def test_call_honours_method_path_and_body() -> None:
    channel, seen = _channel(lambda r: httpx.Response(204))

    assert channel.call("Submit", method="POST", path="/items/submit", json={"a": 1}) is None
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/mysvc/items/submit"
    assert json.loads(seen[0].content) == {"a": 1}


def test_error_status_faults_the_channel() -> None:
    channel, _ = _channel(lambda r: httpx.Response(503))

    with pytest.raises(CommunicationFailure) as exc_info:
        channel.call("Ping")

    assert exc_info.value.status_code == 503
    assert exc_info.value.uri == "https://myns/mysvc"
    assert channel.state is ChannelState.faulted
    with pytest.raises(ChannelStateError):
        channel.call("Ping")


def test_transport_error_faults_the_channel() -> None:
    def _unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("relay unreachable", request=request)

    channel, _ = _channel(_unreachable)

    with pytest.raises(CommunicationFailure) as exc_info:
        channel.call("Ping")

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert channel.state is ChannelState.faulted


def test_closed_channel_is_never_reused() -> None:
    channel, seen = _channel(lambda r: httpx.Response(200, json=True))
    channel.call("Ping")

    channel.close()
    channel.close()

    assert channel.state is ChannelState.closed
    with pytest.raises(ChannelStateError):
        channel.call("Ping")
    assert len(seen) == 1


def test_close_on_faulted_channel_is_quiet() -> None:
    channel, _ = _channel(lambda r: httpx.Response(500))
    with pytest.raises(CommunicationFailure):
        channel.call("Ping")

    channel.close()

    assert channel.state is ChannelState.faulted


def test_released_channel_cannot_send() -> None:
    channel, seen = _channel(lambda r: httpx.Response(200, json=True))

    channel.release()

    assert channel.released
    assert not channel.is_live
    with pytest.raises(ChannelStateError):
        channel.call("Ping")
    assert seen == []


def test_undecodable_reply_faults_the_channel() -> None:
    channel, _ = _channel(
        lambda r: httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not-gzip")
    )

    with pytest.raises(CommunicationFailure) as exc_info:
        channel.call("Ping")

    assert isinstance(exc_info.value.__cause__, httpx.DecodingError)
    assert channel.state is ChannelState.faulted
