"""
tests.test_smoke

Minimal smoke tests to validate the entrypoint wires settings, logging and the runner.

Responsibilities:
- Ensure `python -m relay_invoker` reloads the configured API service end to end.
"""

from __future__ import annotations

import httpx

import relay_invoker.__main__ as entrypoint
from relay_invoker.relay import data_loader
from relay_invoker.settings import Settings


def test_main_refreshes_configured_api(monkeypatch) -> None:
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ReloadDataResult": True})

    settings = Settings(
        bus_namespace="contoso",
        shared_key="k3y-material-for-tests-0123456789abcdef",
        api_name="loader",
    )
    real_refresh = data_loader.refresh_api_data

    def _refresh(**kwargs):
        return real_refresh(transport=httpx.MockTransport(_handler), **kwargs)

    monkeypatch.setattr(entrypoint, "get_settings", lambda: settings)
    monkeypatch.setattr(entrypoint, "refresh_api_data", _refresh)

    entrypoint.main()

    assert [str(r.url) for r in seen] == ["https://contoso.servicebus.windows.net/loader/Reload"]
    assert "ServiceBusAuthorization" in seen[0].headers


# --- Module Notes -----------------------------------------------------------
# The relay itself is replaced by httpx.MockTransport; no network access is needed.
