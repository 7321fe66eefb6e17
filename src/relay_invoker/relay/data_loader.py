"""
relay_invoker.relay.data_loader

Data loader service contract.

Responsibilities:
- Expose the `ReloadData` operation (`GET <service>/Reload`) on a typed channel.
- Provide `refresh_api_data`, which reloads the configured API service.
"""

from __future__ import annotations

import httpx

from relay_invoker.observability.logging import ErrorLogger
from relay_invoker.relay.channel import Channel
from relay_invoker.relay.runner import InvocationRunner
from relay_invoker.settings import Settings


class DataLoaderChannel(Channel):
    def reload_data(self) -> bool:
        result = self.call("ReloadData", path="Reload")
        # Wrapped body style: {"ReloadDataResult": true}; bare booleans are accepted too.
        if isinstance(result, dict):
            result = result.get("ReloadDataResult")
        if not isinstance(result, bool):
            raise TypeError(f"Unexpected ReloadData reply from {self.uri}: {result!r}")
        return result


def refresh_api_data(
    *,
    config: Settings,
    logger: ErrorLogger,
    transport: httpx.BaseTransport | None = None,
) -> bool | None:
    """
    Reload data on `config.api_name`.
    Returns the service's answer, or None when the call failed (the failure is logged).
    """

    outcome: list[bool] = []

    def _reload(channel: DataLoaderChannel) -> None:
        outcome.append(channel.reload_data())

    runner = InvocationRunner(config, channel_type=DataLoaderChannel, transport=transport)
    runner.run_on_service(_reload, config.api_name, logger)
    return outcome[0] if outcome else None


# --- Module Notes -----------------------------------------------------------
# Other service contracts follow the same shape: subclass `Channel`, add typed
# methods over `call`, and pass the subclass as the runner's `channel_type`.
