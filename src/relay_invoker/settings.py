"""
relay_invoker.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the relay client.
- Hide secrets from repr/logging (the shared access key).
- Define the `ConfigurationProvider` boundary the runner depends on.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Protocol

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationProvider(Protocol):
    """
    What the invocation runner needs to know about the relay.
    `Settings` satisfies this; tests may pass any object with these attributes.
    """

    @property
    def namespace_address(self) -> str: ...

    @property
    def shared_key(self) -> str: ...

    @property
    def key_name(self) -> str: ...

    @property
    def scheme(self) -> str: ...


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RELAY_", case_sensitive=False)

    service_name: str = "relay-invoker"
    log_level: str = "INFO"

    # Relay addressing
    bus_namespace: str = ""
    relay_domain: str = "servicebus.windows.net"
    scheme: Literal["http", "https"] = "https"

    # Name of the data loader service refreshed by `python -m relay_invoker`.
    api_name: str = ""

    # Auth
    key_name: str = "RootManageSharedAccessKey"
    shared_key: str = Field(default="", repr=False)
    token_scheme: Literal["sas", "jwt"] = "sas"
    token_ttl_seconds: int = 1200

    # Transport
    request_timeout_seconds: float = 60.0

    @property
    def namespace_address(self) -> str:
        # An empty relay_domain means bus_namespace is already a full host name.
        if not self.relay_domain:
            return self.bus_namespace
        if not self.bus_namespace:
            return ""
        return f"{self.bus_namespace}.{self.relay_domain}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Only the process entrypoint should use this; library code takes a provider.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# An empty bus_namespace yields an empty namespace_address, which endpoint
# resolution rejects as InvalidConfiguration before any network attempt.
