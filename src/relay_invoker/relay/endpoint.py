"""
relay_invoker.relay.endpoint

Service identity and endpoint resolution.

Responsibilities:
- Describe which relay namespace and service a call targets.
- Compose the fully-qualified service URI (`scheme://namespace/service`).
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from relay_invoker.errors import InvalidConfiguration
from relay_invoker.settings import ConfigurationProvider

SUPPORTED_SCHEMES = frozenset({"http", "https"})


@dataclass(frozen=True, slots=True)
class ServiceIdentity:
    namespace_address: str
    service_name: str
    scheme: str = "https"

    @classmethod
    def from_config(cls, config: ConfigurationProvider, service_name: str) -> ServiceIdentity:
        return cls(
            namespace_address=config.namespace_address,
            service_name=service_name,
            scheme=config.scheme,
        )

    @property
    def uri(self) -> str:
        return resolve_endpoint(self.scheme, self.namespace_address, self.service_name)


def resolve_endpoint(scheme: str, namespace_address: str, service_name: str) -> str:
    if scheme not in SUPPORTED_SCHEMES:
        raise InvalidConfiguration(f"Unsupported scheme {scheme!r}; expected http or https")
    if not namespace_address or not namespace_address.strip():
        raise InvalidConfiguration("Namespace address must not be empty")

    # Service names may carry nested paths ("api/loader"); keep the slashes, quote the rest.
    path = (service_name or "").strip().strip("/")
    if not path:
        raise InvalidConfiguration("Service name must not be empty")
    host = namespace_address.strip().rstrip("/")
    if "/" in host:
        raise InvalidConfiguration(f"Namespace address {host!r} must be a host name, not a path")

    return f"{scheme}://{host}/{quote(path, safe='/')}"


# --- Module Notes -----------------------------------------------------------
# Resolution is pure; it is safe to call from any thread and is the first thing
# the runner does, so malformed identities fail before any resource is built.
