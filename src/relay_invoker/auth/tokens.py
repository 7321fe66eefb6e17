"""
relay_invoker.auth.tokens

Short-lived relay credentials derived from a shared key.

Responsibilities:
- Issue SharedAccessSignature tokens (relay default) and HS256 JWTs.
- Decode and validate JWTs with strict claim requirements (iss/aud/exp/iat/sub).
- Never expose key or token material through repr/logging.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol
from urllib.parse import quote_plus

import jwt
from jwt import InvalidTokenError

from relay_invoker.relay.endpoint import ServiceIdentity

DEFAULT_TTL = timedelta(minutes=20)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class AuthToken:
    value: str = field(repr=False)
    issued_for: ServiceIdentity
    # Request header the token travels in.
    header_name: str
    expires_at: datetime

    def header_value(self) -> str:
        return self.value


class TokenProvider(Protocol):
    def create_token(self, shared_key: str, identity: ServiceIdentity) -> AuthToken: ...


def _require_key(shared_key: str) -> None:
    if not shared_key:
        raise ValueError("shared key must not be empty")


class SharedAccessSignatureTokenProvider:
    """
    Relay SAS tokens:
    `SharedAccessSignature sr=<uri>&sig=<hmac-sha256>&se=<expiry>&skn=<key name>`.
    """

    header_name = "ServiceBusAuthorization"

    def __init__(
        self,
        *,
        key_name: str,
        ttl: timedelta = DEFAULT_TTL,
        clock: Clock | None = None,
    ) -> None:
        self._key_name = key_name
        self._ttl = ttl
        self._clock = clock or _utcnow

    def create_token(self, shared_key: str, identity: ServiceIdentity) -> AuthToken:
        _require_key(shared_key)
        expires_at = self._clock() + self._ttl
        expiry = int(expires_at.timestamp())

        resource = quote_plus(identity.uri)
        to_sign = f"{resource}\n{expiry}".encode()
        digest = hmac.new(shared_key.encode(), to_sign, hashlib.sha256).digest()
        signature = quote_plus(base64.b64encode(digest).decode())

        value = (
            f"SharedAccessSignature sr={resource}&sig={signature}"
            f"&se={expiry}&skn={quote_plus(self._key_name)}"
        )
        return AuthToken(
            value=value,
            issued_for=identity,
            header_name=self.header_name,
            expires_at=datetime.fromtimestamp(expiry, tz=UTC),
        )


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str = field(repr=False)


class JwtValidationError(Exception):
    pass


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    ttl: timedelta = DEFAULT_TTL,
    now: datetime | None = None,
) -> str:
    now = now or _utcnow()
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> dict[str, Any]:
    try:
        return jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
            },
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e


class JwtTokenProvider:
    """HS256 bearer tokens; audience is the resolved service URI."""

    header_name = "Authorization"

    def __init__(
        self,
        *,
        key_name: str,
        ttl: timedelta = DEFAULT_TTL,
        alg: str = "HS256",
        clock: Clock | None = None,
    ) -> None:
        self._key_name = key_name
        self._ttl = ttl
        self._alg = alg
        self._clock = clock or _utcnow

    def config_for(self, shared_key: str, identity: ServiceIdentity) -> JwtConfig:
        return JwtConfig(
            alg=self._alg,
            issuer=self._key_name,
            audience=identity.uri,
            secret=shared_key,
        )

    def create_token(self, shared_key: str, identity: ServiceIdentity) -> AuthToken:
        _require_key(shared_key)
        now = self._clock()
        token = issue_token(
            cfg=self.config_for(shared_key, identity),
            subject=identity.service_name,
            ttl=self._ttl,
            now=now,
        )
        return AuthToken(
            value=f"Bearer {token}",
            issued_for=identity,
            header_name=self.header_name,
            expires_at=datetime.fromtimestamp(int((now + self._ttl).timestamp()), tz=UTC),
        )


def token_provider_for(config: Any) -> TokenProvider:
    # Providers other than Settings may omit scheme/ttl; fall back to relay SAS defaults.
    scheme = getattr(config, "token_scheme", "sas")
    ttl = timedelta(seconds=getattr(config, "token_ttl_seconds", int(DEFAULT_TTL.total_seconds())))
    if scheme == "jwt":
        return JwtTokenProvider(key_name=config.key_name, ttl=ttl)
    if scheme == "sas":
        return SharedAccessSignatureTokenProvider(key_name=config.key_name, ttl=ttl)
    raise ValueError(f"Unknown token scheme {scheme!r}")


# --- Module Notes -----------------------------------------------------------
# The SAS signature covers the URL-encoded resource URI and expiry, so a token
# is only valid for the single service it was issued for.
