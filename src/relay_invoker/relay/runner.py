"""
relay_invoker.relay.runner

Invocation runner: one remote operation per call, with guaranteed teardown.

Responsibilities:
- Fail fast on missing arguments and malformed configuration.
- Build a channel factory and channel scoped to a single call.
- Run the caller's operation, classify failures and report them to the logger.
- Close and release the channel, then dispose the factory, on every exit path.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Any

import httpx

from relay_invoker.auth.tokens import AuthToken, TokenProvider, token_provider_for
from relay_invoker.errors import Failure, FailureKind, InvalidArgument, InvalidConfiguration, classify
from relay_invoker.observability.logging import ErrorLogger
from relay_invoker.relay.channel import Channel
from relay_invoker.relay.endpoint import ServiceIdentity
from relay_invoker.relay.factory import ChannelFactory, RelayBinding
from relay_invoker.settings import ConfigurationProvider

Operation = Callable[[Any], Any]

COMMUNICATION_MESSAGE = (
    "Communication error on service {0}{2}, please ensure that the service is "
    "properly running on the URI {1}!"
)
UNEXPECTED_MESSAGE = "Exception on service {0}{2} in the URI {1}!"

_STAGE_TEXT = {
    "operation": "",
    "create": " while creating the channel",
    "close": " while closing the channel",
    "release": " while releasing the channel",
    "dispose": " while disposing the channel factory",
}


class InvocationRunner:
    """
    Fire-and-log contract:
    - Only InvalidArgument / InvalidConfiguration propagate.
    - Every other failure is logged once per failing step and suppressed.
    - Callers needing a result should capture it inside the operation closure.
    """

    def __init__(
        self,
        config: ConfigurationProvider,
        *,
        token_provider: TokenProvider | None = None,
        binding: RelayBinding | None = None,
        channel_type: type[Channel] = Channel,
        transport: httpx.BaseTransport | None = None,
        factory_builder: Callable[[], ChannelFactory] | None = None,
    ) -> None:
        self._config = config
        self._token_provider = token_provider or token_provider_for(config)
        binding = binding or RelayBinding.from_settings(config)
        self._factory_builder = factory_builder or partial(
            ChannelFactory, binding, channel_type=channel_type, transport=transport
        )

    def run_on_service(
        self, operation: Operation, service_name: str, logger: ErrorLogger
    ) -> None:
        identity = ServiceIdentity.from_config(self._config, service_name)
        self.invoke(operation, identity, self._config.shared_key, logger)

    def invoke(
        self,
        operation: Operation,
        identity: ServiceIdentity,
        shared_key: str,
        logger: ErrorLogger,
    ) -> None:
        if operation is None:
            raise InvalidArgument("operation must not be None")
        if logger is None:
            raise InvalidArgument("logger must not be None")

        uri = identity.uri
        token = self._create_token(shared_key, identity)

        try:
            factory = self._factory_builder()
        except InvalidConfiguration:
            raise
        except Exception as e:
            # Nothing was built, so there is nothing to tear down.
            _report(Failure(classify(e), "create", e), identity, uri, logger)
            return

        try:
            self._run(operation, factory, identity, token, uri, logger)
        finally:
            failure = _attempt("dispose", factory.dispose)
            if failure is not None:
                _report(failure, identity, uri, logger)

    def _create_token(self, shared_key: str, identity: ServiceIdentity) -> AuthToken:
        try:
            return self._token_provider.create_token(shared_key, identity)
        except InvalidConfiguration:
            raise
        except ValueError as e:
            raise InvalidConfiguration(
                f"Cannot create a token for service {identity.service_name}: {e}"
            ) from e

    def _run(
        self,
        operation: Operation,
        factory: ChannelFactory,
        identity: ServiceIdentity,
        token: AuthToken,
        uri: str,
        logger: ErrorLogger,
    ) -> None:
        try:
            channel = factory.create_channel(identity, token)
        except InvalidConfiguration:
            raise
        except Exception as e:
            _report(Failure(classify(e), "create", e), identity, uri, logger)
            return

        try:
            failure = _attempt("operation", partial(operation, channel))
            if failure is not None:
                _report(failure, identity, uri, logger)
        finally:
            # Close before release, release before the caller disposes the factory.
            for stage, step in (("close", channel.close), ("release", channel.release)):
                failure = _attempt(stage, step)
                if failure is not None:
                    _report(failure, identity, uri, logger)


def _attempt(stage: str, step: Callable[[], Any]) -> Failure | None:
    try:
        step()
    except Exception as e:
        return Failure(kind=classify(e), stage=stage, error=e)
    return None


def _report(failure: Failure, identity: ServiceIdentity, uri: str, logger: ErrorLogger) -> None:
    stage_text = _STAGE_TEXT.get(failure.stage, f" during {failure.stage}")
    if failure.kind is FailureKind.communication:
        logger.write_error(COMMUNICATION_MESSAGE, identity.service_name, uri, stage_text)
    else:
        logger.write_error(
            UNEXPECTED_MESSAGE, identity.service_name, uri, stage_text, error=failure.error
        )


# --- Module Notes -----------------------------------------------------------
# The runner keeps no per-call state on `self`, so one instance can serve
# concurrent callers; each call builds its own factory and channel.
