"""
relay_invoker.__main__

Entrypoint for `python -m relay_invoker`.

Responsibilities:
- Load settings and configure structured logging.
- Ask the configured API service to reload its data.
"""

from __future__ import annotations

from relay_invoker.observability.logging import StructlogErrorLogger, configure_logging, get_logger
from relay_invoker.relay.data_loader import refresh_api_data
from relay_invoker.settings import get_settings


def main() -> None:
    settings = get_settings()
    configure_logging(service_name=settings.service_name, level=settings.log_level)
    log = get_logger(__name__)

    reloaded = refresh_api_data(config=settings, logger=StructlogErrorLogger(__name__))
    log.info("refresh_api_data", api_name=settings.api_name, reloaded=reloaded)


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# Failures are logged by the runner and do not change the exit code; only
# configuration errors (e.g. an empty RELAY_API_NAME) abort the process.
