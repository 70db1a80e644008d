"""Runtime entrypoint serving the webhook app with Granian.

``hubhook.runtime:create_app`` is the Granian factory. It reads
:class:`~hubhook.config.WebhookConfig` from the environment, lets the
optional ``HUBHOOK_HANDLERS`` hook register handlers, and builds the Falcon
app.

Configuration is driven by environment variables:

- ``HUBHOOK_WEBHOOK_SECRET``: shared webhook secret (required)
- ``HUBHOOK_WEBHOOK_PATH``: delivery route (default ``/``)
- ``HUBHOOK_HANDLERS``: ``module:callable`` receiving the app builder
- ``HUBHOOK_HOST``: bind address (default ``0.0.0.0``)
- ``HUBHOOK_PORT``: listen port (default ``8080``)
- ``HUBHOOK_LOG_LEVEL``: log level (default ``INFO``)

Run the service directly with ``python -m hubhook.runtime``.
"""

from __future__ import annotations

import typing as typ

from hubhook.api.app import WebhookAppBuilder
from hubhook.config import ServerSettings, WebhookConfig
from hubhook.errors import WebhookConfigError
from hubhook.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)


def create_app() -> falcon.asgi.App:
    """Build the webhook app from environment configuration.

    Returns
    -------
    falcon.asgi.App
        App serving deliveries on ``HUBHOOK_WEBHOOK_PATH`` and ``/health``.

    Raises
    ------
    WebhookConfigError
        If the secret is missing or the handler hook cannot be resolved.

    """
    config = WebhookConfig.from_env()
    builder = WebhookAppBuilder(config.secret)

    hook = config.load_handlers_hook()
    if hook is not None:
        hook(builder)
        log_info(logger, "Loaded webhook handlers from %s", config.handlers_target)
    else:
        log_warning(
            logger,
            "HUBHOOK_HANDLERS is not set; deliveries will be verified but "
            "no handlers will run",
        )

    return builder.build(webhook_path=config.webhook_path)


def main() -> None:
    """Start the webhook server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    try:
        settings = ServerSettings.from_env()
    except WebhookConfigError as exc:
        log_error(logger, "Cannot start hubhook: %s", exc)
        raise SystemExit(1) from exc

    level, level_replaced = configure_logging(settings.log_level)
    if level_replaced:
        log_warning(
            logger, "Unknown HUBHOOK_LOG_LEVEL %r; using %s", settings.log_level, level
        )
    log_info(logger, "Serving webhooks on %s:%d", settings.host, settings.port)

    Granian(
        "hubhook.runtime:create_app",
        address=settings.host,
        port=settings.port,
        interface=Interfaces.ASGI,
        factory=True,
    ).serve()


if __name__ == "__main__":
    main()
