"""Falcon ASGI application for GitHub webhook deliveries.

Usage
-----
Register handlers and build the app in one chain::

    import hubhook
    from hubhook.events import Event

    async def on_comment(delivery):
        payload = delivery.payload()
        print(payload.action, payload.repository.name)

    app = (
        hubhook.new(b"My GitHub webhook s3cr#t")
        .on(Event.ISSUE_COMMENT, on_comment)
        .build(webhook_path="/gh_webhooks")
    )

Serve ``app`` with any ASGI server, for example Granian.

"""

from __future__ import annotations

import typing as typ

import falcon.asgi

from hubhook.api.errors import handle_signature_verification
from hubhook.api.resources import HealthResource, WebhookResource
from hubhook.config import DEFAULT_WEBHOOK_PATH
from hubhook.dispatcher import WebhookDispatcher
from hubhook.errors import SignatureVerificationError
from hubhook.registry import RegistryBuilder
from hubhook.signature import SignatureVerifier

if typ.TYPE_CHECKING:
    from hubhook.events import Event
    from hubhook.observability import WebhookEventLogger
    from hubhook.registry import WebhookHandler
    from hubhook.signature import WebhookSecret

__all__ = ["HEALTH_PATH", "WebhookAppBuilder", "create_app"]

HEALTH_PATH = "/health"


def create_app(
    dispatcher: WebhookDispatcher,
    *,
    webhook_path: str = DEFAULT_WEBHOOK_PATH,
) -> falcon.asgi.App:
    """Create the Falcon ASGI application around ``dispatcher``.

    Parameters
    ----------
    dispatcher
        Dispatcher handling ``POST`` requests on ``webhook_path``.
    webhook_path
        Route receiving deliveries.

    Returns
    -------
    falcon.asgi.App
        App serving ``webhook_path`` and ``/health``.

    """
    app = falcon.asgi.App()  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route(webhook_path, WebhookResource(dispatcher))
    if webhook_path != HEALTH_PATH:
        app.add_route(HEALTH_PATH, HealthResource())

    app.add_error_handler(SignatureVerificationError, handle_signature_verification)

    return app


class WebhookAppBuilder:
    """Collect handlers for a secret, then build the ASGI app.

    Wraps a :class:`~hubhook.registry.RegistryBuilder`, so the same
    single-use rule applies: after :meth:`build` or :meth:`build_dispatcher`
    the builder raises :class:`~hubhook.errors.BuilderConsumedError`.

    """

    __slots__ = ("_registry", "_verifier")

    def __init__(self, secret: WebhookSecret | bytes | str) -> None:
        """Start a builder for deliveries signed with ``secret``."""
        self._verifier = SignatureVerifier(secret)
        self._registry = RegistryBuilder()

    def on(self, event: Event | str, handler: WebhookHandler) -> typ.Self:
        """Register ``handler`` for ``event``; see :meth:`RegistryBuilder.on`."""
        self._registry.on(event, handler)
        return self

    def build_dispatcher(
        self, *, event_logger: WebhookEventLogger | None = None
    ) -> WebhookDispatcher:
        """Freeze the handlers into a framework-agnostic dispatcher."""
        return WebhookDispatcher(
            self._verifier,
            self._registry.build(),
            event_logger=event_logger,
        )

    def build(
        self,
        *,
        webhook_path: str = DEFAULT_WEBHOOK_PATH,
        event_logger: WebhookEventLogger | None = None,
    ) -> falcon.asgi.App:
        """Freeze the handlers and return the Falcon ASGI app."""
        dispatcher = self.build_dispatcher(event_logger=event_logger)
        return create_app(dispatcher, webhook_path=webhook_path)
