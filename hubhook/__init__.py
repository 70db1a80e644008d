"""Verify GitHub webhook deliveries and route them to async handlers.

Example
-------
::

    import hubhook
    from hubhook import Event

    async def on_comment(delivery):
        payload = delivery.payload()
        print(f"Received a payload for repository {payload.repository.name}")

    app = hubhook.new(b"My GitHub webhook s3cr#t").on(
        Event.ISSUE_COMMENT, on_comment
    ).build()

"""

from __future__ import annotations

from hubhook.api.app import WebhookAppBuilder
from hubhook.dispatcher import (
    DispatchResult,
    HandlerFailure,
    IncomingRequest,
    WebhookDispatcher,
)
from hubhook.errors import (
    BuilderConsumedError,
    MalformedPayloadError,
    SignatureVerificationError,
    WebhookConfigError,
)
from hubhook.events import Event
from hubhook.payload import WebhookDelivery
from hubhook.registry import HandlerRegistry, RegistryBuilder, WebhookHandler
from hubhook.signature import SignatureVerifier, WebhookSecret, sign, verify

__version__ = "0.1.0"


def new(secret: WebhookSecret | bytes | str) -> WebhookAppBuilder:
    """Return a :class:`WebhookAppBuilder` for deliveries signed with ``secret``.

    Call :meth:`~WebhookAppBuilder.on` to register handlers and
    :meth:`~WebhookAppBuilder.build` to obtain the Falcon ASGI app.
    """
    return WebhookAppBuilder(secret)


__all__ = [
    "BuilderConsumedError",
    "DispatchResult",
    "Event",
    "HandlerFailure",
    "HandlerRegistry",
    "IncomingRequest",
    "MalformedPayloadError",
    "RegistryBuilder",
    "SignatureVerificationError",
    "SignatureVerifier",
    "WebhookAppBuilder",
    "WebhookConfigError",
    "WebhookDelivery",
    "WebhookDispatcher",
    "WebhookHandler",
    "WebhookSecret",
    "__version__",
    "new",
    "sign",
    "verify",
]
