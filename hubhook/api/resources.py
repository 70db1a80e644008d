"""Falcon resources for webhook deliveries and liveness probes."""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from hubhook.dispatcher import IncomingRequest

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hubhook.dispatcher import WebhookDispatcher

__all__ = ["HealthResource", "WebhookResource"]


class WebhookResource:
    """Accept GitHub deliveries and hand them to a dispatcher.

    Parameters
    ----------
    dispatcher
        Dispatcher that verifies and routes each delivery.

    """

    def __init__(self, dispatcher: WebhookDispatcher) -> None:
        """Bind the resource to ``dispatcher``."""
        self._dispatcher = dispatcher

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST deliveries.

        The body is read as raw bytes because the signature covers the exact
        bytes GitHub sent. Rejections surface as
        :class:`~hubhook.errors.SignatureVerificationError`, which the app maps
        to HTTP 401.

        Parameters
        ----------
        req
            Falcon request carrying the delivery.
        resp
            Falcon response; set to 200 once every handler has run.

        """
        body = await req.stream.read()
        request = IncomingRequest(body=body, headers=dict(req.headers))
        result = await self._dispatcher.handle(request)
        resp.status = result.status
        resp.media = {"status": "accepted", "event": result.event.value}


class HealthResource:
    """Liveness probe returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK
