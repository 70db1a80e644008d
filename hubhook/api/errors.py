"""Falcon error handlers for webhook domain exceptions.

Usage
-----
Register the handlers on the Falcon app::

    from hubhook.api.errors import handle_signature_verification
    from hubhook.errors import SignatureVerificationError

    app.add_error_handler(
        SignatureVerificationError, handle_signature_verification
    )

"""

from __future__ import annotations

import typing as typ

import falcon

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hubhook.errors import SignatureVerificationError

__all__ = ["UNAUTHORIZED_MEDIA", "handle_signature_verification"]

# One body for every rejection so callers cannot tell the cases apart.
UNAUTHORIZED_MEDIA: typ.Final[dict[str, str]] = {
    "title": "Unauthorized",
    "description": "Webhook signature verification failed.",
}


async def handle_signature_verification(
    _req: Request,
    resp: Response,
    _ex: SignatureVerificationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``SignatureVerificationError`` to an HTTP 401 JSON response.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and media are set.
    _ex
        The rejection; its reason is deliberately not echoed.
    _params
        URI template parameters (unused).

    """
    resp.status = falcon.HTTP_401
    resp.media = dict(UNAUTHORIZED_MEDIA)
