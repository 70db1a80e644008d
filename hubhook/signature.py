"""HMAC-SHA256 verification of GitHub webhook signatures.

GitHub signs every delivery with the webhook secret and sends the result in
the ``X-Hub-Signature-256`` header as ``sha256=<hex digest>``. The digest is
computed over the raw request body, so verification must run before the body
is parsed or re-encoded.

Examples
--------
>>> token = sign(b"s3cr3t", b'{"action":"created"}')
>>> verify(b"s3cr3t", b'{"action":"created"}', token)
True
>>> verify(b"other", b'{"action":"created"}', token)
False

"""

from __future__ import annotations

import hashlib
import hmac

from hubhook.errors import WebhookConfigError

SIGNATURE_HEADER = "x-hub-signature-256"
SIGNATURE_PREFIX = "sha256="


class WebhookSecret:
    """Shared webhook secret.

    The raw bytes are only reachable through :meth:`reveal`, which the
    verifier calls while computing a digest. ``repr`` and ``str`` are masked
    so the secret cannot leak through logs or tracebacks.

    """

    __slots__ = ("_value",)

    def __init__(self, value: bytes | str) -> None:
        """Store ``value``; strings are UTF-8 encoded."""
        raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)
        if not raw:
            raise WebhookConfigError.empty_secret()
        object.__setattr__(self, "_value", raw)

    def __setattr__(self, name: str, value: object) -> None:
        """Reject mutation after construction."""
        msg = "WebhookSecret is immutable"
        raise AttributeError(msg)

    def reveal(self) -> bytes:
        """Return the secret bytes."""
        return self._value

    def __repr__(self) -> str:
        """Return a masked representation."""
        return "WebhookSecret('**********')"

    __str__ = __repr__


def _as_secret(secret: WebhookSecret | bytes | str) -> WebhookSecret:
    if isinstance(secret, WebhookSecret):
        return secret
    return WebhookSecret(secret)


def sign(secret: WebhookSecret | bytes | str, body: bytes) -> str:
    """Return the ``sha256=<hex>`` token GitHub would send for ``body``."""
    key = _as_secret(secret).reveal()
    digest = hmac.new(key, body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def _normalize_token(received: object) -> bytes:
    """Lower-case the hex part of a received token and encode it to bytes.

    Anything that is not a string, including ``None``, becomes ``b""`` so it
    still flows through the constant-time comparison.
    """
    if not isinstance(received, str):
        return b""
    if received.startswith(SIGNATURE_PREFIX):
        received = SIGNATURE_PREFIX + received[len(SIGNATURE_PREFIX) :].lower()
    return received.encode("utf-8", errors="replace")


def verify(
    secret: WebhookSecret | bytes | str,
    body: bytes,
    received_signature: str | None,
) -> bool:
    """Return whether ``received_signature`` authenticates ``body``.

    Every input takes the same path: one HMAC over the body and one
    :func:`hmac.compare_digest` call. Missing, malformed, truncated and
    mismatched signatures all yield ``False``; the function never raises
    for bad signature input.

    Parameters
    ----------
    secret
        Shared webhook secret.
    body
        Raw request body exactly as received.
    received_signature
        Value of the ``X-Hub-Signature-256`` header, or ``None`` if absent.

    Returns
    -------
    bool
        ``True`` only when the signature matches.

    """
    expected = sign(secret, body).encode("ascii")
    return hmac.compare_digest(expected, _normalize_token(received_signature))


class SignatureVerifier:
    """Verifier bound to one secret for the lifetime of a dispatcher."""

    __slots__ = ("_secret",)

    def __init__(self, secret: WebhookSecret | bytes | str) -> None:
        """Bind the verifier to ``secret``."""
        self._secret = _as_secret(secret)

    def verify(self, body: bytes, received_signature: str | None) -> bool:
        """Return whether ``received_signature`` authenticates ``body``."""
        return verify(self._secret, body, received_signature)

    def __repr__(self) -> str:
        """Return a representation that keeps the secret masked."""
        return f"SignatureVerifier({self._secret!r})"


__all__ = [
    "SIGNATURE_HEADER",
    "SIGNATURE_PREFIX",
    "SignatureVerifier",
    "WebhookSecret",
    "sign",
    "verify",
]
