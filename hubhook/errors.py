"""Exceptions raised by the webhook core."""

from __future__ import annotations

import enum


class WebhookConfigError(RuntimeError):
    """Raised when webhook configuration is missing or invalid."""

    @classmethod
    def missing_secret(cls) -> WebhookConfigError:
        """Return an error when no webhook secret is configured."""
        return cls("HUBHOOK_WEBHOOK_SECRET is required to verify deliveries")

    @classmethod
    def empty_secret(cls) -> WebhookConfigError:
        """Return an error when the provided secret is empty."""
        return cls("Webhook secret must be non-empty")

    @classmethod
    def invalid_path(cls, path: str) -> WebhookConfigError:
        """Return an error for a webhook route that is not absolute."""
        return cls(f"Webhook path must start with '/', got: {path!r}")

    @classmethod
    def invalid_port(cls, raw: str) -> WebhookConfigError:
        """Return an error for a listen port outside 1-65535."""
        return cls(f"HUBHOOK_PORT must be an integer in 1-65535, got: {raw!r}")

    @classmethod
    def invalid_handlers_target(cls, target: str) -> WebhookConfigError:
        """Return an error for a handler target not in ``module:attr`` form."""
        return cls(
            "HUBHOOK_HANDLERS must look like 'package.module:callable', "
            f"got: {target!r}"
        )


class BuilderConsumedError(RuntimeError):
    """Raised when a builder is used after ``build()`` froze it."""

    def __init__(self) -> None:
        """Initialise with a fixed message."""
        super().__init__("builder was already consumed by build()")


class RejectionReason(enum.StrEnum):
    """Why a delivery failed authentication; for logs only."""

    MISSING = "missing"
    INVALID = "invalid"


class SignatureVerificationError(Exception):
    """Raised when a delivery fails signature verification.

    The ``reason`` is meant for server-side logs. HTTP responses must not
    reveal it.

    Attributes
    ----------
    reason
        Whether the signature header was absent or did not match.

    """

    def __init__(self, reason: RejectionReason) -> None:
        """Initialise with the rejection reason."""
        self.reason = reason
        super().__init__(f"webhook signature {reason}")

    @classmethod
    def missing(cls) -> SignatureVerificationError:
        """Return an error for a delivery without a signature header."""
        return cls(RejectionReason.MISSING)

    @classmethod
    def invalid(cls) -> SignatureVerificationError:
        """Return an error for a signature that does not verify."""
        return cls(RejectionReason.INVALID)


class MalformedPayloadError(ValueError):
    """Raised when a delivery body cannot be decoded into the requested shape."""

    def __init__(self, message: str, *, target: str | None = None) -> None:
        """Initialise with a message and the name of the requested shape."""
        self.target = target
        super().__init__(message)

    @classmethod
    def undecodable(cls, detail: object) -> MalformedPayloadError:
        """Return an error for a body that is not valid JSON."""
        return cls(f"webhook body is not valid JSON: {detail}")

    @classmethod
    def schema_mismatch(cls, target: str, detail: object) -> MalformedPayloadError:
        """Return an error for a body that does not match ``target``."""
        return cls(f"webhook body does not match {target}: {detail}", target=target)


__all__ = [
    "BuilderConsumedError",
    "MalformedPayloadError",
    "RejectionReason",
    "SignatureVerificationError",
    "WebhookConfigError",
]
