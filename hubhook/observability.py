"""Structured log events for webhook deliveries.

Every line starts with a bracketed event type followed by ``key=value``
pairs so log aggregators can parse them. Signature values and secret
material are never included.
"""

from __future__ import annotations

import enum
import typing as typ

from hubhook.errors import MalformedPayloadError
from hubhook.logging import get_logger, log_debug, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    from hubhook.errors import RejectionReason
    from hubhook.events import Event

logger = get_logger(__name__)


class WebhookEventType(enum.StrEnum):
    """Structured log event types for webhook dispatch."""

    DELIVERY_REJECTED = "webhook.delivery.rejected"
    DELIVERY_DISPATCHED = "webhook.delivery.dispatched"
    EVENT_UNKNOWN = "webhook.event.unknown"
    HANDLER_COMPLETED = "webhook.handler.completed"
    HANDLER_FAILED = "webhook.handler.failed"


class ErrorCategory(enum.StrEnum):
    """Categories for handler failures."""

    MALFORMED_PAYLOAD = "malformed_payload"
    HANDLER_ERROR = "handler_error"


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Classify a handler failure for alert routing."""
    if isinstance(exc, MalformedPayloadError):
        return ErrorCategory.MALFORMED_PAYLOAD
    return ErrorCategory.HANDLER_ERROR


class WebhookEventLogger:
    """Emit structured dispatch events through femtologging.

    Rejections and unknown event types are logged at WARNING, handler
    failures at ERROR and completed dispatches at INFO.
    """

    def log_delivery_rejected(
        self,
        reason: RejectionReason,
        delivery_id: str | None,
        event_name: str | None,
    ) -> None:
        """Log a delivery that failed authentication."""
        log_warning(
            logger,
            "[%s] reason=%s delivery_id=%s event_name=%s",
            WebhookEventType.DELIVERY_REJECTED,
            reason,
            delivery_id,
            event_name,
        )

    def log_unknown_event(
        self, event_name: str | None, delivery_id: str | None
    ) -> None:
        """Log a verified delivery whose event type is not recognised."""
        log_warning(
            logger,
            "[%s] event_name=%s delivery_id=%s",
            WebhookEventType.EVENT_UNKNOWN,
            event_name,
            delivery_id,
        )

    def log_handler_completed(
        self, event: Event, delivery_id: str | None, handler: str
    ) -> None:
        """Log one handler finishing without error."""
        log_debug(
            logger,
            "[%s] event=%s delivery_id=%s handler=%s",
            WebhookEventType.HANDLER_COMPLETED,
            event,
            delivery_id,
            handler,
        )

    def log_handler_failed(
        self,
        event: Event,
        delivery_id: str | None,
        handler: str,
        error: BaseException,
    ) -> None:
        """Log a handler failure with its category."""
        log_error(
            logger,
            "[%s] event=%s delivery_id=%s handler=%s error_type=%s "
            "error_category=%s error_message=%s",
            WebhookEventType.HANDLER_FAILED,
            event,
            delivery_id,
            handler,
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )

    def log_delivery_dispatched(
        self,
        event: Event,
        delivery_id: str | None,
        handlers_invoked: int,
        failures: int,
    ) -> None:
        """Log a delivery after all of its handlers ran."""
        log_info(
            logger,
            "[%s] event=%s delivery_id=%s handlers_invoked=%d failures=%d",
            WebhookEventType.DELIVERY_DISPATCHED,
            event,
            delivery_id,
            handlers_invoked,
            failures,
        )


__all__ = [
    "ErrorCategory",
    "WebhookEventLogger",
    "WebhookEventType",
    "categorize_error",
]
