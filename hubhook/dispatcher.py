"""Verify inbound deliveries and run the handlers registered for them.

:class:`WebhookDispatcher` is framework-agnostic: the host adapter turns its
HTTP request into an :class:`IncomingRequest`, awaits
:meth:`WebhookDispatcher.handle` and maps the outcome onto a response.

The pipeline fails closed. A delivery with a missing or wrong signature
raises :class:`~hubhook.errors.SignatureVerificationError` before the event
header is read or the registry is consulted. Verified deliveries always
succeed from the sender's point of view: handler errors are recorded and
logged, never surfaced in the response.
"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import inspect
import types
import typing as typ
from http import HTTPStatus

from hubhook.errors import SignatureVerificationError
from hubhook.events import DELIVERY_HEADER, EVENT_HEADER, Event
from hubhook.observability import (
    ErrorCategory,
    WebhookEventLogger,
    categorize_error,
)
from hubhook.payload import WebhookDelivery
from hubhook.registry import handler_name
from hubhook.signature import SIGNATURE_HEADER

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from hubhook.registry import HandlerRegistry, WebhookHandler
    from hubhook.signature import SignatureVerifier

__all__ = [
    "DispatchResult",
    "HandlerFailure",
    "IncomingRequest",
    "WebhookDispatcher",
]


def _is_coroutine_handler(handler: object) -> bool:
    """Return whether calling ``handler`` produces a coroutine."""
    return inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
        getattr(type(handler), "__call__", None)
    )


@dc.dataclass(frozen=True, slots=True)
class IncomingRequest:
    """Raw body and headers of one inbound webhook request.

    Header names are lower-cased on construction so lookups are
    case-insensitive, matching HTTP semantics.

    """

    body: bytes
    headers: cabc.Mapping[str, str] = dc.field(default_factory=dict)

    def __post_init__(self) -> None:
        """Normalise header names to lower case."""
        normalized = {name.lower(): value for name, value in self.headers.items()}
        object.__setattr__(self, "headers", types.MappingProxyType(normalized))

    def header(self, name: str) -> str | None:
        """Return header ``name`` or ``None`` when absent."""
        return self.headers.get(name.lower())

    @property
    def signature(self) -> str | None:
        """``X-Hub-Signature-256`` value."""
        return self.header(SIGNATURE_HEADER)

    @property
    def event_name(self) -> str | None:
        """``X-GitHub-Event`` value."""
        return self.header(EVENT_HEADER)

    @property
    def delivery_id(self) -> str | None:
        """``X-GitHub-Delivery`` value."""
        return self.header(DELIVERY_HEADER)


@dc.dataclass(frozen=True, slots=True)
class HandlerFailure:
    """A handler that raised while processing a delivery."""

    handler: str
    error: Exception
    category: ErrorCategory


@dc.dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcome of dispatching one verified delivery.

    Attributes
    ----------
    event
        Resolved event kind.
    delivery_id
        ``X-GitHub-Delivery`` value, if sent.
    handlers_invoked
        Number of handlers called, including those that failed.
    failures
        Failures in invocation order.

    """

    event: Event
    delivery_id: str | None
    handlers_invoked: int = 0
    failures: tuple[HandlerFailure, ...] = ()

    @property
    def status(self) -> HTTPStatus:
        """Status for the webhook sender; acceptance regardless of failures."""
        return HTTPStatus.OK

    @property
    def succeeded(self) -> bool:
        """Whether every handler completed without raising."""
        return not self.failures


class WebhookDispatcher:
    """Authenticate deliveries and route them to registered handlers.

    Parameters
    ----------
    verifier
        Signature verifier bound to the webhook secret.
    registry
        Frozen handler registry.
    event_logger
        Structured event logger; a default instance is created when omitted.

    """

    def __init__(
        self,
        verifier: SignatureVerifier,
        registry: HandlerRegistry,
        *,
        event_logger: WebhookEventLogger | None = None,
    ) -> None:
        """Bind the dispatcher to its verifier and registry."""
        self._verifier = verifier
        self._registry = registry
        self._event_logger = event_logger or WebhookEventLogger()

    @property
    def registry(self) -> HandlerRegistry:
        """The registry deliveries are routed through."""
        return self._registry

    def _authenticate(self, request: IncomingRequest) -> None:
        signature = request.signature
        if signature is None:
            error = SignatureVerificationError.missing()
        elif not self._verifier.verify(request.body, signature):
            error = SignatureVerificationError.invalid()
        else:
            return
        self._event_logger.log_delivery_rejected(
            error.reason, request.delivery_id, request.event_name
        )
        raise error

    async def handle(self, request: IncomingRequest) -> DispatchResult:
        """Verify ``request`` and run every handler registered for its event.

        Handlers run one at a time in registration order. Coroutine handlers
        are awaited on the event loop; plain callables run in a worker thread
        via :func:`asyncio.to_thread` so blocking work does not stall other
        requests. An ``Exception`` raised by one handler is recorded and the
        next handler still runs. Cancellation propagates and abandons the
        remaining handlers.

        Parameters
        ----------
        request
            Raw request body and headers.

        Returns
        -------
        DispatchResult
            Invocation count and per-handler failures.

        Raises
        ------
        SignatureVerificationError
            If the signature header is missing or does not match the body.

        """
        self._authenticate(request)

        event_name = request.event_name
        event = Event.from_header(event_name)
        if event is Event.UNKNOWN:
            self._event_logger.log_unknown_event(event_name, request.delivery_id)

        handlers = self._registry.resolve(event)
        delivery = WebhookDelivery(
            event=event,
            event_name=event_name,
            delivery_id=request.delivery_id,
            body=request.body,
            headers=request.headers,
        )

        failures: list[HandlerFailure] = []
        for handler in handlers:
            failure = await self._invoke(handler, delivery)
            if failure is not None:
                failures.append(failure)

        result = DispatchResult(
            event=event,
            delivery_id=request.delivery_id,
            handlers_invoked=len(handlers),
            failures=tuple(failures),
        )
        self._event_logger.log_delivery_dispatched(
            event, request.delivery_id, result.handlers_invoked, len(failures)
        )
        return result

    async def _invoke(
        self, handler: WebhookHandler, delivery: WebhookDelivery
    ) -> HandlerFailure | None:
        name = handler_name(handler)
        try:
            if _is_coroutine_handler(handler):
                await handler(delivery)  # type: ignore[misc]
            else:
                outcome = await asyncio.to_thread(handler, delivery)
                if inspect.isawaitable(outcome):
                    await outcome
        except Exception as exc:  # noqa: BLE001 - handler failures are isolated
            self._event_logger.log_handler_failed(
                delivery.event, delivery.delivery_id, name, exc
            )
            return HandlerFailure(
                handler=name, error=exc, category=categorize_error(exc)
            )
        self._event_logger.log_handler_completed(
            delivery.event, delivery.delivery_id, name
        )
        return None
