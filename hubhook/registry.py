"""Handler registration and the frozen routing table.

Registration happens once at start-up through :class:`RegistryBuilder`.
:meth:`RegistryBuilder.build` produces a :class:`HandlerRegistry` that is never
mutated again, so concurrent requests can read it without locking.

Usage
-----
::

    registry = (
        RegistryBuilder()
        .on(Event.ISSUE_COMMENT, audit_log)
        .on(Event.ISSUE_COMMENT, reply_to_comment)
        .on("push", trigger_build)
        .build()
    )
    registry.resolve(Event.ISSUE_COMMENT)  # (audit_log, reply_to_comment)

"""

from __future__ import annotations

import types
import typing as typ

from hubhook.errors import BuilderConsumedError
from hubhook.events import Event
from hubhook.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from hubhook.payload import WebhookDelivery

logger = get_logger(__name__)


@typ.runtime_checkable
class WebhookHandler(typ.Protocol):
    """Callable invoked with each delivery of the event it is registered for.

    Coroutine functions are awaited on the event loop; plain callables run in a
    worker thread, so they may block. Return values are ignored. Raised
    exceptions are recorded against the handler and do not stop the handlers
    registered after it.
    """

    def __call__(
        self, delivery: WebhookDelivery, /
    ) -> cabc.Awaitable[None] | None: ...


def handler_name(handler: object) -> str:
    """Return a readable name for ``handler`` for logs and failure records."""
    name = getattr(handler, "__qualname__", None) or getattr(
        handler, "__name__", None
    )
    if name is None:
        name = type(handler).__qualname__
    module = getattr(handler, "__module__", None)
    return f"{module}.{name}" if module else str(name)


class HandlerRegistry:
    """Read-only mapping from event kind to its handlers, in call order."""

    __slots__ = ("_handlers",)

    def __init__(
        self, handlers: cabc.Mapping[Event, cabc.Sequence[WebhookHandler]]
    ) -> None:
        """Freeze ``handlers``; later changes to the source have no effect."""
        self._handlers: types.MappingProxyType[
            Event, tuple[WebhookHandler, ...]
        ] = types.MappingProxyType(
            {event: tuple(chain) for event, chain in handlers.items() if chain}
        )

    def resolve(self, event: Event) -> tuple[WebhookHandler, ...]:
        """Return the handlers for ``event``; empty when none are registered."""
        return self._handlers.get(event, ())

    @property
    def events(self) -> frozenset[Event]:
        """Event kinds with at least one handler."""
        return frozenset(self._handlers)

    def __contains__(self, event: object) -> bool:
        """Return whether ``event`` has at least one handler."""
        return event in self._handlers

    def __len__(self) -> int:
        """Return the total number of registered handlers."""
        return sum(len(chain) for chain in self._handlers.values())

    def __repr__(self) -> str:
        """Summarise the registry by handler count per event."""
        counts = ", ".join(
            f"{event.value}={len(chain)}" for event, chain in self._handlers.items()
        )
        return f"HandlerRegistry({counts})"


class RegistryBuilder:
    """Mutable registration phase that :meth:`build` turns into a registry.

    A builder produces exactly one registry. Once :meth:`build` has run the
    builder drops its handler table, and any further :meth:`on` or
    :meth:`build` call raises :class:`~hubhook.errors.BuilderConsumedError`.

    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        """Start with no handlers."""
        self._handlers: dict[Event, list[WebhookHandler]] | None = {}

    def _table(self) -> dict[Event, list[WebhookHandler]]:
        if self._handlers is None:
            raise BuilderConsumedError
        return self._handlers

    def on(self, event: Event | str, handler: WebhookHandler) -> typ.Self:
        """Append ``handler`` to the handlers for ``event``.

        Parameters
        ----------
        event
            Event kind or its ``X-GitHub-Event`` wire name. Registering for
            :attr:`Event.UNKNOWN` catches every unrecognised event type.
        handler
            Sync or async callable taking a
            :class:`~hubhook.payload.WebhookDelivery`.

        Returns
        -------
        Self
            This builder, for chaining.

        Raises
        ------
        ValueError
            If ``event`` is a string naming no known event.
        TypeError
            If ``handler`` is not callable.
        BuilderConsumedError
            If :meth:`build` already ran.

        """
        table = self._table()
        kind = Event.parse(event)
        if not callable(handler):
            msg = f"webhook handler must be callable, got {type(handler).__name__}"
            raise TypeError(msg)
        table.setdefault(kind, []).append(handler)
        log_debug(
            logger,
            "Registered handler %s for event %s (position %d)",
            handler_name(handler),
            kind,
            len(table[kind]),
        )
        return self

    def build(self) -> HandlerRegistry:
        """Freeze the registered handlers and consume this builder."""
        table = self._table()
        self._handlers = None
        return HandlerRegistry(table)


__all__ = ["HandlerRegistry", "RegistryBuilder", "WebhookHandler", "handler_name"]
