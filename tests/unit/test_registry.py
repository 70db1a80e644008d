"""Unit tests for hubhook.registry."""

from __future__ import annotations

import functools

import pytest

from hubhook.errors import BuilderConsumedError
from hubhook.events import Event
from hubhook.registry import HandlerRegistry, RegistryBuilder, handler_name
from tests.helpers.deliveries import RecordingHandler


def _noop(_delivery: object) -> None:
    return None


class TestRegistryBuilder:
    """Tests for handler registration."""

    def test_on_is_chainable(self) -> None:
        """on() returns the builder itself."""
        builder = RegistryBuilder()
        assert builder.on(Event.PUSH, _noop) is builder

    def test_preserves_registration_order(self) -> None:
        """Handlers resolve in the order they were registered."""
        h1, h2, h3 = (RecordingHandler(name) for name in ("h1", "h2", "h3"))
        registry = (
            RegistryBuilder()
            .on(Event.ISSUE_COMMENT, h1)
            .on(Event.ISSUE_COMMENT, h2)
            .on(Event.ISSUE_COMMENT, h3)
            .build()
        )
        assert registry.resolve(Event.ISSUE_COMMENT) == (h1, h2, h3)

    def test_reregistration_appends(self) -> None:
        """Registering the same handler twice keeps both entries."""
        registry = RegistryBuilder().on("push", _noop).on(Event.PUSH, _noop).build()
        assert registry.resolve(Event.PUSH) == (_noop, _noop)

    def test_accepts_wire_names(self) -> None:
        """String event names are converted to members."""
        registry = RegistryBuilder().on("pull_request", _noop).build()
        assert registry.resolve(Event.PULL_REQUEST) == (_noop,)

    def test_rejects_unknown_event_names(self) -> None:
        """Typos in event names fail at registration."""
        with pytest.raises(ValueError, match="unsupported GitHub event"):
            RegistryBuilder().on("pushh", _noop)

    def test_rejects_non_callables(self) -> None:
        """Handlers must be callable."""
        with pytest.raises(TypeError, match="callable"):
            RegistryBuilder().on(Event.PUSH, "not a handler")  # type: ignore[arg-type]

    def test_on_after_build_raises(self) -> None:
        """A built builder cannot take more handlers."""
        builder = RegistryBuilder()
        builder.build()
        with pytest.raises(BuilderConsumedError):
            builder.on(Event.PUSH, _noop)

    def test_build_twice_raises(self) -> None:
        """A builder produces exactly one registry."""
        builder = RegistryBuilder()
        builder.build()
        with pytest.raises(BuilderConsumedError):
            builder.build()


class TestHandlerRegistry:
    """Tests for the frozen registry."""

    def test_unregistered_event_resolves_empty(self) -> None:
        """Absence of handlers is not an error."""
        registry = RegistryBuilder().on(Event.PUSH, _noop).build()
        assert registry.resolve(Event.ISSUES) == ()
        assert registry.resolve(Event.UNKNOWN) == ()

    def test_is_isolated_from_source_mapping(self) -> None:
        """Mutating the mapping used to build a registry has no effect."""
        source = {Event.PUSH: [_noop]}
        registry = HandlerRegistry(source)
        source[Event.PUSH].append(_noop)
        source[Event.PING] = [_noop]
        assert registry.resolve(Event.PUSH) == (_noop,)
        assert Event.PING not in registry

    def test_len_counts_handlers(self) -> None:
        """len() is the total number of handlers across events."""
        registry = (
            RegistryBuilder()
            .on(Event.PUSH, _noop)
            .on(Event.PUSH, _noop)
            .on(Event.PING, _noop)
            .build()
        )
        assert len(registry) == 3
        assert registry.events == frozenset({Event.PUSH, Event.PING})

    def test_repr_lists_counts(self) -> None:
        """The repr summarises handlers per event."""
        registry = RegistryBuilder().on(Event.PUSH, _noop).build()
        assert repr(registry) == "HandlerRegistry(push=1)"


class TestHandlerName:
    """Tests for handler_name()."""

    def test_function(self) -> None:
        """Functions use module and qualified name."""
        assert handler_name(_noop) == f"{__name__}._noop"

    def test_callable_instance(self) -> None:
        """Instances fall back to their class name."""
        assert handler_name(RecordingHandler()) == (
            "tests.helpers.deliveries.RecordingHandler"
        )

    def test_partial(self) -> None:
        """Objects without names use their type."""
        assert handler_name(functools.partial(_noop)) == "functools.partial"
