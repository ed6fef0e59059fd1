"""
priobus Event Manager — End-to-End Tests
===========================================
Register through validation and discovery, publish, unregister.

Scenarios:
1. Listener object with handlers for two event types
2. FIRST-priority handler runs before the NORMAL assertion handler
3. Repeated publishes never cross-invoke other event types
4. Unregister leaves the other event type registered
5. Registration errors leave no partial state
6. Strict vs. lenient unregister
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest

from priobus import BusConfig, EventManager
from priobus.events import (
    Cancellable,
    Event,
    EventManagerProtocol,
    HandlerNotFoundError,
    InvalidEventError,
    NotAHandlerError,
    Priority,
    SignatureMismatchError,
    event_handler,
)
from priobus.events.handler import Handler


@dataclass
class Increment(Event):
    value: int


@dataclass
class Decrement(Event):
    value: int


@dataclass
class Ping(Event):
    expected: int


@dataclass
class Withdrawal(Cancellable, Event):
    amount: int


class CounterListener:
    """Each FIRST handler adjusts the counter before the check runs."""

    def __init__(self):
        self.i = 0

    @event_handler
    def check_increment(self, event: Increment) -> None:
        assert self.i == event.value

    @event_handler(priority=Priority.FIRST)
    def increment(self, event: Increment) -> None:
        self.i += 1

    @event_handler
    def check_decrement(self, event: Decrement) -> None:
        assert self.i == event.value

    @event_handler(priority=Priority.FIRST)
    def decrement(self, event: Decrement) -> None:
        self.i -= 1


class LimitGuard:
    def __init__(self, limit):
        self.limit = limit
        self.audited = []
        self.paid = []

    @event_handler(priority=Priority.HIGHEST)
    def enforce_limit(self, event: Withdrawal) -> None:
        if event.amount > self.limit:
            event.set_canceled(True)

    @event_handler(priority=Priority.LAST, ignore_canceled=True)
    def audit(self, event: Withdrawal) -> None:
        self.audited.append((event.amount, event.is_canceled()))

    @event_handler
    def pay(self, event: Withdrawal) -> None:
        self.paid.append(event.amount)


if TYPE_CHECKING:
    from priobus.events.handler import HandlerReference as Receipt


@dataclass
class Paid(Event):
    amount: int


class BillingListener:
    """Return annotation only exists for type checkers."""

    def __init__(self):
        self.paid = []

    @event_handler
    def on_paid(self, event: Paid) -> Receipt:
        self.paid.append(event.amount)

    @event_handler(priority=Priority.FIRST)
    @staticmethod
    def validate(event: Paid) -> Receipt:
        assert event.amount > 0


@pytest.fixture
def bus():
    return EventManager()


# ── Listener lifecycle ───────────────────────────────────────

class TestListenerLifecycle:
    def test_register_listeners(self, bus):
        handlers = bus.register_listeners(CounterListener())
        assert len(handlers) == 4
        assert bus.get_listeners() == frozenset({Increment, Decrement})

    def test_every_listener_type_has_handlers(self, bus):
        bus.register_listeners(CounterListener())
        for event_type in bus.get_listeners():
            assert bus.get_handlers(event_type)

    def test_unregister_leaves_other_type(self, bus):
        listener = CounterListener()
        handlers = bus.register_listeners(listener)
        for handler in handlers:
            if handler.event_type is Increment:
                bus.unregister_listener(handler)

        assert bus.list_event_types() == frozenset({Decrement})

    def test_unregister_listeners(self, bus):
        handlers = bus.register_listeners(CounterListener())
        bus.unregister_listeners(handlers)
        assert bus.list_event_types() == frozenset()

    def test_order_within_type(self, bus):
        bus.register_listeners(CounterListener())
        names = [h.callback.__name__ for h in bus.get_handlers(Increment)]
        assert names == ["increment", "check_increment"]


# ── Publishing ───────────────────────────────────────────────

class TestPublish:
    def test_counter_scenario(self, bus):
        bus.register_listeners(CounterListener())
        assert bus.call(Increment(1)) == {}
        # a second publish proves Decrement handlers were not invoked
        assert bus.call(Increment(2)) == {}
        assert bus.call(Decrement(1)) == {}
        assert bus.call(Decrement(0)) == {}

    def test_ping_end_to_end(self, bus):
        counter = {"value": 0}

        def p(event):
            counter["value"] += 1

        def q(event):
            assert counter["value"] == event.expected

        bus.subscribe(Ping, q, priority=Priority.NORMAL)
        bus.subscribe(Ping, p, priority=Priority.FIRST)

        assert bus.publish(Ping(expected=1)) == {}
        assert counter["value"] == 1

    def test_failed_assertion_reported(self, bus):
        listener = CounterListener()
        bus.register_listeners(listener)

        failures = bus.publish(Increment(5))
        assert len(failures) == 1
        (handler, error), = failures.items()
        assert handler.callback is CounterListener.check_increment
        assert isinstance(error, AssertionError)

    def test_cancellation_with_listener(self, bus):
        guard = LimitGuard(limit=100)
        bus.register_listeners(guard)

        bus.publish(Withdrawal(amount=50))
        bus.publish(Withdrawal(amount=500))

        assert guard.paid == [50]
        assert guard.audited == [(50, False), (500, True)]

    def test_stop_on_first_failure(self):
        bus = EventManager(BusConfig(stop_on_first_failure=True))
        calls = []

        def broken(event):
            calls.append("broken")
            raise RuntimeError("nope")

        bus.subscribe(Ping, broken, priority=Priority.HIGH)
        bus.subscribe(Ping, lambda event: calls.append("after"))

        failures = bus.publish(Ping(expected=0))
        assert calls == ["broken"]
        assert len(failures) == 1

    def test_publish_none(self, bus):
        with pytest.raises(InvalidEventError):
            bus.publish(None)


# ── Registration errors ──────────────────────────────────────

class TestRegistrationErrors:
    def test_unmarked_rejected_without_partial_state(self, bus):
        def plain(event: Ping) -> None:
            pass

        with pytest.raises(NotAHandlerError):
            bus.register_listener(None, plain)
        assert bus.list_event_types() == frozenset()

    def test_bad_signature_rejected(self, bus):
        @event_handler
        def greedy(event: Ping, extra: Ping) -> None:
            pass

        with pytest.raises(SignatureMismatchError):
            bus.register_listener(None, greedy)
        assert bus.get_handlers(Ping) == ()

    def test_register_bound_method(self, bus):
        listener = CounterListener()
        handler = bus.register_listener(None, listener.increment)
        assert handler.receiver is listener
        assert handler.priority is Priority.FIRST


# ── Unregister policy ────────────────────────────────────────

class TestUnregisterPolicy:
    def _stranger(self):
        return Handler(None, print, Priority.NORMAL, False, Ping)

    def test_lenient_by_default(self, bus):
        bus.unregister_listener(self._stranger())

    def test_strict_raises(self):
        bus = EventManager(BusConfig(strict_unregister=True))
        with pytest.raises(HandlerNotFoundError):
            bus.unregister_listener(self._stranger())

    def test_strict_double_unregister(self):
        bus = EventManager(BusConfig(strict_unregister=True))
        handler = bus.subscribe(Ping, print)
        bus.unregister_listener(handler)
        with pytest.raises(HandlerNotFoundError):
            bus.unregister_listener(handler)


class TestProtocol:
    def test_manager_satisfies_protocol(self):
        manager: EventManagerProtocol = EventManager()
        assert callable(manager.register_listener)
        assert callable(manager.unregister_listener)
        assert callable(manager.publish)


class TestTypeCheckingAnnotations:
    def test_register_listener(self, bus):
        listener = BillingListener()
        handler = bus.register_listener(listener, BillingListener.on_paid)
        assert handler.event_type is Paid

        assert bus.publish(Paid(amount=7)) == {}
        assert listener.paid == [7]

    def test_register_listeners(self, bus):
        listener = BillingListener()
        handlers = bus.register_listeners(listener)

        names = [h.callback.__name__ for h in handlers]
        assert sorted(names) == ["on_paid", "validate"]
        assert [h.callback.__name__ for h in bus.get_handlers(Paid)] == [
            "validate", "on_paid",
        ]

        failures = bus.publish(Paid(amount=0))
        assert len(failures) == 1
        assert listener.paid == [0]
