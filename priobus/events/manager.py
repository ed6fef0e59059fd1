"""
priobus Events — Event Manager
=================================
Front door of the bus: validation, registry, and dispatcher behind
one object, configured once at construction.

Flow:
    register_listener(receiver, callback)
        → validate_listener → HandlerRegistry.register → Handler
    register_listeners(owner)
        → get_handler_references → register_listener (each)
    publish(event)
        → EventDispatcher.publish → {handler: exception}

Ordering is decided at registration, never re-sorted at publish.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Protocol

from priobus.config import BusConfig
from priobus.events.discovery import get_handler_references
from priobus.events.dispatcher import EventDispatcher
from priobus.events.errors import HandlerNotFoundError
from priobus.events.handler import Handler
from priobus.events.priority import Priority
from priobus.events.registry import HandlerRegistry
from priobus.events.validation import validate_listener

logger = logging.getLogger("priobus.events")


# ══════════════════════════════════════════════════════════════
# EVENT MANAGER PROTOCOL
# ══════════════════════════════════════════════════════════════

class EventManagerProtocol(Protocol):
    """Minimal surface every event manager offers."""

    def register_listener(self, receiver: Any, callback: Callable) -> Handler:
        """Validate and register one marked callable."""
        ...  # pragma: no cover

    def unregister_listener(self, handler: Handler) -> None:
        """Remove a handler returned by register_listener."""
        ...  # pragma: no cover

    def publish(self, event: Any) -> dict[Handler, Exception]:
        """Dispatch an event; return failures per handler."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# EVENT MANAGER
# ══════════════════════════════════════════════════════════════

class EventManager:
    """
    In-process typed event bus.

    Usage:
        bus = EventManager(BusConfig(stop_on_first_failure=False))

        handlers = bus.register_listeners(PingListener())
        bus.subscribe(Ping, audit_ping, priority=Priority.LAST)

        failures = bus.publish(Ping(expected=1))
        # failures == {} when every handler succeeded
    """

    def __init__(
        self,
        config: Optional[BusConfig] = None,
        registry: Optional[HandlerRegistry] = None,
    ):
        self._config = config or BusConfig()
        self._registry = registry if registry is not None else HandlerRegistry()
        self._dispatcher = EventDispatcher(self._registry, self._config)

    @property
    def config(self) -> BusConfig:
        return self._config

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    # ── Registration ──────────────────────────────────────────

    def register_listener(self, receiver: Any, callback: Callable) -> Handler:
        """
        Register a callable marked with @event_handler.

        Use None as the receiver for static handlers and bound methods.

        Raises:
            NotAHandlerError, NotAccessibleError, StaticMismatchError,
            InstanceMismatchError, SignatureMismatchError
        """
        listener = validate_listener(receiver, callback)
        return self._registry.register(
            listener.receiver,
            listener.callback,
            listener.spec.priority,
            listener.spec.ignore_canceled,
            listener.event_type,
        )

    def register_listeners(self, owner: Any) -> list[Handler]:
        """Discover and register every handler declared on `owner`."""
        return [
            self.register_listener(reference.receiver, reference.callback)
            for reference in get_handler_references(owner)
        ]

    def subscribe(
        self,
        event_type: type,
        callback: Callable,
        *,
        priority: Priority = Priority.NORMAL,
        ignore_canceled: bool = False,
    ) -> Handler:
        """
        Register a plain callable for an explicit event type.

        No marker or annotation is required; the callable is invoked
        with the event as its only argument.
        """
        return self._registry.register(
            None, callback, priority, ignore_canceled, event_type
        )

    def unregister_listener(self, handler: Handler) -> None:
        """
        Remove a registered handler.

        Raises:
            HandlerNotFoundError: handler absent and strict_unregister is set
        """
        if self._registry.unregister(handler):
            return

        if self._config.strict_unregister:
            raise HandlerNotFoundError(handler)
        logger.debug(f"Unregister ignored, not registered: {handler!r}")

    def unregister_listeners(self, handlers: Iterable[Handler]) -> None:
        for handler in handlers:
            self.unregister_listener(handler)

    # ── Dispatch ──────────────────────────────────────────────

    def publish(self, event: Any) -> dict[Handler, Exception]:
        """Dispatch `event`; see EventDispatcher.publish."""
        return self._dispatcher.publish(event)

    call = publish

    # ── Introspection ─────────────────────────────────────────

    def list_event_types(self) -> frozenset[type]:
        return self._registry.list_event_types()

    get_listeners = list_event_types

    def get_handlers(self, event_type: type) -> tuple[Handler, ...]:
        return self._registry.get_handlers(event_type)
