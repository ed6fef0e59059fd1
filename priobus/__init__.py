"""
priobus — Typed Priority Event Bus
=====================================
Handlers are registered per exact event type and run in priority
order on the publisher's thread.

    from priobus import EventManager, Event, Priority, event_handler
"""

from priobus.config import BusConfig
from priobus.events import (
    Cancellable,
    Event,
    EventBusError,
    EventManager,
    Handler,
    HandlerNotFoundError,
    InvalidEventError,
    ListenerRegistrationError,
    Priority,
    event_handler,
)

__version__ = "1.0.0"

__all__ = [
    "BusConfig",
    "Cancellable",
    "Event",
    "EventBusError",
    "EventManager",
    "Handler",
    "HandlerNotFoundError",
    "InvalidEventError",
    "ListenerRegistrationError",
    "Priority",
    "event_handler",
]
