"""
priobus Event Bus — Public API
=================================
Typed, priority-ordered, in-process publish/dispatch.
"""

from priobus.events.base import Cancellable, Event
from priobus.events.discovery import get_handler_references
from priobus.events.dispatcher import EventDispatcher
from priobus.events.errors import (
    EventBusError,
    HandlerNotFoundError,
    InstanceMismatchError,
    InvalidEventError,
    ListenerRegistrationError,
    NotAccessibleError,
    NotAHandlerError,
    SignatureMismatchError,
    StaticMismatchError,
)
from priobus.events.handler import (
    EventHandlerSpec,
    Handler,
    HandlerReference,
    event_handler,
    get_handler_spec,
)
from priobus.events.manager import EventManager, EventManagerProtocol
from priobus.events.priority import Priority
from priobus.events.registry import HandlerRegistry
from priobus.events.validation import ValidatedListener, validate_listener

__all__ = [
    "Event",
    "Cancellable",
    "Priority",
    "Handler",
    "HandlerReference",
    "EventHandlerSpec",
    "event_handler",
    "get_handler_spec",
    "HandlerRegistry",
    "EventDispatcher",
    "EventManager",
    "EventManagerProtocol",
    "get_handler_references",
    "validate_listener",
    "ValidatedListener",
    "EventBusError",
    "ListenerRegistrationError",
    "NotAHandlerError",
    "NotAccessibleError",
    "StaticMismatchError",
    "InstanceMismatchError",
    "SignatureMismatchError",
    "HandlerNotFoundError",
    "InvalidEventError",
]
