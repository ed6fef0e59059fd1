"""
priobus Events — Handler Records
===================================
Immutable records describing registered and discoverable handlers.

Handler:
    Created only by the registry. Equality and hashing are by identity,
    so the object returned from registration is the exact key used for
    removal and for the failure mapping returned by publish().

HandlerReference:
    A discovered (receiver, callback) pair, not yet registered.

event_handler:
    Marker decorator. Attaches an EventHandlerSpec to the function;
    it does not wrap it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from priobus.events.priority import Priority

HANDLER_MARKER = "__event_handler__"


# ══════════════════════════════════════════════════════════════
# HANDLER MARKER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EventHandlerSpec:
    """Settings declared by @event_handler."""

    priority: Priority = Priority.NORMAL
    ignore_canceled: bool = False

    def __post_init__(self):
        if not isinstance(self.priority, Priority):
            if isinstance(self.priority, bool) or not isinstance(
                self.priority, (int, float)
            ):
                raise ValueError(
                    f"priority must be Priority or a number, "
                    f"got {type(self.priority).__name__}."
                )
            object.__setattr__(
                self, "priority", Priority.from_value(self.priority)
            )

        if not isinstance(self.ignore_canceled, bool):
            raise ValueError(
                f"ignore_canceled must be bool, "
                f"got {type(self.ignore_canceled).__name__}."
            )


def event_handler(
    func: Optional[Callable] = None,
    *,
    priority: Priority = Priority.NORMAL,
    ignore_canceled: bool = False,
):
    """
    Mark a function or method as an event handler.

    Usable bare or with arguments:

        @event_handler
        def on_ping(self, event: Ping) -> None: ...

        @event_handler(priority=Priority.FIRST, ignore_canceled=True)
        def audit(self, event: Ping) -> None: ...

    Stacking above or below @staticmethod and @classmethod both work;
    the marker is stored on the underlying function.
    """
    spec = EventHandlerSpec(priority=priority, ignore_canceled=ignore_canceled)

    def decorator(fn: Callable) -> Callable:
        if isinstance(fn, (staticmethod, classmethod)):
            setattr(fn.__func__, HANDLER_MARKER, spec)
        else:
            setattr(fn, HANDLER_MARKER, spec)
        return fn

    if func is not None:
        return decorator(func)
    return decorator


def get_handler_spec(func: Any) -> Optional[EventHandlerSpec]:
    """Return the marker attached by @event_handler, or None."""
    spec = getattr(func, HANDLER_MARKER, None)
    if isinstance(spec, EventHandlerSpec):
        return spec
    return None


# ══════════════════════════════════════════════════════════════
# REGISTERED HANDLER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True, eq=False)
class Handler:
    """
    A registered handler.

    Fields:
        receiver:        Instance passed as first argument, or None.
        callback:        The function to invoke.
        priority:        Resolved Priority.
        ignore_canceled: Run even when the event is already canceled.
        event_type:      Exact type this handler is bucketed under.
    """

    receiver: Any
    callback: Callable
    priority: Priority
    ignore_canceled: bool
    event_type: type

    @property
    def name(self) -> str:
        return getattr(self.callback, "__qualname__", repr(self.callback))

    def invoke(self, event: Any) -> Any:
        if self.receiver is None:
            return self.callback(event)
        return self.callback(self.receiver, event)

    def __repr__(self) -> str:
        return (
            f"Handler({self.name} → {self.event_type.__name__}, "
            f"priority={self.priority.name}, "
            f"ignore_canceled={self.ignore_canceled})"
        )


# ══════════════════════════════════════════════════════════════
# DISCOVERED REFERENCE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class HandlerReference:
    """A discovered handler candidate: receiver (or None) and callback."""

    receiver: Any
    callback: Callable
