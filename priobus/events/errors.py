"""
priobus Events — Errors
==========================
Error types for registration, removal, and publish.

Registration errors abort that one registration and never leave
partial registry state. Handler failures during publish are NOT
raised; they are returned in the failure mapping.
"""

from typing import Any


def _callable_name(callback: Any) -> str:
    return getattr(callback, "__qualname__", repr(callback))


class EventBusError(Exception):
    """Base error for event bus operations."""
    pass


# ══════════════════════════════════════════════════════════════
# REGISTRATION
# ══════════════════════════════════════════════════════════════

class ListenerRegistrationError(EventBusError):
    """Base error for a rejected listener registration."""

    def __init__(self, callback: Any, message: str):
        self.callback = callback
        super().__init__(message)


class NotAHandlerError(ListenerRegistrationError):
    """Callable was not marked with @event_handler."""

    def __init__(self, callback: Any):
        super().__init__(
            callback,
            f"Callable '{_callable_name(callback)}' is not an event handler.",
        )


class NotAccessibleError(ListenerRegistrationError):
    """Callable is private to its declaring scope."""

    def __init__(self, callback: Any):
        super().__init__(
            callback,
            f"Callable '{_callable_name(callback)}' is not public.",
        )


class StaticMismatchError(ListenerRegistrationError):
    """Receiver supplied for a callable that takes none."""

    def __init__(self, receiver: Any, callback: Any):
        self.receiver = receiver
        super().__init__(
            callback,
            f"Callable '{_callable_name(callback)}' was registered with "
            f"an instance of {type(receiver).__name__}, but it does not "
            f"take a receiver. Use None for the receiver.",
        )


class InstanceMismatchError(ListenerRegistrationError):
    """Receiver missing, or not an instance of the declaring class."""

    def __init__(self, receiver: Any, callback: Any):
        self.receiver = receiver
        provided = (
            "Receiver was None."
            if receiver is None
            else f"{type(receiver).__name__} was provided instead."
        )
        super().__init__(
            callback,
            f"Callable '{_callable_name(callback)}' requires an instance "
            f"of its declaring class. {provided}",
        )


class SignatureMismatchError(ListenerRegistrationError):
    """Callable does not take exactly one Event-typed parameter."""

    def __init__(self, callback: Any, detail: str = ""):
        message = (
            f"Callable '{_callable_name(callback)}' does not take exactly "
            f"one parameter annotated with an Event type."
        )
        if detail:
            message = f"{message} ({detail})"
        super().__init__(callback, message)


# ══════════════════════════════════════════════════════════════
# REMOVAL / PUBLISH
# ══════════════════════════════════════════════════════════════

class HandlerNotFoundError(EventBusError):
    """Handler is not registered (strict unregister only)."""

    def __init__(self, handler: Any):
        self.handler = handler
        super().__init__(f"Handler {handler!r} is not registered.")


class InvalidEventError(EventBusError):
    """publish() called without a usable event instance."""

    def __init__(self, event: Any):
        self.event = event
        if event is None:
            reason = "event is None"
        else:
            reason = f"got class {event.__name__}, expected an instance"
        super().__init__(f"Cannot publish: {reason}.")
