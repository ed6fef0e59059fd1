"""
priobus Events — Event Contracts
===================================
Routing is by the exact runtime type of the published value.

Event:
    Marker base for event classes. The dispatcher accepts any value,
    but handlers registered through validation or discovery must take
    a parameter annotated with an Event subclass.

Cancellable:
    Optional capability. Once an event is marked canceled, later
    handlers only run if they were registered with ignore_canceled.
    Cancellable events must be mutable (no frozen dataclasses).
"""

from __future__ import annotations


class Event:
    """Base class for typed events. Carries no state of its own."""

    __slots__ = ()


class Cancellable:
    """
    Mixin for events that can be canceled mid-dispatch.

    Works with plain classes and non-frozen dataclasses; the flag is a
    class-level default shadowed per instance on first write.
    """

    _canceled: bool = False

    def is_canceled(self) -> bool:
        """Whether a handler has marked this event canceled."""
        return self._canceled

    def set_canceled(self, canceled: bool = True) -> None:
        """Mark (or unmark) the event as canceled."""
        self._canceled = bool(canceled)
