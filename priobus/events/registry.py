"""
priobus Events — Handler Registry
====================================
Controls which handlers receive which events, and in what order.

Rules:
- Buckets are keyed by exact event type (no subtype matching)
- Each bucket is sorted non-increasing by priority
- Equal priorities keep registration order (FIFO)
- LAST handlers are always appended
- A bucket emptied by removal is deleted
- In-memory only
- Thread-safe; reads return snapshots

Ordering: scan from the front and insert before the first handler
with strictly lower priority. Never inserting before an equal
priority keeps ties in registration order.
"""

import logging
from threading import RLock
from typing import Any, Callable, Optional

from priobus.events.handler import Handler
from priobus.events.priority import Priority

logger = logging.getLogger("priobus.events")


class HandlerRegistry:
    """
    In-memory registry of event handlers.

    Maps an event type to an ordered list of Handler records.
    """

    def __init__(self):
        self._buckets: dict[type, list[Handler]] = {}
        self._lock = RLock()

    @staticmethod
    def _insert_index(bucket: list[Handler], priority: Priority) -> int:
        if priority == Priority.LAST:
            return len(bucket)

        for index, existing in enumerate(bucket):
            if existing.priority < priority:
                return index
        return len(bucket)

    def register(
        self,
        receiver: Any,
        callback: Callable,
        priority: Optional[Priority],
        ignore_canceled: bool,
        event_type: type,
    ) -> Handler:
        """
        Register a handler for an event type.

        Caller-side checks (marker, receiver, signature) belong to
        validation; this only requires a callable and a type key.

        Args:
            receiver:        Instance passed to the callback, or None
            callback:        Callable to invoke on publish
            priority:        Priority (None → NORMAL, ints coerced)
            ignore_canceled: Run even when the event is canceled
            event_type:      Exact event type to bucket under

        Returns:
            The created Handler, the handle for later removal.
        """
        if not callable(callback):
            raise TypeError(
                f"Handler callback must be callable, got {type(callback).__name__}."
            )

        if not isinstance(event_type, type):
            raise TypeError(
                f"event_type must be a class, got {type(event_type).__name__}."
            )

        resolved = Priority.NORMAL if priority is None else Priority.from_value(priority)

        handler = Handler(
            receiver=receiver,
            callback=callback,
            priority=resolved,
            ignore_canceled=bool(ignore_canceled),
            event_type=event_type,
        )

        with self._lock:
            bucket = self._buckets.setdefault(event_type, [])
            bucket.insert(self._insert_index(bucket, resolved), handler)

        logger.info(
            f"Handler registered: {handler.name} → {event_type.__qualname__} "
            f"(priority: {resolved.name})"
        )
        return handler

    def unregister(self, handler: Handler) -> bool:
        """
        Remove the exact handler (by identity).

        Returns False if it is not registered. Deletes the bucket
        when its last handler goes.
        """
        with self._lock:
            bucket = self._buckets.get(handler.event_type)
            if bucket is None:
                return False

            for index, existing in enumerate(bucket):
                if existing is handler:
                    del bucket[index]
                    break
            else:
                return False

            if not bucket:
                del self._buckets[handler.event_type]

        logger.info(
            f"Handler unregistered: {handler.name} → "
            f"{handler.event_type.__qualname__}"
        )
        return True

    def get_handlers(self, event_type: type) -> tuple[Handler, ...]:
        """
        Get handlers for exactly this event type, in dispatch order.
        Returns an empty tuple if none (not an error).
        """
        with self._lock:
            return tuple(self._buckets.get(event_type, ()))

    def list_event_types(self) -> frozenset[type]:
        """Return all event types with at least one handler."""
        with self._lock:
            return frozenset(self._buckets.keys())

    def has_handlers(self, event_type: type) -> bool:
        with self._lock:
            return event_type in self._buckets

    def handler_count(self, event_type: type) -> int:
        with self._lock:
            return len(self._buckets.get(event_type, ()))

    def clear(self) -> None:
        """Drop every handler and bucket."""
        with self._lock:
            self._buckets.clear()
        logger.info("Handler registry cleared")

    def __contains__(self, handler: object) -> bool:
        if not isinstance(handler, Handler):
            return False
        with self._lock:
            return any(
                existing is handler
                for existing in self._buckets.get(handler.event_type, ())
            )

    def __len__(self) -> int:
        with self._lock:
            return sum(len(bucket) for bucket in self._buckets.values())
