"""
priobus Events — Dispatcher
==============================
Routes a published event to the handlers registered for its type.

Dispatch behavior:
1. Look up handlers by the exact runtime type of the event
2. Walk a snapshot of the handlers in priority order
3. Skip a handler if the event is canceled and it does not ignore that
4. Invoke; catch the exception per handler
5. Log and record the failure
6. Continue, or stop if configured with stop_on_first_failure

The cancel flag is re-read before every handler, so a handler that
cancels the event affects the rest of the same pass.

Handler failure must NOT:
- Reach the publisher as an exception
- Change registry state
"""

import logging
from typing import Any, Optional

from priobus.config import BusConfig
from priobus.events.base import Cancellable
from priobus.events.errors import InvalidEventError
from priobus.events.handler import Handler
from priobus.events.registry import HandlerRegistry

logger = logging.getLogger("priobus.events")


class EventDispatcher:
    """
    Synchronous, ordered dispatch over a HandlerRegistry.

    Usage:
        dispatcher = EventDispatcher(registry, BusConfig(stop_on_first_failure=True))
        failures = dispatcher.publish(Ping(expected=1))
        # failures: {handler: exception} for handlers that raised
    """

    def __init__(
        self,
        registry: HandlerRegistry,
        config: Optional[BusConfig] = None,
    ):
        self._registry = registry
        self._config = config or BusConfig()

    @property
    def config(self) -> BusConfig:
        return self._config

    def publish(self, event: Any) -> dict[Handler, Exception]:
        """
        Dispatch an event to all handlers registered for its type.

        Returns:
            {handler: exception} for every handler that raised.
            Empty dict means every invoked handler succeeded.

        Raises:
            InvalidEventError: event is None or a class.
        """
        if event is None or isinstance(event, type):
            raise InvalidEventError(event)

        event_type = type(event)
        handlers = self._registry.get_handlers(event_type)
        failures: dict[Handler, Exception] = {}

        if not handlers:
            logger.debug(f"No handlers for event type '{event_type.__qualname__}'")
            return failures

        cancellable = isinstance(event, Cancellable)
        invoked = 0
        skipped = 0

        for handler in handlers:
            if (
                cancellable
                and event.is_canceled()
                and not handler.ignore_canceled
            ):
                skipped += 1
                logger.debug(
                    f"Skipped {handler.name}: "
                    f"{event_type.__qualname__} is canceled"
                )
                continue

            invoked += 1
            try:
                handler.invoke(event)
            except Exception as exc:
                failures[handler] = exc

                if self._config.log_handler_failures:
                    logger.error(
                        f"Handler failed: {handler.name} for "
                        f"{event_type.__qualname__}: {exc}",
                        exc_info=True,
                    )

                if self._config.stop_on_first_failure:
                    logger.debug(
                        f"Dispatch of {event_type.__qualname__} stopped "
                        f"after first failure"
                    )
                    break

        logger.debug(
            f"Dispatch complete: {event_type.__qualname__} — "
            f"{invoked} invoked, {skipped} skipped, {len(failures)} failed"
        )
        return failures
