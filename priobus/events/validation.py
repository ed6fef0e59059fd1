"""
priobus Events — Listener Validation
=======================================
Checks a (receiver, callback) pair before it reaches the registry.

Checks run in this order; the first failure wins:
1. Marked with @event_handler          → NotAHandlerError
2. Public (no leading underscore)      → NotAccessibleError
3. Receiver matches the callable:
   - receiver given, none taken        → StaticMismatchError
   - receiver taken, none/wrong given  → InstanceMismatchError
4. Exactly one Event-typed parameter   → SignatureMismatchError

A callable takes a receiver when its first positional parameter is
named `self`. Bound methods are unwrapped to (instance, function)
when no receiver is passed; classmethods stay bound.

Validation never touches the registry.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional

from priobus.events.base import Event
from priobus.events.errors import (
    InstanceMismatchError,
    NotAccessibleError,
    NotAHandlerError,
    SignatureMismatchError,
    StaticMismatchError,
)
from priobus.events.handler import EventHandlerSpec, get_handler_spec

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class ValidatedListener:
    """Everything the registry needs, resolved from a checked callable."""

    receiver: Any
    callback: Callable
    spec: EventHandlerSpec
    event_type: type


def _unwrap(receiver: Any, callback: Any) -> tuple[Any, Any]:
    if isinstance(callback, staticmethod):
        return receiver, callback.__func__

    if (
        receiver is None
        and inspect.ismethod(callback)
        and not isinstance(callback.__self__, type)
    ):
        return callback.__self__, callback.__func__

    return receiver, callback


def _parameters(callback: Callable) -> list[inspect.Parameter]:
    try:
        return list(inspect.signature(callback).parameters.values())
    except (TypeError, ValueError) as exc:
        raise SignatureMismatchError(callback, str(exc)) from exc


def takes_receiver(callback: Callable) -> bool:
    """Whether the callable expects an instance as its first argument."""
    if inspect.ismethod(callback):
        return False
    try:
        params = list(inspect.signature(callback).parameters.values())
    except (TypeError, ValueError):
        return False
    return bool(params) and params[0].kind in _POSITIONAL and params[0].name == "self"


def _declares(receiver: Any, callback: Callable) -> bool:
    name = getattr(callback, "__name__", None)
    if name is None:
        return False
    return any(
        vars(klass).get(name) is callback
        for klass in type(receiver).__mro__
    )


def _resolve_annotation(
    callback: Callable,
    param: inspect.Parameter,
    owner: Optional[type] = None,
) -> Any:
    # Only the event parameter is resolved; other annotations may be
    # TYPE_CHECKING-only names.
    annotation = param.annotation
    if not isinstance(annotation, str):
        return annotation

    target = callback.__func__ if inspect.ismethod(callback) else callback
    globalns = getattr(target, "__globals__", {})
    localns = None
    if owner is not None:
        # subclass names shadow base-class names
        localns = {}
        for klass in reversed(owner.__mro__):
            localns.update(vars(klass))
    try:
        return eval(annotation, globalns, localns)
    except (NameError, AttributeError, SyntaxError, TypeError) as exc:
        raise SignatureMismatchError(
            callback, f"cannot resolve annotation '{annotation}'"
        ) from exc


def resolve_event_type(
    callback: Callable,
    needs_receiver: bool,
    owner: Optional[type] = None,
) -> type:
    """
    Return the Event subclass a handler listens for.

    String annotations are evaluated in the callback's module, with
    `owner` (the declaring class, when known) as the local namespace.

    Raises:
        SignatureMismatchError: not exactly one Event-typed parameter
    """
    params = _parameters(callback)
    if needs_receiver:
        params = params[1:]

    if len(params) != 1:
        raise SignatureMismatchError(
            callback, f"expected 1 parameter, found {len(params)}"
        )

    param = params[0]
    if param.kind not in _POSITIONAL:
        raise SignatureMismatchError(callback, f"'{param.name}' is not positional")

    annotation = _resolve_annotation(callback, param, owner)
    if annotation is inspect.Parameter.empty:
        raise SignatureMismatchError(callback, f"'{param.name}' is not annotated")

    if not (isinstance(annotation, type) and issubclass(annotation, Event)):
        raise SignatureMismatchError(
            callback, f"'{param.name}' is annotated as {annotation!r}"
        )
    return annotation


def validate_listener(receiver: Any, callback: Any) -> ValidatedListener:
    """
    Validate a listener and resolve its registration details.

    Args:
        receiver: Instance for method handlers, None for static ones
        callback: The marked function, static method, or bound method

    Returns:
        ValidatedListener ready for HandlerRegistry.register()
    """
    receiver, callback = _unwrap(receiver, callback)

    spec: Optional[EventHandlerSpec] = get_handler_spec(callback)
    if spec is None:
        raise NotAHandlerError(callback)

    if getattr(callback, "__name__", "").startswith("_"):
        raise NotAccessibleError(callback)

    needs_receiver = takes_receiver(callback)
    if needs_receiver:
        if receiver is None or not _declares(receiver, callback):
            raise InstanceMismatchError(receiver, callback)
    elif receiver is not None:
        raise StaticMismatchError(receiver, callback)

    if receiver is not None:
        owner = type(receiver)
    elif inspect.ismethod(callback):
        owner = callback.__self__
    else:
        owner = None
    event_type = resolve_event_type(callback, needs_receiver, owner)

    return ValidatedListener(
        receiver=receiver,
        callback=callback,
        spec=spec,
        event_type=event_type,
    )
