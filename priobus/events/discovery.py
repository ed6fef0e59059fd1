"""
priobus Events — Handler Discovery
=====================================
Finds @event_handler callables on an object or class.

Given an instance:
    instance methods are bound to it; static methods and
    classmethods are included without a receiver.
Given a class:
    only static methods and classmethods are returned.

Candidates that would fail validation (private, wrong signature)
are skipped, not raised. Attributes are read statically, so
properties and descriptors are never triggered.
"""

from __future__ import annotations

import inspect
from typing import Any, Iterator

from priobus.events.errors import SignatureMismatchError
from priobus.events.handler import HandlerReference, get_handler_spec
from priobus.events.validation import resolve_event_type, takes_receiver


def _attribute_names(cls: type) -> Iterator[str]:
    seen: set[str] = set()
    for klass in reversed(cls.__mro__):
        for name in vars(klass):
            if name not in seen:
                seen.add(name)
                yield name


def get_handler_references(owner: Any) -> list[HandlerReference]:
    """
    List handler references declared on `owner`.

    Args:
        owner: An instance, or a class for static handlers only

    Raises:
        TypeError: owner is None
    """
    if owner is None:
        raise TypeError("owner must be an instance or a class, not None.")

    if isinstance(owner, type):
        cls, instance = owner, None
    else:
        cls, instance = type(owner), owner

    references: list[HandlerReference] = []

    for name in _attribute_names(cls):
        if name.startswith("_"):
            continue

        attr = inspect.getattr_static(cls, name)

        if isinstance(attr, staticmethod):
            receiver, callback = None, attr.__func__
        elif isinstance(attr, classmethod):
            receiver, callback = None, getattr(cls, name)
        elif inspect.isfunction(attr):
            if takes_receiver(attr):
                if instance is None:
                    continue
                receiver, callback = instance, attr
            else:
                receiver, callback = None, attr
        else:
            continue

        if get_handler_spec(callback) is None:
            continue

        try:
            resolve_event_type(callback, receiver is not None, cls)
        except SignatureMismatchError:
            continue

        references.append(HandlerReference(receiver=receiver, callback=callback))

    return references
