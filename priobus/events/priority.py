"""
priobus Events — Handler Priority
====================================
Seven ordered levels. Higher value is dispatched first.

    FIRST(6) → HIGHEST(5) → HIGH(4) → NORMAL(3) → LOW(2) → LOWEST(1) → LAST(0)

LAST is special in the registry: a LAST handler is always appended,
never placed ahead of anything registered before it.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class Priority(IntEnum):
    """Execution priority for event handlers."""
    FIRST = 6
    HIGHEST = 5
    HIGH = 4
    NORMAL = 3
    LOW = 2
    LOWEST = 1
    LAST = 0

    @classmethod
    def from_value(cls, value: Any) -> "Priority":
        """
        Coerce a raw value into a Priority.

        Values at or above FIRST clamp to FIRST, values at or below LAST
        clamp to LAST. Anything in between resolves to the exact level,
        or NORMAL when it has no exact match. Non-numeric input
        (strings, bools, None) is NORMAL.
        """
        if isinstance(value, cls):
            return value

        # only real numbers coerce; "5" and True are unmapped
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return cls.NORMAL
        number = float(value)

        if number >= cls.FIRST:
            return cls.FIRST
        if number <= cls.LAST:
            return cls.LAST

        # 4.5 has no level of its own
        if not number.is_integer():
            return cls.NORMAL
        return cls(int(number))
