"""
priobus Config — Bus Settings
================================
Construction-time configuration for an EventManager.

stop_on_first_failure:
    False (default) keeps invoking later handlers after one fails.
    True aborts the rest of that dispatch after recording the failure.

strict_unregister:
    False (default) makes removal of an unknown handler a logged no-op.
    True raises HandlerNotFoundError.

log_handler_failures:
    Log each handler failure with its traceback.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

ENV_PREFIX = "PRIOBUS_"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(
        f"{name} must be one of {sorted(_TRUTHY | _FALSY)}, got '{raw}'."
    )


@dataclass(frozen=True)
class BusConfig:
    """Immutable event bus settings."""

    stop_on_first_failure: bool = False
    strict_unregister: bool = False
    log_handler_failures: bool = True

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, bool):
                raise ValueError(
                    f"{f.name} must be bool, got {type(value).__name__}."
                )

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        prefix: str = ENV_PREFIX,
    ) -> "BusConfig":
        """
        Build settings from environment variables.

        PRIOBUS_STOP_ON_FIRST_FAILURE, PRIOBUS_STRICT_UNREGISTER and
        PRIOBUS_LOG_HANDLER_FAILURES override the defaults when set.
        """
        env = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            key = f"{prefix}{f.name.upper()}"
            if key in env:
                overrides[f.name] = _parse_bool(key, env[key])
        return cls(**overrides)
