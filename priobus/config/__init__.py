"""
priobus Config — Public API
==============================
"""

from priobus.config.settings import ENV_PREFIX, BusConfig

__all__ = [
    "BusConfig",
    "ENV_PREFIX",
]
