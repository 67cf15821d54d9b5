"""
Logging helpers: a shared logger hierarchy and a per-key throttle for noisy per-tick messages.
"""

from __future__ import annotations

import logging
import os
from typing import Dict

from common.realtime import Clock, monotonic_time

ROOT_LOGGER = "flatflight"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    level = os.environ.get("FLATFLIGHT_LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level, logging.INFO))
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the flatflight hierarchy."""
    _configure_root()
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class Throttle:
    """Allow a message key through at most once per period (seconds)."""

    def __init__(self, period: float, clock: Clock = monotonic_time):
        if period < 0.0:
            raise ValueError("period must be non-negative")
        self.period = float(period)
        self.clock = clock
        self._last: Dict[str, float] = {}

    def ready(self, key: str) -> bool:
        now = self.clock()
        last = self._last.get(key)
        if last is not None and now - last < self.period:
            return False
        self._last[key] = now
        return True


__all__ = ["get_logger", "Throttle"]
