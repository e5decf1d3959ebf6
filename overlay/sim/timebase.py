"""
Simulation time abstraction.

Horn and driver code should prefer `now_ms()` over `pygame.time.get_ticks()` so tests can:
- pin the clock to a fixed value and check expiry exactly
- step time forward without sleeping
"""

from __future__ import annotations

from typing import Optional

import pygame

_SIM_NOW_MS: Optional[float] = None


def set_sim_now_ms(now_ms: Optional[float]) -> None:
    """
    Pin the current simulation time in milliseconds.

    If set to None, `now_ms()` falls back to pygame's real-time ticks.
    """
    global _SIM_NOW_MS
    _SIM_NOW_MS = None if now_ms is None else float(now_ms)


def now_ms() -> float:
    """Return pinned sim time (if provided), otherwise pygame's ticks since init."""
    if _SIM_NOW_MS is not None:
        return _SIM_NOW_MS
    return float(pygame.time.get_ticks())
