"""
Frame schedulers.

A scheduler blocks until the next frame is due and returns that frame's timestamp (ms).

Expected driver integration:
- next_frame() -> float
- raises StopIteration when it has no more frames to give (treated as a stop)
"""

from __future__ import annotations

from typing import Iterable, Iterator, Protocol

import pygame

from overlay.sim.timebase import now_ms


class FrameScheduler(Protocol):
    def next_frame(self) -> float:
        ...


class PygameFrameScheduler:
    """Refresh-paced scheduler backed by `pygame.time.Clock`."""

    def __init__(self, fps: int = 60):
        self.fps = max(1, int(fps))
        self.clock = pygame.time.Clock()

    def next_frame(self) -> float:
        self.clock.tick(self.fps)
        return now_ms()


class ManualFrameScheduler:
    """
    Deterministic scheduler that hands out pre-chosen timestamps.

    Useful for tests and headless soaks: no sleeping, no wall clock.
    """

    def __init__(self, timestamps: Iterable[float]):
        self._it: Iterator[float] = iter(timestamps)
        self.frames_served = 0

    @classmethod
    def fixed_rate(cls, *, fps: int, start_ms: float = 0.0, frames: int) -> "ManualFrameScheduler":
        step = 1000.0 / max(1, int(fps))
        return cls(start_ms + step * (i + 1) for i in range(int(frames)))

    def next_frame(self) -> float:
        ts = float(next(self._it))
        self.frames_served += 1
        return ts
