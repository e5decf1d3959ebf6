"""
Frame driver: owns the live horns and runs the prune -> advance -> render cycle once per frame.

Threading model:
- tick()/run() belong to the frame loop thread; only that thread touches `horns`.
- spawn() may be called from any thread (e.g. the chat reader). New horns are parked in a
  lock-guarded pending list and join `horns` at the start of the next tick.
"""

from __future__ import annotations

import math
import random
import threading
from typing import Callable, List, Optional

import pygame

from config import MAX_FRAME_DELTA_MS, MAX_LIVE_HORNS
from overlay.debug import debug_log
from overlay.entities.horn import Horn, HornConfig
from overlay.graphics.surface import RenderSurface
from overlay.sim.contracts import DriverStats
from overlay.sim.scheduler import FrameScheduler
from overlay.sim.timebase import now_ms


class FrameDriver:
    """Owns the horn collection and the tick cadence."""

    def __init__(
        self,
        surface: RenderSurface,
        *,
        config: Optional[HornConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = now_ms,
        max_frame_delta_ms: float = MAX_FRAME_DELTA_MS,
        max_live: int = MAX_LIVE_HORNS,
    ):
        self.surface = surface
        self.config = config
        self.rng = rng
        self.clock = clock
        self.max_frame_delta_ms = float(max_frame_delta_ms or 0.0)
        self.max_live = max(0, int(max_live or 0))

        self.horns: List[Horn] = []
        self._pending: List[Horn] = []
        self._lock = threading.Lock()

        self.last_tick_ms: Optional[float] = None
        self.running = False
        self.stats = DriverStats()

    @property
    def live_count(self) -> int:
        return len(self.horns)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    # Lifecycle

    def start(self, now: Optional[float] = None):
        """Mark the driver running and reset the frame clock."""
        self.last_tick_ms = float(self.clock() if now is None else now)
        self.running = True

    def stop(self):
        """Ask the loop to exit before it schedules another frame."""
        self.running = False

    def clear(self):
        """Drop every live and pending horn."""
        with self._lock:
            self._pending.clear()
        self.horns.clear()

    # Spawning

    def spawn(self, image: pygame.Surface, config: Optional[HornConfig] = None) -> Optional[Horn]:
        """
        Build a horn for `image` at the current surface size and queue it for the next tick.

        A bad image or surface drops this one spawn (reported, counted) and returns None;
        it never breaks the frame loop.
        """
        try:
            horn = Horn(self.surface, image, config or self.config, rng=self.rng, clock=self.clock)
        except TypeError as e:
            with self._lock:
                self.stats.failed_spawns += 1
            print(f"[overlay] Warning: dropped spawn: {e}")
            return None

        with self._lock:
            self._pending.append(horn)
            self.stats.spawned += 1
        debug_log(f"spawned {horn!r}", throttle_key="spawn")
        return horn

    def _admit_pending(self):
        with self._lock:
            if not self._pending:
                return
            fresh, self._pending = self._pending, []
        self.horns.extend(fresh)

    def _enforce_cap(self):
        if self.max_live and len(self.horns) > self.max_live:
            overflow = len(self.horns) - self.max_live
            # Oldest first: insertion order is spawn order.
            del self.horns[:overflow]
            self.stats.evicted += overflow
            debug_log(f"cap {self.max_live} reached, evicted {overflow} oldest", throttle_key="evict")

    # Per-frame work

    def frame_delta(self, now: float) -> float:
        """Milliseconds since the last tick, with negative/non-finite -> 0 and large gaps clamped."""
        if self.last_tick_ms is None:
            return 0.0
        dt = float(now) - self.last_tick_ms
        if not math.isfinite(dt) or dt < 0:
            return 0.0
        if self.max_frame_delta_ms > 0 and dt > self.max_frame_delta_ms:
            debug_log(f"clamped frame delta {dt:.0f}ms", throttle_key="clamp")
            return self.max_frame_delta_ms
        return dt

    def prune(self, now: float) -> int:
        """Keep only horns alive at `now`. Returns how many expired."""
        before = len(self.horns)
        self.horns = [h for h in self.horns if h.is_alive(now)]
        removed = before - len(self.horns)
        self.stats.expired += removed
        return removed

    def tick(self, now: Optional[float] = None) -> float:
        """
        Run one frame: fit + clear the surface, prune, then advance and draw each survivor.

        Returns the (policy-adjusted) delta used, in milliseconds.
        """
        if now is None:
            now = self.clock()
        now = float(now)

        self.surface.fit_to_display()
        self.surface.clear()

        dt = self.frame_delta(now)
        self._admit_pending()
        self.prune(now)
        # Cap applies to survivors only.
        self._enforce_cap()

        for horn in self.horns:
            horn.advance(dt)
            horn.render()

        self.last_tick_ms = now
        self.stats.ticks += 1
        self.stats.peak_live = max(self.stats.peak_live, len(self.horns))
        return dt

    def run(
        self,
        scheduler: FrameScheduler,
        *,
        max_ticks: Optional[int] = None,
        before_tick: Optional[Callable[[float], None]] = None,
        after_tick: Optional[Callable[[float], None]] = None,
    ) -> int:
        """
        Tick once per scheduled frame until stop(), the tick budget, or the scheduler runs dry.

        `before_tick(now)` runs ahead of each tick (host events, trigger draining) and may call stop().
        `after_tick(now)` runs after each tick (e.g. presenting the frame). Returns ticks run.
        """
        if not self.running:
            self.start()

        ticks = 0
        while self.running:
            if max_ticks is not None and ticks >= max_ticks:
                break
            try:
                now = scheduler.next_frame()
            except StopIteration:
                break
            if before_tick is not None:
                before_tick(now)
                if not self.running:
                    break
            self.tick(now)
            if after_tick is not None:
                after_tick(now)
            ticks += 1

        self.running = False
        return ticks
