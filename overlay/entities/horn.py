"""
A drawable, spinning, floating horn.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Optional

import pygame

from config import HORN_MAX_ROTATION_SPEED, HORN_MAX_TTL_MS, HORN_MIN_TTL_MS, HORN_WIDTH
from overlay.graphics.assets import aspect_ratio
from overlay.graphics.surface import RenderSurface
from overlay.sim.determinism import get_rng
from overlay.sim.timebase import now_ms


@dataclass(frozen=True)
class HornConfig:
    """
    Spawn parameters for a horn.

    width / height: drawn size in pixels. height=None keeps the asset's aspect ratio.
    min_ttl_ms / max_ttl_ms: lifetime range in milliseconds, [min, max).
    max_rotation_speed: fastest spin in full rotations per second (either direction).
    """

    width: float = HORN_WIDTH
    height: Optional[float] = None
    min_ttl_ms: float = HORN_MIN_TTL_MS
    max_ttl_ms: float = HORN_MAX_TTL_MS
    max_rotation_speed: float = HORN_MAX_ROTATION_SPEED

    def __post_init__(self):
        for name in ("width", "min_ttl_ms", "max_ttl_ms", "max_rotation_speed"):
            value = float(getattr(self, name))
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite")
        if self.width <= 0:
            raise ValueError("width must be > 0")
        if self.height is not None and not (math.isfinite(self.height) and self.height > 0):
            raise ValueError("height must be > 0")
        if self.min_ttl_ms <= 0:
            raise ValueError("min_ttl_ms must be > 0")
        if self.min_ttl_ms > self.max_ttl_ms:
            raise ValueError(f"min_ttl_ms ({self.min_ttl_ms}) must be <= max_ttl_ms ({self.max_ttl_ms})")
        if self.max_rotation_speed < 0:
            raise ValueError("max_rotation_speed must be >= 0")

    def resolve_size(self, aspect_ratio: float) -> tuple[float, float]:
        """Return (width, height), deriving height from the asset's height/width ratio if unset."""
        width = float(self.width)
        if self.height is not None:
            return width, float(self.height)
        return width, width * float(aspect_ratio)


DEFAULT_HORN_CONFIG = HornConfig()


class Horn:
    """
    A horn that enters from the left or right edge, drifts across and spins until it expires.

    Velocity uses the (sin -> x, cos -> y) convention: angle 0 points down the screen,
    pi/2 points right and 3pi/2 points left.
    """

    def __init__(
        self,
        surface: RenderSurface,
        image: pygame.Surface,
        config: Optional[HornConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = now_ms,
    ):
        if not isinstance(surface, RenderSurface):
            raise TypeError(f"Expected surface to be a RenderSurface. Found: {type(surface).__name__}")
        if not isinstance(image, pygame.Surface):
            raise TypeError(f"Expected image to be a pygame.Surface. Found: {type(image).__name__}")

        self.surface = surface
        self.image = image
        self._clock = clock
        config = config or DEFAULT_HORN_CONFIG
        rng = rng or get_rng()

        canvas_width, canvas_height = surface.size
        # Offset in [-pi/4, pi/4] so trajectories are never perfectly horizontal.
        angle_offset = (rng.random() - 0.5) * (math.pi / 2)
        # Magnitude of the velocity vector; wider surfaces get faster crossings.
        speed = rng.random() * canvas_width
        # True: enter on the right edge and head left.
        self.from_right = rng.random() < 0.5
        angle = math.pi * (int(self.from_right) + 0.5) + angle_offset

        self.width, self.height = config.resolve_size(aspect_ratio(image))

        self.created_at = float(clock())
        self.time_to_live = config.min_ttl_ms + rng.random() * (config.max_ttl_ms - config.min_ttl_ms)

        # Middle half of the surface height.
        self.x = float(canvas_width) if self.from_right else 0.0
        self.y = canvas_height / 2 + (rng.random() - 0.5) * (canvas_height / 2)

        self.vx = math.sin(angle) * speed
        self.vy = math.cos(angle) * speed

        # Random factor in [-2pi, 2pi) scaled by the max rotations per second.
        self.rotation_speed = (rng.random() * 4 - 2) * math.pi * config.max_rotation_speed
        self.rotation = 0.0

    @property
    def position(self) -> tuple[float, float]:
        return self.x, self.y

    @property
    def velocity(self) -> tuple[float, float]:
        return self.vx, self.vy

    @property
    def expires_at(self) -> float:
        return self.created_at + self.time_to_live

    def is_alive(self, now: Optional[float] = None) -> bool:
        """True while less than `time_to_live` ms have passed since spawn."""
        if now is None:
            now = self._clock()
        return float(now) - self.created_at < self.time_to_live

    def advance(self, dt_ms: float):
        """Move and spin by `dt_ms` milliseconds of elapsed time."""
        dt_s = float(dt_ms) / 1000.0
        self.x += self.vx * dt_s
        self.y += self.vy * dt_s
        self.rotation += self.rotation_speed * dt_s

    def render(self):
        """Draw the horn centered on its position, leaving the surface transform as found."""
        surface = self.surface
        with surface.saved_state():
            surface.translate(self.x, self.y)
            surface.rotate(self.rotation)
            surface.draw_asset(self.image, -self.width / 2, -self.height / 2, self.width, self.height)

    def __repr__(self) -> str:
        return (
            f"Horn(pos=({self.x:.1f}, {self.y:.1f}), vel=({self.vx:.1f}, {self.vy:.1f}), "
            f"rot={self.rotation:.2f}, ttl={self.time_to_live:.0f}ms)"
        )
