"""
Canvas-style drawing surface over a pygame Surface.

pygame blits have no transform state, so this keeps a tiny 2D transform
(origin + rotation) with a save/restore stack, the same primitives a 2D canvas
context exposes:

- clear()
- translate(dx, dy) / rotate(radians)
- save_state() / restore_state() (or `with surface.saved_state():`)
- draw_asset(asset, x, y, w, h) in local (transformed) coordinates

Rotation follows screen coordinates (y down): a positive angle turns clockwise on screen.
"""

from __future__ import annotations

import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import pygame

_SCALE_CACHE_MAX = 64


@dataclass(frozen=True, slots=True)
class _Transform:
    x: float = 0.0
    y: float = 0.0
    angle: float = 0.0


class RenderSurface:
    """Transform-stack drawing context bound to a target pygame Surface."""

    def __init__(self, target: pygame.Surface, background: Tuple[int, ...] = (0, 0, 0, 0)):
        if not isinstance(target, pygame.Surface):
            raise TypeError(f"Expected target to be a pygame.Surface. Found: {type(target).__name__}")
        self.target = target
        self.background = background
        self._transform = _Transform()
        self._stack: List[_Transform] = []
        self._last_size = target.get_size()
        # Scaled copies of assets, keyed by (asset, w, h). Avoids a rescale per horn per frame.
        self._scaled: dict[tuple[pygame.Surface, int, int], pygame.Surface] = {}

    @property
    def size(self) -> Tuple[int, int]:
        return self.target.get_size()

    @property
    def width(self) -> int:
        return self.target.get_width()

    @property
    def height(self) -> int:
        return self.target.get_height()

    @property
    def depth(self) -> int:
        """Number of saved states currently on the stack."""
        return len(self._stack)

    @property
    def transform(self) -> Tuple[float, float, float]:
        """Current (origin_x, origin_y, angle)."""
        t = self._transform
        return t.x, t.y, t.angle

    def fit_to_display(self) -> bool:
        """
        Re-bind to the display surface if the window was recreated or resized.

        Idempotent. Returns True if the drawable size changed since the last call.
        """
        display: Optional[pygame.Surface] = pygame.display.get_surface() if pygame.display.get_init() else None
        if display is not None and display is not self.target:
            self.target = display
        size = self.target.get_size()
        changed = size != self._last_size
        self._last_size = size
        return changed

    def clear(self) -> None:
        self.target.fill(self.background)

    # Transform state

    def save_state(self) -> None:
        self._stack.append(self._transform)

    def restore_state(self) -> None:
        # Unbalanced restore is ignored, as on a 2D canvas.
        if self._stack:
            self._transform = self._stack.pop()

    @contextmanager
    def saved_state(self) -> Iterator["RenderSurface"]:
        self.save_state()
        try:
            yield self
        finally:
            self.restore_state()

    def reset_transform(self) -> None:
        self._transform = _Transform()

    def translate(self, dx: float, dy: float) -> None:
        t = self._transform
        ox, oy = self._to_world(t, float(dx), float(dy))
        self._transform = _Transform(ox, oy, t.angle)

    def rotate(self, radians: float) -> None:
        t = self._transform
        self._transform = _Transform(t.x, t.y, t.angle + float(radians))

    @staticmethod
    def _to_world(t: _Transform, lx: float, ly: float) -> Tuple[float, float]:
        c = math.cos(t.angle)
        s = math.sin(t.angle)
        return t.x + lx * c - ly * s, t.y + lx * s + ly * c

    # Drawing

    def draw_asset(self, asset: pygame.Surface, x: float, y: float, w: float, h: float) -> pygame.Rect:
        """Draw `asset` stretched into the local rect (x, y, w, h). Returns the dirty rect."""
        t = self._transform
        img = self._scaled_asset(asset, w, h)
        if t.angle:
            # pygame rotates counter-clockwise for positive degrees; screen space is y-down.
            img = pygame.transform.rotate(img, -math.degrees(t.angle))
        cx, cy = self._to_world(t, float(x) + float(w) / 2.0, float(y) + float(h) / 2.0)
        rect = img.get_rect(center=(round(cx), round(cy)))
        return self.target.blit(img, rect)

    def _scaled_asset(self, asset: pygame.Surface, w: float, h: float) -> pygame.Surface:
        sw = max(1, int(round(abs(float(w)))))
        sh = max(1, int(round(abs(float(h)))))
        if asset.get_size() == (sw, sh):
            return asset
        key = (asset, sw, sh)
        img = self._scaled.get(key)
        if img is None:
            if len(self._scaled) >= _SCALE_CACHE_MAX:
                self._scaled.clear()
            img = pygame.transform.scale(asset, (sw, sh))
            self._scaled[key] = img
        return img
