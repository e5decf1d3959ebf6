"""
Horn image loading.

Sources are either paths (relative to ASSETS_DIR) or http(s) URLs (e.g. a Twitch emote).
Anything missing or unreadable is replaced by a generated placeholder so the overlay still runs
on a bare checkout.
"""

from __future__ import annotations

import io
import urllib.request
from pathlib import Path
from typing import Dict, Mapping, Optional

import pygame

from config import ASSET_FETCH_TIMEOUT_S, ASSETS_DIR, HORN_IMAGE_SOURCES

_PLACEHOLDER_COLORS = {
    "horn": (250, 210, 60),
    "text_horn": (235, 235, 235),
    "clown": (230, 60, 80),
    "twitch_horn": (145, 70, 255),
}


def aspect_ratio(image: pygame.Surface) -> float:
    """height / width of an image (1.0 for a degenerate zero-width surface)."""
    w, h = image.get_size()
    return h / w if w else 1.0


def make_placeholder_horn(color=(250, 210, 60), size: tuple[int, int] = (64, 48)) -> pygame.Surface:
    """A simple bike-horn silhouette: bulb on the left, flared bell on the right."""
    w, h = size
    s = pygame.Surface((w, h), pygame.SRCALPHA)
    outline = (20, 20, 25)
    bulb_r = max(4, h // 3)
    pygame.draw.circle(s, (40, 40, 45), (bulb_r + 1, h // 2), bulb_r)
    pygame.draw.circle(s, outline, (bulb_r + 1, h // 2), bulb_r, 1)
    pts = [
        (bulb_r * 2, h // 2 - max(2, h // 10)),
        (w - 2, 2),
        (w - 2, h - 3),
        (bulb_r * 2, h // 2 + max(2, h // 10)),
    ]
    pygame.draw.polygon(s, color, pts, 0)
    pygame.draw.polygon(s, outline, pts, 1)
    return s


def _is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


def _finish(image: pygame.Surface) -> pygame.Surface:
    # convert_alpha() needs a display mode; headless loads keep the decoded format.
    if pygame.display.get_init() and pygame.display.get_surface() is not None:
        return image.convert_alpha()
    return image


class AssetLibrary:
    """Loads and caches horn images by key."""

    def __init__(self, assets_dir: str | Path = ASSETS_DIR, *, fetch_timeout_s: float = ASSET_FETCH_TIMEOUT_S):
        self.assets_dir = Path(assets_dir)
        self.fetch_timeout_s = float(fetch_timeout_s)
        self._images: Dict[str, pygame.Surface] = {}
        self.placeholders: set[str] = set()

    def load_all(self, sources: Mapping[str, str] = HORN_IMAGE_SOURCES) -> Dict[str, pygame.Surface]:
        for key, source in sources.items():
            self.load(key, source)
        return dict(self._images)

    def load(self, key: str, source: str) -> pygame.Surface:
        """Load one image, falling back to a placeholder on any failure."""
        try:
            image = self._load_url(source) if _is_url(source) else self._load_file(source)
        except (OSError, pygame.error, ValueError) as e:
            print(f"[assets] Warning: could not load '{key}' from {source}: {e}; using placeholder")
            image = make_placeholder_horn(_PLACEHOLDER_COLORS.get(key, (250, 210, 60)))
            self.placeholders.add(key)
        else:
            self.placeholders.discard(key)
        self._images[key] = image
        return image

    def _load_file(self, source: str) -> pygame.Surface:
        path = Path(source)
        if not path.is_absolute():
            path = self.assets_dir / path
        if not path.is_file():
            raise FileNotFoundError(f"missing {path}")
        return _finish(pygame.image.load(str(path)))

    def _load_url(self, url: str) -> pygame.Surface:
        with urllib.request.urlopen(url, timeout=self.fetch_timeout_s) as res:
            data = res.read()
        # namehint lets SDL_image pick a decoder; emote CDN URLs carry no extension.
        return _finish(pygame.image.load(io.BytesIO(data), "emote.png"))

    def get(self, key: str) -> Optional[pygame.Surface]:
        return self._images.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._images

    def keys(self):
        return self._images.keys()
