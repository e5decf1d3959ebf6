"""
Sound cue playback (non-authoritative, pure consumer).

AudioSystem plays the horn noise that goes with each spawn.
Never affects horn state; safe to disable or fail.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping, Optional

import pygame

from config import ASSETS_DIR, AUDIO_ENABLED, HORN_SOUND_SOURCES, MASTER_VOLUME


class AudioSystem:
    """
    Lightweight audio system.

    Preloads sound cues by key and plays them on request. A missing mixer,
    missing file or undecodable file all degrade to a silent no-op.
    """

    def __init__(
        self,
        enabled: bool = AUDIO_ENABLED,
        *,
        assets_dir: str | Path = ASSETS_DIR,
        sources: Mapping[str, str] = HORN_SOUND_SOURCES,
    ):
        self.enabled = enabled
        self._assets_dir = Path(assets_dir)
        self._sfx_cache: Dict[str, Optional[pygame.mixer.Sound]] = {}
        # Range: 0.0 to 1.0 (0.0 = mute, 1.0 = full volume)
        self._master_volume: float = max(0.0, min(1.0, float(MASTER_VOLUME)))

        if not self.enabled:
            return

        # Initialize pygame.mixer safely
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=512)
        except pygame.error as e:
            print(f"[audio] Warning: mixer init failed ({e}); audio disabled")
            self.enabled = False
            return

        self._load_sfx(sources)

    def _load_sfx(self, sources: Mapping[str, str]):
        """Preload every cue; unreadable or missing files cache None (no-op on play)."""
        for sound_key, rel in sources.items():
            path = Path(rel)
            if not path.is_absolute():
                path = self._assets_dir / path
            if not path.is_file():
                print(f"[audio] Warning: missing sound '{sound_key}' at {path}")
                self._sfx_cache[sound_key] = None
                continue
            try:
                self._sfx_cache[sound_key] = pygame.mixer.Sound(str(path))
            except pygame.error as e:
                print(f"[audio] Warning: could not decode '{sound_key}': {e}")
                self._sfx_cache[sound_key] = None

    @property
    def master_volume(self) -> float:
        return self._master_volume

    def set_master_volume(self, volume: float):
        self._master_volume = max(0.0, min(1.0, float(volume)))

    def has_sound(self, sound_key: str) -> bool:
        return self._sfx_cache.get(sound_key) is not None

    def play(self, sound_key: Optional[str]) -> bool:
        """
        Play a cue once. Overlapping plays are allowed (each spawn gets its own honk).

        Returns True if a sound actually started.
        """
        if not self.enabled or not sound_key:
            return False
        sound = self._sfx_cache.get(sound_key)
        if sound is None:
            return False
        try:
            channel = sound.play()
            if channel is not None:
                channel.set_volume(self._master_volume)
            return channel is not None
        except pygame.error:
            return False

    def shutdown(self):
        if self.enabled and pygame.mixer.get_init():
            pygame.mixer.stop()
