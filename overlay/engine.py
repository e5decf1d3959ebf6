"""
Overlay engine - owns the window and wires chat, assets and audio into the frame driver.
"""
from __future__ import annotations

from typing import Optional

import pygame

from config import (
    BACKGROUND_COLOR,
    FPS,
    HORN_SEED,
    TRIGGER_PATTERN,
    WINDOW_HEIGHT,
    WINDOW_TITLE,
    WINDOW_WIDTH,
)
from overlay.audio.audio_system import AudioSystem
from overlay.graphics.assets import AssetLibrary
from overlay.graphics.surface import RenderSurface
from overlay.sim.contracts import SpawnRequest
from overlay.sim.determinism import get_rng, set_sim_seed
from overlay.sim.scheduler import FrameScheduler, PygameFrameScheduler
from overlay.systems.frame_driver import FrameDriver
from overlay.triggers.chat import TwitchChatClient
from overlay.triggers.roles import DEFAULT_REQUEST, classify, compile_trigger


class OverlayEngine:
    """Main overlay class."""

    def __init__(
        self,
        *,
        chat: Optional[TwitchChatClient] = None,
        assets: Optional[AssetLibrary] = None,
        audio_enabled: bool = True,
        seed: Optional[int] = HORN_SEED,
        trigger_pattern: str = TRIGGER_PATTERN,
        size: tuple[int, int] = (WINDOW_WIDTH, WINDOW_HEIGHT),
    ):
        pygame.init()
        set_sim_seed(seed)

        self.screen = pygame.display.set_mode(size, pygame.RESIZABLE)
        pygame.display.set_caption(WINDOW_TITLE)
        self.surface = RenderSurface(self.screen, background=BACKGROUND_COLOR)

        if assets is None:
            assets = AssetLibrary()
            assets.load_all()
        self.assets = assets
        self.audio = AudioSystem(enabled=audio_enabled)

        self.driver = FrameDriver(self.surface, rng=get_rng("horns"))
        self.chat = chat
        self.trigger = compile_trigger(trigger_pattern)
        self._role_rng = get_rng("roles")

    def request_spawn(self, request: SpawnRequest) -> bool:
        """Spawn the requested horn and play its cue. Returns True if a horn was queued."""
        image = self.assets.get(request.image_key)
        if image is None:
            print(f"[overlay] Warning: unknown horn image '{request.image_key}'")
            return False
        horn = self.driver.spawn(image)
        if horn is None:
            return False
        self.audio.play(request.sound_key)
        return True

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.driver.stop()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.driver.stop()
                elif event.key == pygame.K_SPACE:
                    # Local test honk without chat.
                    self.request_spawn(DEFAULT_REQUEST)

    def pump_chat(self) -> int:
        """Turn queued chat messages into spawns. Returns how many horns were requested."""
        if self.chat is None:
            return 0
        spawned = 0
        for message in self.chat.drain():
            request = classify(message, self.trigger, self._role_rng)
            if request is not None and self.request_spawn(request):
                spawned += 1
        return spawned

    def _before_tick(self, now: float):
        self.handle_events()
        self.pump_chat()

    def _after_tick(self, now: float):
        pygame.display.flip()

    def run(self, *, max_ticks: Optional[int] = None, scheduler: Optional[FrameScheduler] = None) -> int:
        """Main loop. Returns the number of frames drawn."""
        if self.chat is not None:
            self.chat.start()
        scheduler = scheduler or PygameFrameScheduler(FPS)
        try:
            return self.driver.run(
                scheduler,
                max_ticks=max_ticks,
                before_tick=self._before_tick,
                after_tick=self._after_tick,
            )
        finally:
            if self.chat is not None:
                self.chat.stop()
            self.audio.shutdown()
            print(f"[overlay] Stopped: {self.driver.stats.to_dict()}")
            pygame.quit()
