"""Shared test fixtures."""

import os

# Headless SDL before pygame is imported anywhere.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import random

import pygame
import pytest

from overlay.graphics.surface import RenderSurface
from overlay.sim.timebase import set_sim_now_ms

SURFACE_SIZE = (800, 600)
HORN_COLOR = (250, 40, 40, 255)


class SequenceRng:
    """Stand-in for random.Random that replays fixed values from random()."""

    def __init__(self, values):
        self._values = list(values)
        self._i = 0

    def random(self):
        value = self._values[self._i % len(self._values)]
        self._i += 1
        return value


@pytest.fixture(autouse=True)
def _reset_sim_time():
    yield
    set_sim_now_ms(None)


@pytest.fixture
def render_surface():
    """Off-screen 800x600 drawing context."""
    return RenderSurface(pygame.Surface(SURFACE_SIZE, pygame.SRCALPHA))


@pytest.fixture
def square_image():
    img = pygame.Surface((32, 32), pygame.SRCALPHA)
    img.fill(HORN_COLOR)
    return img


@pytest.fixture
def wide_image():
    img = pygame.Surface((64, 32), pygame.SRCALPHA)
    img.fill(HORN_COLOR)
    return img


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sequence_rng():
    """Factory: sequence_rng([0.5, 0.1, ...]) -> rng replaying those values."""
    return SequenceRng
