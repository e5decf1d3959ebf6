"""Tests for horn spawning, motion, expiry and drawing.

Random draw order inside Horn.__init__:
    angle offset, speed, side, ttl, y, rotation speed
"""

import math
import random

import pygame
import pytest

from overlay.entities.horn import Horn, HornConfig
from overlay.graphics.surface import RenderSurface

W, H = 800, 600


def fixed_clock(value=0.0):
    return lambda: value


class TestConstruction:
    def test_rejects_missing_surface(self, square_image):
        with pytest.raises(TypeError):
            Horn(None, square_image)

    def test_rejects_raw_pygame_surface_as_context(self, square_image):
        with pytest.raises(TypeError):
            Horn(pygame.Surface((10, 10)), square_image)

    def test_rejects_missing_image(self, render_surface):
        with pytest.raises(TypeError):
            Horn(render_surface, None)

    def test_rejects_non_image(self, render_surface):
        with pytest.raises(TypeError):
            Horn(render_surface, "assets/images/horn.png")

    def test_default_size_follows_aspect_ratio(self, render_surface, wide_image, rng):
        horn = Horn(render_surface, wide_image, rng=rng, clock=fixed_clock())
        assert horn.width == 48
        assert horn.height == pytest.approx(24.0)

    def test_zero_width_image_is_square(self, render_surface, rng):
        horn = Horn(render_surface, pygame.Surface((0, 32)), rng=rng, clock=fixed_clock())
        assert (horn.width, horn.height) == (48, 48)

    def test_explicit_height_wins(self, render_surface, wide_image, rng):
        horn = Horn(render_surface, wide_image, HornConfig(width=30, height=90), rng=rng, clock=fixed_clock())
        assert (horn.width, horn.height) == (30, 90)

    def test_starts_unrotated(self, render_surface, square_image, rng):
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
        assert horn.rotation == 0.0

    def test_created_at_comes_from_clock(self, render_surface, square_image, rng):
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock(1234.5))
        assert horn.created_at == 1234.5


class TestHornConfig:
    def test_defaults(self):
        cfg = HornConfig()
        assert cfg.width == 48
        assert cfg.height is None
        assert (cfg.min_ttl_ms, cfg.max_ttl_ms) == (3000, 5000)
        assert cfg.max_rotation_speed == 4

    def test_rejects_inverted_ttl_range(self):
        with pytest.raises(ValueError):
            HornConfig(min_ttl_ms=5000, max_ttl_ms=3000)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_ttl_ms": 0, "max_ttl_ms": 10},
            {"width": 0},
            {"width": -5},
            {"height": 0},
            {"max_rotation_speed": -1},
            {"max_ttl_ms": float("inf")},
        ],
    )
    def test_rejects_out_of_range(self, kwargs):
        with pytest.raises(ValueError):
            HornConfig(**kwargs)

    def test_equal_ttl_bounds_allowed(self):
        assert HornConfig(min_ttl_ms=1000, max_ttl_ms=1000).max_ttl_ms == 1000


class TestSpawnDistribution:
    def test_ttl_within_half_open_range(self, render_surface, square_image):
        rng = random.Random(42)
        cfg = HornConfig(min_ttl_ms=3000, max_ttl_ms=5000)
        for _ in range(10_000):
            horn = Horn(render_surface, square_image, cfg, rng=rng, clock=fixed_clock())
            assert 3000 <= horn.time_to_live < 5000

    def test_fixed_ttl_when_bounds_equal(self, render_surface, square_image, rng):
        cfg = HornConfig(min_ttl_ms=1000, max_ttl_ms=1000)
        horn = Horn(render_surface, square_image, cfg, rng=rng, clock=fixed_clock())
        assert horn.time_to_live == 1000

    def test_side_selection_is_fair(self, render_surface, square_image):
        rng = random.Random(7)
        horns = [Horn(render_surface, square_image, rng=rng, clock=fixed_clock()) for _ in range(10_000)]
        left = sum(1 for h in horns if h.x == 0)
        right = sum(1 for h in horns if h.x == W)
        assert left + right == 10_000
        assert 4500 <= left <= 5500

    def test_spawn_y_in_middle_half(self, render_surface, square_image):
        rng = random.Random(11)
        for _ in range(10_000):
            horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
            assert H / 4 <= horn.y <= 3 * H / 4

    def test_speed_scales_with_surface_width(self, square_image):
        rng = random.Random(3)
        narrow = RenderSurface(pygame.Surface((100, 600)))
        for _ in range(2000):
            horn = Horn(narrow, square_image, rng=rng, clock=fixed_clock())
            assert math.hypot(*horn.velocity) < 100

    def test_rotation_speed_bounded(self, render_surface, square_image):
        rng = random.Random(5)
        limit = 2 * math.pi * 4
        for _ in range(2000):
            horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
            assert -limit <= horn.rotation_speed < limit

    def test_horns_head_toward_opposite_edge(self, render_surface, square_image):
        rng = random.Random(9)
        for _ in range(2000):
            horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
            if horn.x == 0:
                assert horn.vx >= 0
            else:
                assert horn.vx <= 0


class TestVelocityConvention:
    def test_right_edge_flies_left(self, render_surface, square_image, sequence_rng):
        # no offset, half-width speed, right side, min ttl, centered y, no spin
        rng = sequence_rng([0.5, 0.5, 0.0, 0.0, 0.5, 0.5])
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
        assert horn.position == (W, H / 2)
        assert horn.vx == pytest.approx(-400.0)
        assert horn.vy == pytest.approx(0.0, abs=1e-9)
        assert horn.rotation_speed == 0.0

    def test_left_edge_flies_right(self, render_surface, square_image, sequence_rng):
        rng = sequence_rng([0.5, 0.5, 0.9, 0.0, 0.5, 0.5])
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
        assert horn.x == 0
        assert horn.vx == pytest.approx(400.0)
        assert horn.vy == pytest.approx(0.0, abs=1e-9)

    def test_offset_tilts_with_cosine_on_y(self, render_surface, square_image, sequence_rng):
        # max offset (+pi/4) from the left side: angle = 3pi/4
        rng = sequence_rng([1.0, 0.5, 0.9, 0.0, 0.5, 0.5])
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
        angle = math.pi * 0.5 + math.pi / 4
        assert horn.vx == pytest.approx(math.sin(angle) * 400.0)
        assert horn.vy == pytest.approx(math.cos(angle) * 400.0)
        assert horn.vy < 0

    def test_zero_speed_is_stationary(self, render_surface, square_image, sequence_rng):
        rng = sequence_rng([0.3, 0.0, 0.2, 0.0, 0.5, 0.9])
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
        assert horn.velocity == (0.0, 0.0)
        start = horn.position
        horn.advance(1000)
        assert horn.position == start
        assert horn.rotation != 0.0


class TestExpiry:
    def _horn(self, render_surface, image, created_at=100.0, ttl=1000):
        cfg = HornConfig(min_ttl_ms=ttl, max_ttl_ms=ttl)
        return Horn(render_surface, image, cfg, rng=random.Random(0), clock=fixed_clock(created_at))

    def test_alive_on_half_open_window(self, render_surface, square_image):
        horn = self._horn(render_surface, square_image)
        assert horn.is_alive(100.0)
        assert horn.is_alive(1099.999)
        assert not horn.is_alive(1100.0)
        assert not horn.is_alive(50_000.0)

    def test_expiry_is_one_shot(self, render_surface, square_image):
        horn = self._horn(render_surface, square_image)
        seen_dead = False
        for now in range(100, 3000, 7):
            alive = horn.is_alive(float(now))
            if seen_dead:
                assert not alive
            seen_dead = seen_dead or not alive
        assert seen_dead

    def test_is_alive_has_no_side_effects(self, render_surface, square_image):
        horn = self._horn(render_surface, square_image)
        before = (horn.position, horn.rotation, horn.created_at, horn.time_to_live)
        horn.is_alive(500.0)
        horn.is_alive(5000.0)
        assert (horn.position, horn.rotation, horn.created_at, horn.time_to_live) == before

    def test_uses_own_clock_when_now_omitted(self, render_surface, square_image):
        now = {"t": 0.0}
        cfg = HornConfig(min_ttl_ms=100, max_ttl_ms=100)
        horn = Horn(render_surface, square_image, cfg, rng=random.Random(0), clock=lambda: now["t"])
        assert horn.is_alive()
        now["t"] = 100.0
        assert not horn.is_alive()

    def test_expires_at(self, render_surface, square_image):
        horn = self._horn(render_surface, square_image, created_at=250.0, ttl=400)
        assert horn.expires_at == 650.0


class TestAdvance:
    def _pair(self, render_surface, image, seed=21):
        a = Horn(render_surface, image, rng=random.Random(seed), clock=fixed_clock())
        b = Horn(render_surface, image, rng=random.Random(seed), clock=fixed_clock())
        return a, b

    def test_zero_delta_is_noop(self, render_surface, square_image, rng):
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
        before = (horn.x, horn.y, horn.rotation)
        horn.advance(0)
        assert (horn.x, horn.y, horn.rotation) == before

    @pytest.mark.parametrize("a,b", [(16.7, 16.6), (250, 1), (0.5, 999.5)])
    def test_linear_in_delta(self, render_surface, square_image, a, b):
        split, whole = self._pair(render_surface, square_image)
        split.advance(a)
        split.advance(b)
        whole.advance(a + b)
        assert split.x == pytest.approx(whole.x)
        assert split.y == pytest.approx(whole.y)
        assert split.rotation == pytest.approx(whole.rotation)

    def test_velocity_is_per_second(self, render_surface, square_image, rng):
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
        x0, y0 = horn.position
        horn.advance(1000)
        assert horn.x == pytest.approx(x0 + horn.vx)
        assert horn.y == pytest.approx(y0 + horn.vy)
        assert horn.rotation == pytest.approx(horn.rotation_speed)

    def test_velocity_fixed_after_spawn(self, render_surface, square_image, rng):
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
        v = horn.velocity
        horn.advance(300)
        assert horn.velocity == v


class TestRender:
    def test_depth_unchanged_across_renders(self, render_surface, square_image, rng):
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
        for _ in range(25):
            horn.advance(16)
            horn.render()
            assert render_surface.depth == 0
        assert render_surface.transform == (0.0, 0.0, 0.0)

    def test_depth_preserved_under_outer_state(self, render_surface, square_image, rng):
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
        render_surface.save_state()
        render_surface.translate(5, 5)
        horn.render()
        assert render_surface.depth == 1
        assert render_surface.transform == (5.0, 5.0, 0.0)

    def test_restores_state_when_draw_fails(self, render_surface, square_image, rng, monkeypatch):
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())

        def boom(*args, **kwargs):
            raise RuntimeError("draw failed")

        monkeypatch.setattr(render_surface, "draw_asset", boom)
        with pytest.raises(RuntimeError):
            horn.render()
        assert render_surface.depth == 0
        assert render_surface.transform == (0.0, 0.0, 0.0)

    def test_draws_centered_on_position(self, render_surface, square_image, rng):
        horn = Horn(render_surface, square_image, rng=rng, clock=fixed_clock())
        horn.x, horn.y = 400.0, 300.0
        horn.rotation = 1.0
        horn.render()
        assert render_surface.target.get_at((400, 300)) == pygame.Color(250, 40, 40, 255)
        assert render_surface.target.get_at((10, 10)).a == 0

    def test_draw_call_uses_centered_rect(self, render_surface, wide_image, rng, monkeypatch):
        horn = Horn(render_surface, wide_image, rng=rng, clock=fixed_clock())
        calls = []
        monkeypatch.setattr(render_surface, "draw_asset", lambda *args: calls.append(args))
        horn.render()
        assert calls == [(wide_image, -24.0, -12.0, 48.0, 24.0)]
