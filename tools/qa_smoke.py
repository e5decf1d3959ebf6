"""
QA smoke runner (headless).

Floods a frame driver with synthetic horn triggers at a fixed frame rate on sim time
and checks that the live collection stays bounded and drains once the flood stops.

Examples:
  python tools/qa_smoke.py --quick
  python tools/qa_smoke.py --seconds 30 --rate 120 --seed 3
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Extra safety for headless environments (CI runners).
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame  # noqa: E402

from config import HORN_MAX_TTL_MS  # noqa: E402
from overlay.graphics.assets import make_placeholder_horn  # noqa: E402
from overlay.graphics.surface import RenderSurface  # noqa: E402
from overlay.sim.determinism import get_rng, set_sim_seed  # noqa: E402
from overlay.sim.scheduler import ManualFrameScheduler  # noqa: E402
from overlay.sim.timebase import set_sim_now_ms  # noqa: E402
from overlay.systems.frame_driver import FrameDriver  # noqa: E402


def run_profile(*, seconds: float, rate: float, fps: int, cap: int, seed: int, title: str) -> int:
    """Return 0 on pass, 1 on failure."""
    print(f"\n[qa_smoke] === {title} ===")
    set_sim_seed(seed)
    set_sim_now_ms(0.0)

    surface = RenderSurface(pygame.Surface((800, 600), pygame.SRCALPHA))
    image = make_placeholder_horn()
    driver = FrameDriver(surface, rng=get_rng("qa_smoke"), max_live=cap)
    driver.start(now=0.0)

    flood_frames = int(seconds * fps)
    # Enough extra frames for the last horn to expire.
    drain_frames = int((HORN_MAX_TTL_MS / 1000.0 + 1.0) * fps)
    per_frame = rate / float(fps)
    owed = 0.0
    over_cap = False

    def before_tick(now: float):
        nonlocal owed, over_cap
        set_sim_now_ms(now)
        if driver.stats.ticks < flood_frames:
            owed += per_frame
            while owed >= 1.0:
                driver.spawn(image)
                owed -= 1.0
        if cap and driver.live_count > cap:
            over_cap = True

    scheduler = ManualFrameScheduler.fixed_rate(fps=fps, frames=flood_frames + drain_frames)
    ticks = driver.run(scheduler, before_tick=before_tick)
    set_sim_now_ms(None)

    stats = driver.stats
    print(f"[qa_smoke] ticks={ticks} stats={stats.to_dict()} final_live={driver.live_count}")
    failed = False
    if over_cap or (cap and stats.peak_live > cap):
        print(f"[qa_smoke] FAIL: live collection exceeded cap {cap}")
        failed = True
    if driver.live_count or driver.pending_count:
        print("[qa_smoke] FAIL: horns left alive after the flood drained")
        failed = True
    if surface.depth != 0:
        print(f"[qa_smoke] FAIL: transform stack depth {surface.depth} after run")
        failed = True
    print(f"[qa_smoke] {'FAIL' if failed else 'PASS'}")
    return 1 if failed else 0


def main() -> int:
    ap = argparse.ArgumentParser(description="Run headless QA smoke profiles")
    ap.add_argument("--seconds", type=float, default=10.0, help="flood duration in sim seconds")
    ap.add_argument("--rate", type=float, default=30.0, help="spawns per sim second")
    ap.add_argument("--fps", type=int, default=60, help="simulated frame rate")
    ap.add_argument("--cap", type=int, default=256, help="max live horns (0 = unbounded)")
    ap.add_argument("--seed", type=int, default=3, help="rng seed")
    ap.add_argument("--quick", action="store_true", help="run a small set of standard profiles")
    ns = ap.parse_args()

    pygame.init()
    try:
        if ns.quick:
            profiles = [
                ("steady chat", dict(seconds=5.0, rate=5.0, fps=60, cap=256)),
                ("flood at cap", dict(seconds=5.0, rate=400.0, fps=60, cap=64)),
                ("low fps", dict(seconds=5.0, rate=20.0, fps=12, cap=256)),
            ]
            codes = [run_profile(seed=ns.seed, title=t, **kw) for t, kw in profiles]
            return max(codes)
        return run_profile(seconds=ns.seconds, rate=ns.rate, fps=ns.fps, cap=ns.cap, seed=ns.seed, title="custom")
    finally:
        pygame.quit()


if __name__ == "__main__":
    raise SystemExit(main())
