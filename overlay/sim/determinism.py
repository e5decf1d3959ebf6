"""
RNG helpers.

Goals:
- One place that hands out `random.Random` streams (horn spawns, role picks)
- Optional fixed seed so a demo or a test run can be reproduced

Non-goals:
- Replay. Without a configured seed every process gets a fresh one.
"""

from __future__ import annotations

import random
import zlib
from typing import Optional

_BASE_SEED: int = random.SystemRandom().getrandbits(32)
_GLOBAL_RNG: random.Random = random.Random(_BASE_SEED)


def set_sim_seed(seed: Optional[int]) -> None:
    """Set the base seed. None picks a fresh random one."""
    global _BASE_SEED, _GLOBAL_RNG
    if seed is None:
        seed = random.SystemRandom().getrandbits(32)
    _BASE_SEED = int(seed) & 0xFFFFFFFF
    _GLOBAL_RNG = random.Random(_BASE_SEED)


def get_sim_seed() -> int:
    return _BASE_SEED


def _derive_seed(tag: str) -> int:
    # Stable hashing (never hash(), which is randomized per process).
    crc = zlib.crc32(tag.encode("utf-8")) & 0xFFFFFFFF
    return (_BASE_SEED ^ crc) & 0xFFFFFFFF


def get_rng(tag: Optional[str] = None) -> random.Random:
    """
    Get the shared RNG, or an independent stream for one subsystem.

    - If `tag` is None: returns the shared RNG (sequence depends on call order).
    - If `tag` is provided: returns a new stream derived from the base seed.
    """
    if tag is None:
        return _GLOBAL_RNG
    return random.Random(_derive_seed(str(tag)))
