"""
Who gets which horn.

- broadcaster: clown horn + one of the two airhorns
- subscriber: bike horn or the channel's horn emote, with the bikehorn noise
- everyone else: the "poverty horn" text image and the bikehorn noise
"""
from __future__ import annotations

import random
import re
from typing import Optional, Pattern, Union

from config import TRIGGER_PATTERN
from overlay.sim.contracts import ChatMessage, SpawnRequest
from overlay.sim.determinism import get_rng

DEFAULT_REQUEST = SpawnRequest(image_key="text_horn", sound_key="bikehorn")

_DEFAULT_PATTERN = re.compile(TRIGGER_PATTERN)


def compile_trigger(pattern: Union[str, Pattern[str], None]) -> Pattern[str]:
    if pattern is None:
        return _DEFAULT_PATTERN
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


def classify(
    message: ChatMessage,
    pattern: Union[str, Pattern[str], None] = None,
    rng: Optional[random.Random] = None,
) -> Optional[SpawnRequest]:
    """Return the spawn request for a chat message, or None if it doesn't trigger a horn."""
    if not compile_trigger(pattern).search(message.text or ""):
        return None

    rng = rng or get_rng()
    if message.is_broadcaster:
        return SpawnRequest(image_key="clown", sound_key="airhorn" if rng.random() > 0.5 else "airhorn2")
    if message.is_subscriber:
        return SpawnRequest(image_key="horn" if rng.random() > 0.5 else "twitch_horn", sound_key="bikehorn")
    return DEFAULT_REQUEST
