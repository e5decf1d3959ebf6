"""
Thin, stable data contracts shared between the chat reader, the role rules and the driver.

These are intentionally small "struct-like" dataclasses so:
- the chat thread can hand work to the frame loop without sharing objects it mutates
- the driver's counters are easy to print or assert on
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass(slots=True)
class ChatMessage:
    """
    A single chat line, already parsed out of IRC.

    `tags` holds the raw IRCv3 tags, `badges` the parsed `badges` tag (name -> version).
    """

    channel: str
    user: str
    text: str
    tags: dict[str, str] = field(default_factory=dict)
    badges: dict[str, str] = field(default_factory=dict)

    @property
    def is_broadcaster(self) -> bool:
        return "broadcaster" in self.badges

    @property
    def is_subscriber(self) -> bool:
        return self.tags.get("subscriber") == "1" or "subscriber" in self.badges


@dataclass(frozen=True, slots=True)
class SpawnRequest:
    """What a trigger asks for: which image to fly and which sound cue to play."""

    image_key: str
    sound_key: Optional[str] = None


@dataclass(slots=True)
class DriverStats:
    """Lifetime counters for a FrameDriver. Diagnostic only."""

    ticks: int = 0
    spawned: int = 0
    failed_spawns: int = 0
    expired: int = 0
    evicted: int = 0
    peak_live: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
