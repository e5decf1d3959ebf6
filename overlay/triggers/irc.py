"""
Minimal IRC line parsing for Twitch chat (IRCv3 message tags included).

Line shape:
    [@tags ][:prefix ]COMMAND [params...] [:trailing]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from overlay.sim.contracts import ChatMessage

_TAG_ESCAPES = {
    ":": ";",
    "s": " ",
    "\\": "\\",
    "r": "\r",
    "n": "\n",
}


@dataclass(slots=True)
class IrcLine:
    command: str
    params: list[str] = field(default_factory=list)
    prefix: Optional[str] = None
    tags: dict[str, str] = field(default_factory=dict)

    @property
    def nick(self) -> str:
        if not self.prefix:
            return ""
        return self.prefix.split("!", 1)[0]


def unescape_tag_value(value: str) -> str:
    out = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\" and i + 1 < len(value):
            nxt = value[i + 1]
            out.append(_TAG_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        if ch != "\\":
            out.append(ch)
        i += 1
    return "".join(out)


def parse_tags(raw: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for item in raw.split(";"):
        if not item:
            continue
        key, _, value = item.partition("=")
        tags[key] = unescape_tag_value(value)
    return tags


def parse_badges(raw: str) -> dict[str, str]:
    """'broadcaster/1,subscriber/12' -> {'broadcaster': '1', 'subscriber': '12'}"""
    badges: dict[str, str] = {}
    for item in (raw or "").split(","):
        if not item:
            continue
        name, _, version = item.partition("/")
        badges[name] = version
    return badges


def parse_irc_line(line: str) -> Optional[IrcLine]:
    """Parse one line (without CRLF). Returns None for blank lines."""
    rest = line.rstrip("\r\n")
    if not rest.strip():
        return None

    tags: dict[str, str] = {}
    if rest.startswith("@"):
        raw_tags, _, rest = rest[1:].partition(" ")
        tags = parse_tags(raw_tags)
        rest = rest.lstrip(" ")

    prefix = None
    if rest.startswith(":"):
        prefix, _, rest = rest[1:].partition(" ")
        rest = rest.lstrip(" ")

    trailing = None
    if " :" in rest:
        rest, trailing = rest.split(" :", 1)
    elif rest.startswith(":"):
        rest, trailing = "", rest[1:]

    parts = rest.split()
    if not parts:
        return None
    params = parts[1:]
    if trailing is not None:
        params.append(trailing)
    return IrcLine(command=parts[0].upper(), params=params, prefix=prefix, tags=tags)


def to_chat_message(msg: IrcLine) -> Optional[ChatMessage]:
    """PRIVMSG -> ChatMessage; anything else -> None."""
    if msg.command != "PRIVMSG" or len(msg.params) < 2:
        return None
    channel = msg.params[0].lstrip("#")
    user = msg.tags.get("display-name") or msg.nick
    return ChatMessage(
        channel=channel,
        user=user,
        text=msg.params[-1],
        tags=dict(msg.tags),
        badges=parse_badges(msg.tags.get("badges", "")),
    )
