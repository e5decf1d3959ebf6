"""
Twitch chat reader.

Connects to Twitch's IRC gateway on a background thread, joins one channel and
queues every chat line as a ChatMessage. The frame loop drains the queue without blocking.
"""
from __future__ import annotations

import queue
import socket
import threading
from typing import Callable, List, Optional

from config import (
    CHAT_RECONNECT_DELAY_S,
    CHAT_SOCKET_TIMEOUT_S,
    TWITCH_CHANNEL,
    TWITCH_IRC_HOST,
    TWITCH_IRC_PORT,
    TWITCH_NICK,
    TWITCH_OAUTH_TOKEN,
)
from overlay.debug import debug_log
from overlay.sim.contracts import ChatMessage
from overlay.triggers.irc import parse_irc_line, to_chat_message


class ChatReconnect(ConnectionError):
    """The server asked us to reconnect, or closed the connection."""


class TwitchChatClient:
    """
    Read-only Twitch chat client.

    Uses an anonymous `justinfan` login unless an OAuth token is configured.
    Reconnects after a delay when the connection drops.
    """

    def __init__(
        self,
        channel: str = TWITCH_CHANNEL,
        *,
        nick: str = TWITCH_NICK,
        token: str = TWITCH_OAUTH_TOKEN,
        host: str = TWITCH_IRC_HOST,
        port: int = TWITCH_IRC_PORT,
        reconnect_delay_s: float = CHAT_RECONNECT_DELAY_S,
        socket_timeout_s: float = CHAT_SOCKET_TIMEOUT_S,
        connect: Callable[..., socket.socket] = socket.create_connection,
    ):
        self.channel = channel.lstrip("#").lower()
        self.nick = nick.lower()
        self.token = token
        self.host = host
        self.port = int(port)
        self.reconnect_delay_s = float(reconnect_delay_s)
        self.socket_timeout_s = float(socket_timeout_s)
        self._connect = connect

        self.messages: "queue.Queue[ChatMessage]" = queue.Queue()
        self.connected = False

        self.worker_thread: Optional[threading.Thread] = None
        self.running = False
        self._wake = threading.Event()

    def start(self):
        """Start the background reader thread."""
        if self.running:
            return

        self.running = True
        self._wake.clear()
        self.worker_thread = threading.Thread(target=self._worker_loop, name="twitch-chat", daemon=True)
        self.worker_thread.start()

    def stop(self):
        """Stop the reader and wait briefly for it to exit."""
        self.running = False
        self._wake.set()
        if self.worker_thread:
            self.worker_thread.join(timeout=2.0)

    def drain(self, max_items: Optional[int] = None) -> List[ChatMessage]:
        """Pop every queued message (or up to `max_items`) without blocking."""
        out: List[ChatMessage] = []
        while max_items is None or len(out) < max_items:
            try:
                out.append(self.messages.get_nowait())
            except queue.Empty:
                break
        return out

    def _worker_loop(self):
        """Connect, read until the connection drops, wait, repeat."""
        while self.running:
            try:
                self._session()
            except OSError as e:
                print(f"[chat] Disconnected from #{self.channel}: {e}")
            finally:
                self.connected = False
            if self.running:
                self._wake.wait(self.reconnect_delay_s)

    def _login_lines(self) -> List[str]:
        lines = ["CAP REQ :twitch.tv/tags twitch.tv/commands"]
        if self.token:
            token = self.token if self.token.startswith("oauth:") else f"oauth:{self.token}"
            lines.append(f"PASS {token}")
        lines.append(f"NICK {self.nick}")
        lines.append(f"JOIN #{self.channel}")
        return lines

    @staticmethod
    def _send(sock: socket.socket, line: str):
        sock.sendall((line + "\r\n").encode("utf-8"))

    def _session(self):
        sock = self._connect((self.host, self.port), timeout=10.0)
        try:
            sock.settimeout(self.socket_timeout_s)
            for line in self._login_lines():
                self._send(sock, line)
            self.connected = True
            print(f"[chat] Connected to #{self.channel} as {self.nick}")

            # Bytes; decoded one complete line at a time.
            buffer = b""
            while self.running:
                try:
                    chunk = sock.recv(4096)
                except socket.timeout:
                    continue
                if not chunk:
                    raise ChatReconnect("connection closed by server")
                buffer += chunk
                *lines, buffer = buffer.split(b"\r\n")
                for line in lines:
                    self.handle_line(sock, line.decode("utf-8", errors="replace"))
        finally:
            sock.close()

    def handle_line(self, sock: socket.socket, line: str) -> Optional[ChatMessage]:
        """React to one server line. Chat messages are queued and returned."""
        msg = parse_irc_line(line)
        if msg is None:
            return None

        if msg.command == "PING":
            payload = msg.params[-1] if msg.params else "tmi.twitch.tv"
            self._send(sock, f"PONG :{payload}")
            return None
        if msg.command == "RECONNECT":
            raise ChatReconnect("server requested reconnect")
        if msg.command == "NOTICE" and msg.params and "failed" in msg.params[-1].lower():
            print(f"[chat] Warning: {msg.params[-1]}")
            return None

        chat = to_chat_message(msg)
        if chat is not None:
            debug_log(f"#{chat.channel} <{chat.user}> {chat.text}", throttle_key="chat")
            self.messages.put(chat)
        return chat
