"""
Trigger sources: turn chat activity into spawn requests.
"""
from .chat import TwitchChatClient
from .roles import classify

__all__ = ["TwitchChatClient", "classify"]
