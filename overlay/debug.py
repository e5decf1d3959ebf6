"""
Prefixed, throttled debug output.
"""
import time

from config import DEBUG_OVERLAY

_last_log = {}


def debug_log(msg, throttle_key=None):
    if not DEBUG_OVERLAY:
        return
    # Throttle repeated messages
    if throttle_key:
        now = time.monotonic()
        if throttle_key in _last_log and now - _last_log[throttle_key] < 1.0:
            return
        _last_log[throttle_key] = now
    print(f"[overlay] {msg}")
