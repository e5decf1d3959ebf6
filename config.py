"""
Configuration settings for the horn overlay.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Window settings
WINDOW_WIDTH = _env_int("WINDOW_WIDTH", 1280)
WINDOW_HEIGHT = _env_int("WINDOW_HEIGHT", 720)
FPS = _env_int("FPS", 60)
OVERLAY_VERSION = "1.0.0"
WINDOW_TITLE = f"Horn Overlay v{OVERLAY_VERSION}"
# Chroma-key green by default so the window can be keyed out in streaming software
BACKGROUND_COLOR = (0, 255, 0)

# Horn defaults
HORN_WIDTH = 48  # pixels; height follows the image's aspect ratio
HORN_MIN_TTL_MS = 3000
HORN_MAX_TTL_MS = 5000
HORN_MAX_ROTATION_SPEED = 4  # full rotations per second

# Frame driver policy
MAX_FRAME_DELTA_MS = _env_float("MAX_FRAME_DELTA_MS", 250.0)  # 0 disables the clamp
MAX_LIVE_HORNS = _env_int("MAX_LIVE_HORNS", 256)  # 0 = unbounded; oldest evicted first

# Twitch chat settings
TWITCH_CHANNEL = os.getenv("TWITCH_CHANNEL", "russ_money")
TWITCH_NICK = os.getenv("TWITCH_NICK", "justinfan12345")  # anonymous read-only login
TWITCH_OAUTH_TOKEN = os.getenv("TWITCH_OAUTH_TOKEN", "")
TWITCH_IRC_HOST = os.getenv("TWITCH_IRC_HOST", "irc.chat.twitch.tv")
TWITCH_IRC_PORT = _env_int("TWITCH_IRC_PORT", 6667)
TRIGGER_PATTERN = os.getenv("TRIGGER_PATTERN", r"russmoHORN|russmoHONK")
CHAT_RECONNECT_DELAY_S = _env_float("CHAT_RECONNECT_DELAY_S", 5.0)
CHAT_SOCKET_TIMEOUT_S = 1.0

# Asset settings (key -> local path under ASSETS_DIR, or an http(s) URL)
ASSETS_DIR = os.getenv("ASSETS_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets"))
HORN_IMAGE_SOURCES = {
    "horn": "images/horn.png",
    "text_horn": "images/textHorn.png",
    "clown": "images/clown.png",
    "twitch_horn": "https://static-cdn.jtvnw.net/emoticons/v2/303562626/default/dark/2.0",
}
HORN_SOUND_SOURCES = {
    "bikehorn": "sound/bikehorn.ogg",
    "airhorn": "sound/airhorn.ogg",
    "airhorn2": "sound/airhorn2.ogg",
}
ASSET_FETCH_TIMEOUT_S = 5.0

# Audio settings
AUDIO_ENABLED = _env_bool("AUDIO_ENABLED", True)
MASTER_VOLUME = _env_float("MASTER_VOLUME", 0.8)

# RNG: unset means a fresh seed per run
_seed = os.getenv("HORN_SEED", "").strip()
HORN_SEED = int(_seed) if _seed.lstrip("-").isdigit() else None

# Debug logging (throttled, prefixed prints)
DEBUG_OVERLAY = _env_bool("DEBUG_OVERLAY", False)
