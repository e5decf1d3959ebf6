"""
Horn Overlay - spinning horns fly across the screen whenever chat honks.

Usage:
    python main.py [--channel <name>] [--no-chat] [--no-audio] [--seconds N] [--seed N] [--headless]

Controls:
    Space - Spawn a test horn
    Esc   - Quit
"""
import argparse
import os

from config import FPS, HORN_SEED, TRIGGER_PATTERN, TWITCH_CHANNEL


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Horn Overlay - chat-triggered flying horns"
    )
    parser.add_argument(
        "--channel",
        type=str,
        default=TWITCH_CHANNEL,
        help=f"Twitch channel to listen to (default: {TWITCH_CHANNEL})"
    )
    parser.add_argument(
        "--trigger",
        type=str,
        default=TRIGGER_PATTERN,
        help="Regex that a chat message must match to spawn a horn"
    )
    parser.add_argument(
        "--no-chat",
        action="store_true",
        help="Do not connect to chat (Space still spawns test horns)"
    )
    parser.add_argument(
        "--no-audio",
        action="store_true",
        help="Disable horn sounds"
    )
    parser.add_argument(
        "--seconds",
        type=float,
        default=None,
        help="Quit after this many seconds (default: run until closed)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=HORN_SEED,
        help="RNG seed for reproducible horn trajectories"
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Use SDL dummy video/audio drivers (CI, smoke runs)"
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    if args.headless:
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

    # Import after SDL env vars are set.
    from overlay.engine import OverlayEngine
    from overlay.triggers.chat import TwitchChatClient

    chat = None if args.no_chat else TwitchChatClient(args.channel)
    engine = OverlayEngine(
        chat=chat,
        audio_enabled=not args.no_audio,
        seed=args.seed,
        trigger_pattern=args.trigger,
    )

    max_ticks = None
    if args.seconds is not None:
        max_ticks = max(1, int(args.seconds * FPS))

    print(f"[overlay] Starting (chat: {'off' if chat is None else '#' + chat.channel})")
    engine.run(max_ticks=max_ticks)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
