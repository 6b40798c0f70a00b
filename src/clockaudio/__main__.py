"""clockaudio entry point.

Usage:
    python -m clockaudio [OPTIONS] SONG [SONG ...]

Options:
    --config PATH        Path to YAML config file
    --profile NAME       Profile name (dev, prod, test)
    --equalizer PATH     Equalizer file to create if missing
    --volume N           Volume level (0-100) to apply before playing
    --mock-decoder       Use mock decoder and mixer
    --poll-interval S    Seconds between state polls
    --dry-run            Load config and exit
    --version            Show version
"""

from pathlib import Path as _Path

from dotenv import load_dotenv

# Load .env before reading any environment based settings
_env_file = _Path(__file__).parent.parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()

import argparse
import logging
import signal
import sys
import time
from pathlib import Path

from . import __version__
from .config.loader import load_config
from .config.profiles import detect_profile
from .player import PlaybackSource, PlaybackState, create_music_player


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="clockaudio",
        description="clockaudio - play songs through mpg321/mpg123",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m clockaudio song.mp3                    # Play one song
  python -m clockaudio --profile prod a.mp3 b.mp3  # Play a list on the clock
  python -m clockaudio --volume 30 song.mp3        # Set volume first

Environment:
  CLOCKAUDIO_PROFILE    Set profile (dev, prod, test)
""",
    )

    parser.add_argument(
        "songs",
        nargs="*",
        type=Path,
        help="Songs to play in order",
        metavar="SONG",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config file",
        metavar="PATH",
    )

    parser.add_argument(
        "--profile",
        choices=["dev", "prod", "test"],
        help="Configuration profile to use",
    )

    parser.add_argument(
        "--equalizer",
        type=Path,
        metavar="PATH",
        help="Equalizer file, created with a flat profile if missing",
    )

    parser.add_argument(
        "--volume",
        type=int,
        metavar="N",
        help="Volume level (0-100)",
    )

    parser.add_argument(
        "--mock-decoder",
        action="store_true",
        help="Use mock decoder and mixer (for testing without audio hardware)",
    )

    parser.add_argument(
        "--poll-interval",
        type=float,
        default=0.5,
        metavar="SECONDS",
        help="Seconds between state polls (default: 0.5)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"clockaudio v{__version__}",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and exit (for testing)",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for clockaudio.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_args(argv)

    try:
        config = load_config(path=args.config, profile=args.profile)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.level)
    logger = logging.getLogger("clockaudio")

    logger.info(f"clockaudio v{__version__}")
    logger.info(f"Profile: {args.profile or detect_profile().value}")

    if args.equalizer is not None:
        config.player.equalizer_path = str(args.equalizer)
    if args.volume is not None:
        config.player.initial_volume = args.volume

    if args.dry_run:
        logger.info("Dry run mode - exiting after config load")
        logger.info(f"Decoder: {config.decoder.preferred_binary} / {config.decoder.fallback_binary}")
        logger.info(f"Volume: {config.player.initial_volume}")
        logger.info(f"Equalizer: {config.player.equalizer_path or '(none)'}")
        return 0

    songs = [str(song) for song in args.songs]
    if not songs:
        logger.error("No songs given")
        return 1

    player = create_music_player(config, use_mock=args.mock_decoder)
    source = PlaybackSource("cli", player, songs, repeat=False)

    shutdown_requested = False

    def signal_handler(_signum: int, _frame: object) -> None:
        nonlocal shutdown_requested
        if shutdown_requested:
            logger.warning("Force quit requested")
            sys.exit(1)
        shutdown_requested = True
        logger.info("Shutdown requested, stopping playback...")

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    with player:
        if not source.play():
            logger.error("None of the given songs could be played")
            return 1

        try:
            while not shutdown_requested:
                if source.tick() == PlaybackState.STOPPED:
                    break
                time.sleep(args.poll_interval)
        except KeyboardInterrupt:
            logger.info("Keyboard interrupt received")
        finally:
            source.stop()

    logger.info("Playback finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
