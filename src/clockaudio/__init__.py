"""clockaudio - audio playback controller for an always-on alarm clock.

Drives an external mpg123/mpg321 decoder process to play songs on behalf
of the clock appliance:
- Lazy decoder start with two decoder variants (mpg321 or buffered mpg123)
- Song completion inferred from decoder output activity
- Crash detection and decoder recreation
- ID3 tag lookup for the "now playing" text
- Volume control through the system mixer

Usage:
    python -m clockaudio song1.mp3 song2.mp3
    python -m clockaudio --profile prod --equalizer ~/.clock_eq.cfg song.mp3
"""

__version__ = "0.1.0"

from .config import ClockAudioConfig
from .config.loader import load_config
from .player import MusicPlayer, PlaybackState, create_music_player

__all__ = [
    "ClockAudioConfig",
    "MusicPlayer",
    "PlaybackState",
    "__version__",
    "create_music_player",
    "load_config",
]
