"""Configuration module for clockaudio.

This module provides configuration loading and profile management.
"""

from dataclasses import dataclass, field


@dataclass
class PlayerConfig:
    """Playback controller configuration."""

    initial_volume: int = 50
    volume_step: int = 5
    equalizer_path: str = ""
    startup_timeout_seconds: int = 45
    crash_threshold_seconds: int = 60


@dataclass
class DecoderConfig:
    """Decoder process configuration.

    The preferred binary is used when it exists on disk. Otherwise the
    fallback binary is launched with an explicit ``--buffer`` size.
    """

    preferred_binary: str = "/usr/bin/mpg321"
    preferred_args: list[str] = field(default_factory=lambda: ["-R", "1"])
    fallback_binary: str = "mpg123"
    fallback_args: list[str] = field(
        default_factory=lambda: ["--rva-mix", "--preload", "1.0", "-R"]
    )
    buffer_time_seconds: int | None = None  # None = platform default
    drain_chunk_size: int = 4096


@dataclass
class MixerConfig:
    """System mixer configuration."""

    command: str = "amixer"
    control: str = "Master"
    timeout_seconds: int = 5


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class ClockAudioConfig:
    """Main clockaudio configuration."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    mixer: MixerConfig = field(default_factory=MixerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Public API
__all__ = [
    "ClockAudioConfig",
    "DecoderConfig",
    "LoggingConfig",
    "MixerConfig",
    "PlayerConfig",
]
