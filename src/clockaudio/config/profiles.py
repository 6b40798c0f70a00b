"""Configuration profile management.

Provides utilities for detecting and managing configuration profiles
based on environment and platform. The platform also decides how much
audio the fallback decoder buffers.
"""

import os
import platform
from enum import Enum
from pathlib import Path

# Seconds of audio buffered by the fallback decoder. Embedded boards need
# a large buffer to survive slow SD cards and network shares.
EMBEDDED_BUFFER_TIME = 18
DESKTOP_BUFFER_TIME = 2


class Profile(Enum):
    """Available configuration profiles."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


class Platform(Enum):
    """Supported platforms."""

    MACOS = "macos"
    LINUX = "linux"
    RASPBERRY_PI = "raspberrypi"
    UNKNOWN = "unknown"


def detect_platform() -> Platform:
    """Detect the current platform.

    Returns:
        Platform enum value
    """
    system = platform.system().lower()

    if system == "darwin":
        return Platform.MACOS
    elif system == "linux":
        try:
            with open("/proc/cpuinfo") as f:
                if "Raspberry Pi" in f.read():
                    return Platform.RASPBERRY_PI
        except (FileNotFoundError, PermissionError):
            pass
        return Platform.LINUX
    else:
        return Platform.UNKNOWN


def is_embedded() -> bool:
    """Check if running on a constrained ARM target."""
    if detect_platform() == Platform.RASPBERRY_PI:
        return True
    return platform.machine().lower().startswith(("arm", "aarch64"))


def default_buffer_time() -> int:
    """Return the fallback decoder buffer time for this platform."""
    return EMBEDDED_BUFFER_TIME if is_embedded() else DESKTOP_BUFFER_TIME


def detect_profile() -> Profile:
    """Detect appropriate configuration profile.

    Checks in order:
    1. CLOCKAUDIO_PROFILE environment variable
    2. Platform detection (Raspberry Pi = prod, else dev)

    Returns:
        Profile enum value
    """
    env_profile = os.environ.get("CLOCKAUDIO_PROFILE", "").lower()
    profile_map = {
        "prod": Profile.PROD,
        "dev": Profile.DEV,
        "test": Profile.TEST,
    }
    if env_profile in profile_map:
        return profile_map[env_profile]

    if detect_platform() == Platform.RASPBERRY_PI:
        return Profile.PROD
    else:
        return Profile.DEV


def get_profile_path(profile: Profile | None = None, config_dir: Path | None = None) -> Path:
    """Get path to profile configuration file.

    Args:
        profile: Profile to use, or None to auto-detect
        config_dir: Configuration directory, or None for default

    Returns:
        Path to profile YAML file
    """
    if profile is None:
        profile = detect_profile()

    if config_dir is None:
        config_dir = Path(__file__).parent.parent.parent.parent / "config"

    return config_dir / f"{profile.value}.yaml"


__all__ = [
    "DESKTOP_BUFFER_TIME",
    "EMBEDDED_BUFFER_TIME",
    "Platform",
    "Profile",
    "default_buffer_time",
    "detect_platform",
    "detect_profile",
    "get_profile_path",
    "is_embedded",
]
