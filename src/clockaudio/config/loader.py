"""YAML configuration loader.

Config files may name a parent file with an ``extends`` key; the parent
is loaded first and the child's values are merged over it. All settings
live under a top-level ``clockaudio`` key.
"""

from pathlib import Path
from typing import Any

import yaml

from . import (
    ClockAudioConfig,
    DecoderConfig,
    LoggingConfig,
    MixerConfig,
    PlayerConfig,
)
from .profiles import Profile, get_profile_path


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge two dicts, recursing into nested dicts. Values from override win."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_with_inheritance(path: Path) -> dict[str, Any]:
    """Read a YAML file, resolving its ``extends`` chain relative to its directory."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    parent = data.pop("extends", None)
    if parent:
        data = deep_merge(load_yaml_with_inheritance(path.parent / parent), data)

    return data


def dict_to_config(data: dict[str, Any]) -> ClockAudioConfig:
    """Build a ClockAudioConfig from raw YAML data.

    Raises:
        TypeError: If a section holds an unknown key
    """
    root = data.get("clockaudio") or {}

    def section(key: str) -> dict[str, Any]:
        # An empty YAML section parses as None
        return root.get(key) or {}

    return ClockAudioConfig(
        player=PlayerConfig(**section("player")),
        decoder=DecoderConfig(**section("decoder")),
        mixer=MixerConfig(**section("mixer")),
        logging=LoggingConfig(**section("logging")),
    )


def load_config(
    path: str | Path | None = None,
    profile: str | None = None,
    config_dir: Path | None = None,
) -> ClockAudioConfig:
    """Load clockaudio configuration.

    Args:
        path: Config file to load (takes precedence over profile)
        profile: Profile name ('dev', 'prod', 'test'); detected if None
        config_dir: Directory holding the profile files

    Returns:
        Parsed ClockAudioConfig

    Raises:
        FileNotFoundError: If the config file or a parent it extends is missing
        ValueError: If the profile name is unknown

    Examples:
        >>> config = load_config(profile="prod")
        >>> config = load_config(path="/etc/clockaudio.yaml")
    """
    if path is None:
        selected = Profile(profile) if profile is not None else None
        path = get_profile_path(selected, config_dir)
    return dict_to_config(load_yaml_with_inheritance(Path(path)))


__all__ = [
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]
