"""Playback state shared by the controller and its callers."""

from enum import Enum


class PlaybackState(Enum):
    """State of a MusicPlayer."""

    STOPPED = "stopped"
    PLAYING = "playing"


__all__ = ["PlaybackState"]
