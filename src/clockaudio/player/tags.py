"""Song metadata lookup from ID3 tags.

Two readers are tried in order: an ID3v2 reader addressed by frame id,
then an ID3v1 reader exposing plain title/artist fields. Lookup never
raises; failures come back on the result so the caller can log them.
"""

import logging
import os
from dataclasses import dataclass
from typing import Protocol

from mutagen.id3 import ID3, ID3NoHeaderError

logger = logging.getLogger(__name__)

TITLE_FRAME = "TIT2"
ARTIST_FRAME = "TPE1"


def _frame_text(tags: ID3 | None, frame_key: str) -> str:
    """Return the first text value of a frame, or an empty string."""
    if tags is None:
        return ""
    frame = tags.get(frame_key)
    if frame is None or not getattr(frame, "text", None):
        return ""
    return str(frame.text[0]).strip()


class TagReader(Protocol):
    """Interface for a tag reader."""

    def load_from_file(self, path: str) -> bool:
        """Load tags from a file.

        Returns:
            True if the file carries tags this reader understands
        """
        ...


class ID3v2TagReader:
    """ID3v2 reader. Fields are read by frame id (TIT2, TPE1, ...)."""

    def __init__(self) -> None:
        self._tags: ID3 | None = None

    def load_from_file(self, path: str) -> bool:
        """Load ID3v2 tags, ignoring any ID3v1 trailer."""
        self._tags = None
        if not os.path.isfile(path):
            return False
        try:
            self._tags = ID3(path, load_v1=False)
        except ID3NoHeaderError:
            return False
        return True

    def get_field(self, frame_key: str) -> str:
        """Return the text of a frame, or an empty string."""
        return _frame_text(self._tags, frame_key)


class ID3v1TagReader:
    """ID3v1 reader with plain title/artist attributes."""

    def __init__(self) -> None:
        self.title = ""
        self.artist = ""

    def load_from_file(self, path: str) -> bool:
        """Load tags from the 128 byte ID3v1 trailer."""
        self.title = ""
        self.artist = ""
        if not os.path.isfile(path):
            return False
        try:
            # Without an ID3v2 header mutagen falls back to the v1 trailer
            tags = ID3(path, load_v1=True)
        except ID3NoHeaderError:
            return False
        self.title = _frame_text(tags, TITLE_FRAME)
        self.artist = _frame_text(tags, ARTIST_FRAME)
        return True


@dataclass
class SongTags:
    """Result of a tag lookup.

    Attributes:
        title: Song title, empty if unknown
        artist: Song artist, empty if unknown
        source: Name of the reader that succeeded, None if none did
        error: Description of a reader failure, None if there was none
    """

    title: str = ""
    artist: str = ""
    source: str | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        """Return True if a reader recognised the file."""
        return self.source is not None


def read_song_tags(
    path: str,
    modern: ID3v2TagReader | None = None,
    legacy: ID3v1TagReader | None = None,
) -> SongTags:
    """Look up title and artist for a song.

    Args:
        path: Path to the audio file
        modern: ID3v2 reader (a new one if None)
        legacy: ID3v1 reader (a new one if None)

    Returns:
        SongTags; never raises
    """
    modern = modern or ID3v2TagReader()
    legacy = legacy or ID3v1TagReader()

    try:
        if modern.load_from_file(path):
            return SongTags(
                title=modern.get_field(TITLE_FRAME),
                artist=modern.get_field(ARTIST_FRAME),
                source="id3v2",
            )
        if legacy.load_from_file(path):
            return SongTags(title=legacy.title, artist=legacy.artist, source="id3v1")
    except Exception as e:
        return SongTags(error=f"Failed to get ID3 tags for {os.path.basename(path)!r}: {e}")

    logger.debug(f"No ID3 tags in {path}")
    return SongTags()


__all__ = [
    "ARTIST_FRAME",
    "ID3v1TagReader",
    "ID3v2TagReader",
    "SongTags",
    "TITLE_FRAME",
    "TagReader",
    "read_song_tags",
]
