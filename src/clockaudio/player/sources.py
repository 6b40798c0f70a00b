"""Logical playback sources sharing one MusicPlayer.

The clock has several things that play audio (music, sleep sounds,
meditation tracks, alarms). Each is a PlaybackSource with its own song
list, but they all hold a reference to the same MusicPlayer, so only one
decoder process ever runs.
"""

import logging
from collections.abc import Iterable

from .controller import MusicPlayer
from .state import PlaybackState

logger = logging.getLogger(__name__)


class PlaybackSource:
    """A named song list played through a shared MusicPlayer."""

    def __init__(
        self,
        name: str,
        player: MusicPlayer,
        songs: Iterable[str] = (),
        repeat: bool = True,
    ) -> None:
        """Initialize a playback source.

        Args:
            name: Source name for logging (e.g. "music", "sleep")
            player: Shared player
            songs: Song paths in play order
            repeat: Wrap around to the first song after the last one
        """
        self._name = name
        self._player = player
        self._songs = list(songs)
        self._index = 0
        self._repeat = repeat
        self._playing = False
        self._load_id: int | None = None

    def play(self) -> bool:
        """Play the current song, skipping songs that cannot be played.

        Returns:
            True if a song is now playing
        """
        for _ in range(len(self._songs)):
            song = self._songs[self._index]
            self._player.play(song)
            if self._player.last_state == PlaybackState.PLAYING:
                self._playing = True
                self._load_id = self._player.load_count
                logger.info(f"[{self._name}] {self._player.now_playing}")
                return True

            logger.warning(f"[{self._name}] Skipping unplayable song: {song}")
            if not self._advance():
                break

        self._playing = False
        return False

    def stop(self) -> None:
        """Stop this source if it is the one playing."""
        if self._playing and self._owns_player():
            self._player.stop()
        self._playing = False

    def next(self) -> bool:
        """Skip to the next song and play it."""
        if not self._advance():
            self.stop()
            return False
        return self.play()

    def tick(self) -> PlaybackState:
        """Poll the shared player and move on when a song ends.

        Returns:
            PLAYING while this source has a song playing
        """
        if not self._playing:
            return PlaybackState.STOPPED

        if not self._owns_player():
            # Another source took over the player
            self._playing = False
            return PlaybackState.STOPPED

        if self._player.poll() == PlaybackState.PLAYING:
            return PlaybackState.PLAYING

        if self._advance() and self.play():
            return PlaybackState.PLAYING

        self._playing = False
        return PlaybackState.STOPPED

    def set_songs(self, songs: Iterable[str]) -> None:
        """Replace the song list, stopping playback."""
        self.stop()
        self._songs = list(songs)
        self._index = 0

    def _advance(self) -> bool:
        if not self._songs:
            return False
        if self._index + 1 < len(self._songs):
            self._index += 1
            return True
        if self._repeat:
            self._index = 0
            return True
        return False

    def _owns_player(self) -> bool:
        # Compare loads, not paths: two sources may hold the same file
        return self._load_id is not None and self._load_id == self._player.load_count

    @property
    def name(self) -> str:
        """Source name."""
        return self._name

    @property
    def player(self) -> MusicPlayer:
        """The shared player."""
        return self._player

    @property
    def songs(self) -> list[str]:
        """Song list."""
        return self._songs.copy()

    @property
    def current_song(self) -> str | None:
        """Song at the current position."""
        if not self._songs:
            return None
        return self._songs[self._index]

    @property
    def is_playing(self) -> bool:
        """Return True if this source believes it is playing."""
        return self._playing

    @property
    def now_playing(self) -> str:
        """Display text for the clock face, empty when not playing."""
        if not self._playing:
            return ""
        return self._player.now_playing


__all__ = ["PlaybackSource"]
