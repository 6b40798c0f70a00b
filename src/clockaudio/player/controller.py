"""Playback controller driving a remote-controlled decoder process.

The decoder never reports that a song has finished. Instead the
controller watches the decoder's status chatter: while bytes keep
arriving on stdout or stderr the song is still playing; once the pipes
stay quiet past a deadline the song is over. A decoder that goes quiet
less than a minute after a LOAD is assumed to have crashed and is
killed, so the next play() starts a fresh process.

Nothing here runs in the background. Callers must call poll() (or read
the ``state`` property, which polls) regularly so the pipes get drained
and the deadline gets checked.
"""

import logging
import os
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .decoder import DecoderProcess
from .equalizer import write_default_equalizer
from .mixer import Mixer, clamp_volume
from .state import PlaybackState
from .tags import ID3v1TagReader, ID3v2TagReader, read_song_tags

if TYPE_CHECKING:
    from ..config import PlayerConfig

logger = logging.getLogger(__name__)


class MusicPlayer:
    """Single-song player on top of one decoder process.

    Not thread safe. One MusicPlayer may be shared by several playback
    sources, but all calls must come from the same thread.
    """

    LOAD_COMMAND = "LOAD"
    # STOP is unreliable when the decoder runs with a buffer
    PAUSE_COMMAND = "PAUSE"

    def __init__(
        self,
        decoder: DecoderProcess,
        mixer: Mixer,
        config: "PlayerConfig | None" = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the player and apply the initial volume.

        Args:
            decoder: Decoder supervisor; started lazily on first play()
            mixer: Mixer used for volume changes
            config: Player configuration (uses defaults if None)
            clock: Time source in seconds, injectable for tests
        """
        if config is None:
            from ..config import PlayerConfig

            config = PlayerConfig()

        self._decoder = decoder
        self._mixer = mixer
        self._clock = clock

        self._volume_step = config.volume_step
        self._startup_timeout = config.startup_timeout_seconds
        self._crash_threshold = config.crash_threshold_seconds
        self._equalizer_path = config.equalizer_path or ""

        self._modern_tags = ID3v2TagReader()
        self._legacy_tags = ID3v1TagReader()

        self._state = PlaybackState.STOPPED
        self._timeout_deadline = 0.0
        self._play_started_at = 0.0
        self._song_title = ""
        self._song_artist = ""
        self._current_path: str | None = None
        self._load_count = 0

        self._volume = clamp_volume(config.initial_volume)
        self.set_volume(self._volume)

    # ---------- playback ----------

    def play(self, path: str) -> None:
        """Start playing a file, stopping any current song first.

        Missing files are ignored: the player stays stopped and the
        decoder is not touched.
        """
        self._stop_song()

        self._song_title = ""
        self._song_artist = ""
        self._read_tags(path)

        if not os.path.isfile(path):
            logger.debug(f"Not playing missing file: {path}")
            return

        if "\n" in path or "\r" in path:
            # The decoder reads one command per line
            logger.warning(f"Not playing file with a line break in its name: {path!r}")
            return

        if self._decoder.is_started and not self._decoder.is_running:
            logger.warning("Decoder process exited; starting a new one")
            self._decoder.terminate()

        if not self._decoder.is_started and not self._start_decoder():
            return

        self._play_started_at = self._clock()

        if not self._song_title.strip():
            self._song_title = os.path.basename(path)

        try:
            self._decoder.send(f"{self.LOAD_COMMAND} {os.path.abspath(path)}")
        except (OSError, RuntimeError, UnicodeError) as e:
            logger.error(f"Decoder rejected LOAD for {path}: {e}")
            self._destroy_decoder()
            return

        # Long first deadline to cover decoder startup
        self._timeout_deadline = self._play_started_at + self._startup_timeout
        self._current_path = path
        self._load_count += 1
        self._state = PlaybackState.PLAYING
        logger.info(f"Playing {self.now_playing}")

    def stop(self) -> None:
        """Stop the current song.

        The decoder is paused rather than killed so the next song starts
        quickly on the same process.
        """
        self._stop_song()

    def poll(self) -> PlaybackState:
        """Update and return the playback state.

        Side effects: drains the decoder's stdout and stderr, pushes the
        deadline forward while the decoder is producing output, demotes
        the state to STOPPED once the decoder goes quiet past the
        deadline, and kills a decoder judged to have crashed.
        """
        if self._state != PlaybackState.PLAYING:
            return self._state

        now = self._clock()
        running = self._decoder.is_running

        if not running or not self._decoder.has_pending_output():
            if not running or now > self._timeout_deadline:
                self._state = PlaybackState.STOPPED
                elapsed = now - self._play_started_at
                if elapsed < self._crash_threshold:
                    logger.warning(
                        f"Decoder went quiet {elapsed:.1f}s after LOAD of "
                        f"{self._current_path}; assuming it crashed"
                    )
                    self._destroy_decoder()
                else:
                    logger.info(f"Finished {self._current_path} after {elapsed:.0f}s")
        else:
            self._timeout_deadline = now + self._decoder.buffer_grace_seconds + 1

        self._drain()
        return self._state

    @property
    def state(self) -> PlaybackState:
        """Current playback state. Reading this polls the decoder; see poll()."""
        return self.poll()

    def close(self) -> None:
        """Kill the decoder process."""
        self._destroy_decoder()

    def __enter__(self) -> "MusicPlayer":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    # ---------- volume ----------

    def set_volume(self, volume: int) -> None:
        """Clamp, store and apply a volume level."""
        self._volume = clamp_volume(volume)
        if not self._mixer.apply(self._volume):
            logger.warning(f"Volume {self._volume}% was not applied")

    def volume_up(self) -> None:
        """Raise the volume by one step."""
        self.set_volume(self._volume + self._volume_step)

    def volume_down(self) -> None:
        """Lower the volume by one step."""
        self.set_volume(self._volume - self._volume_step)

    @property
    def volume(self) -> int:
        """Current volume level (0-100)."""
        return self._volume

    # ---------- equalizer ----------

    @property
    def equalizer_path(self) -> str:
        """Equalizer file created on decoder start if missing. Empty disables it."""
        return self._equalizer_path

    @equalizer_path.setter
    def equalizer_path(self, path: str | None) -> None:
        self._equalizer_path = path or ""

    def set_equalizer_path(self, path: str | None) -> None:
        """Set the equalizer file path."""
        self.equalizer_path = path

    # ---------- song info ----------

    @property
    def song_title(self) -> str:
        """Title of the last song passed to play()."""
        return self._song_title

    @property
    def song_artist(self) -> str:
        """Artist of the last song passed to play()."""
        return self._song_artist

    @property
    def now_playing(self) -> str:
        """Display text for the current song."""
        if self._song_artist:
            return f"{self._song_artist} - {self._song_title}"
        return self._song_title

    @property
    def current_path(self) -> str | None:
        """Path of the last song successfully loaded."""
        return self._current_path

    @property
    def load_count(self) -> int:
        """Number of songs loaded so far. Changes whenever a new song starts."""
        return self._load_count

    @property
    def last_state(self) -> PlaybackState:
        """State as of the last operation, without polling the decoder."""
        return self._state

    @property
    def decoder(self) -> DecoderProcess:
        """The decoder supervisor."""
        return self._decoder

    # ---------- internals ----------

    def _read_tags(self, path: str) -> None:
        tags = read_song_tags(path, self._modern_tags, self._legacy_tags)
        if tags.error:
            logger.warning(tags.error)
            return
        self._song_title = tags.title
        self._song_artist = tags.artist

    def _start_decoder(self) -> bool:
        if self._equalizer_path:
            equalizer = os.path.expanduser(self._equalizer_path)
            if not os.path.exists(equalizer):
                write_default_equalizer(equalizer)

        if not self._decoder.start():
            logger.error("Decoder failed to start; song not played")
            return False
        return True

    def _stop_song(self) -> None:
        if self._state != PlaybackState.PLAYING:
            return

        try:
            self._decoder.send(self.PAUSE_COMMAND)
        except (OSError, RuntimeError) as e:
            logger.warning(f"Could not pause decoder: {e}")
        self._state = PlaybackState.STOPPED

    def _destroy_decoder(self) -> None:
        self._state = PlaybackState.STOPPED
        self._decoder.terminate()

    def _drain(self) -> None:
        try:
            self._decoder.drain_output()
            self._decoder.drain_errors()
        except OSError as e:
            logger.debug(f"Error draining decoder pipes: {e}")


__all__ = ["MusicPlayer"]
