"""Unit tests for the subprocess decoder supervisor.

These tests use `cat` as a stand-in decoder: every command sent to it
comes straight back on stdout, which is enough to exercise the pipes.
"""

import os
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from clockaudio.config import DecoderConfig
from clockaudio.player import MusicPlayer, PlaybackState
from clockaudio.player.decoder import DecoderVariant
from clockaudio.player.mock import MockMixer
from clockaudio.player.process import SubprocessDecoder


def _cat_variant(_config: DecoderConfig | None = None) -> DecoderVariant:
    return DecoderVariant(name="cat", command=["cat"], buffer_grace_seconds=3)


def _wait_for_output(decoder: SubprocessDecoder, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if decoder.has_pending_output():
            return True
        time.sleep(0.01)
    return False


@pytest.fixture
def cat_decoder():
    """Provide a supervisor whose decoder is `cat`."""
    with patch("clockaudio.player.process.select_decoder_variant", side_effect=_cat_variant):
        decoder = SubprocessDecoder()
        yield decoder
        decoder.terminate()


class TestSubprocessDecoderLifecycle:
    """Tests for starting and stopping the process."""

    def test_not_started_initially(self) -> None:
        """A new supervisor owns no process."""
        decoder = SubprocessDecoder()

        assert decoder.is_started is False
        assert decoder.is_running is False
        assert decoder.pid is None

    def test_start(self, cat_decoder: SubprocessDecoder) -> None:
        """start launches the process and records the variant."""
        assert cat_decoder.start() is True

        assert cat_decoder.is_started is True
        assert cat_decoder.is_running is True
        assert cat_decoder.buffer_grace_seconds == 3
        assert cat_decoder.variant is not None
        assert cat_decoder.variant.name == "cat"

    def test_start_twice_keeps_process(self, cat_decoder: SubprocessDecoder) -> None:
        """A second start does not spawn another process."""
        cat_decoder.start()
        pid = cat_decoder.pid

        assert cat_decoder.start() is True
        assert cat_decoder.pid == pid

    def test_start_missing_binary(self, tmp_path) -> None:
        """A missing decoder binary is reported, not raised."""
        config = DecoderConfig(
            preferred_binary=str(tmp_path / "no-mpg321"),
            fallback_binary=str(tmp_path / "no-mpg123"),
            buffer_time_seconds=2,
        )
        decoder = SubprocessDecoder(config)

        assert decoder.start() is False
        assert decoder.is_started is False

    def test_terminate(self, cat_decoder: SubprocessDecoder) -> None:
        """terminate kills the process and releases it."""
        cat_decoder.start()

        cat_decoder.terminate()

        assert cat_decoder.is_started is False
        assert cat_decoder.is_running is False
        assert cat_decoder.variant is None

    def test_terminate_without_process(self) -> None:
        """terminate is safe when nothing was started."""
        decoder = SubprocessDecoder()
        decoder.terminate()
        decoder.terminate()

        assert decoder.is_started is False


class TestSubprocessDecoderPipes:
    """Tests for sending commands and draining output."""

    def test_send_requires_start(self) -> None:
        """Sending to a missing process raises."""
        with pytest.raises(RuntimeError, match="not started"):
            SubprocessDecoder().send("PAUSE")

    def test_send_and_drain(self, cat_decoder: SubprocessDecoder) -> None:
        """Commands reach the process and its output can be drained."""
        cat_decoder.start()
        cat_decoder.send("LOAD /music/song.mp3")

        assert _wait_for_output(cat_decoder) is True
        assert cat_decoder.drain_output() == len("LOAD /music/song.mp3\n")
        assert cat_decoder.has_pending_output() is False

    def test_send_adds_single_newline(self, cat_decoder: SubprocessDecoder) -> None:
        """Lines are newline terminated exactly once."""
        cat_decoder.start()
        cat_decoder.send("PAUSE\n")

        assert _wait_for_output(cat_decoder) is True
        assert cat_decoder.drain_output() == len("PAUSE\n")

    def test_drain_when_empty(self, cat_decoder: SubprocessDecoder) -> None:
        """Draining empty pipes returns immediately."""
        cat_decoder.start()

        assert cat_decoder.drain_output() == 0
        assert cat_decoder.drain_errors() == 0

    def test_drain_large_output_in_chunks(self) -> None:
        """Output larger than one chunk is drained in a single call."""
        config = DecoderConfig(drain_chunk_size=64)
        with patch("clockaudio.player.process.select_decoder_variant", side_effect=_cat_variant):
            decoder = SubprocessDecoder(config)
            decoder.start()
            try:
                line = "x" * 999
                decoder.send(line)
                deadline = time.monotonic() + 2.0
                total = 0
                while total < 1000 and time.monotonic() < deadline:
                    total += decoder.drain_output()
                    time.sleep(0.01)
                assert total == 1000
            finally:
                decoder.terminate()

    def test_no_output_without_process(self) -> None:
        """A supervisor without a process reports no output."""
        decoder = SubprocessDecoder()

        assert decoder.has_pending_output() is False
        assert decoder.drain_output() == 0
        assert decoder.drain_errors() == 0

    def test_process_exit_detected(self, cat_decoder: SubprocessDecoder) -> None:
        """A process that exits is no longer running."""
        cat_decoder.start()
        cat_decoder._process.stdin.close()  # cat exits on EOF
        cat_decoder._process.wait(timeout=2)

        assert cat_decoder.is_started is True
        assert cat_decoder.is_running is False


class TestSubprocessDecoderFileNames:
    """Tests for file names that are not valid UTF-8."""

    def test_latin1_file_name_sent_as_raw_bytes(self, cat_decoder: SubprocessDecoder, tmp_path: Path) -> None:
        """A Latin-1 file name is played and reaches the decoder unchanged."""
        raw_path = os.path.join(os.fsencode(tmp_path), b"caf\xe9.mp3")
        with open(raw_path, "wb") as f:
            f.write(bytes(1024))
        player = MusicPlayer(decoder=cat_decoder, mixer=MockMixer())

        player.play(os.fsdecode(raw_path))

        assert player.last_state == PlaybackState.PLAYING
        expected = b"LOAD " + raw_path + b"\n"
        echoed = b""
        deadline = time.monotonic() + 2.0
        while len(echoed) < len(expected) and time.monotonic() < deadline:
            if cat_decoder.has_pending_output():
                echoed += os.read(cat_decoder._process.stdout.fileno(), 4096)
            else:
                time.sleep(0.01)
        assert echoed == expected

    def test_send_surrogate_escaped_line(self, cat_decoder: SubprocessDecoder) -> None:
        """Surrogate escapes in a command are written as the original bytes."""
        cat_decoder.start()
        cat_decoder.send(os.fsdecode(b"LOAD /music/caf\xe9.mp3"))

        assert _wait_for_output(cat_decoder) is True
        assert cat_decoder.drain_output() == len(b"LOAD /music/caf\xe9.mp3\n")
