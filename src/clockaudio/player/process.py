"""Decoder supervisor backed by a real child process.

Runs mpg321/mpg123 in remote control mode with all three standard
streams piped. The decoder writes status lines continuously while it
decodes; those bytes must be read away or the decoder blocks once the
pipe buffer fills.
"""

import fcntl
import logging
import os
import struct
import subprocess
import termios
from typing import IO, TYPE_CHECKING

from .decoder import PREFERRED_GRACE_SECONDS, DecoderVariant, select_decoder_variant

if TYPE_CHECKING:
    from ..config import DecoderConfig

logger = logging.getLogger(__name__)


def _set_non_blocking(stream: IO[bytes] | None) -> None:
    """Put a pipe into non-blocking mode."""
    if stream is None:
        return
    fd = stream.fileno()
    flags = fcntl.fcntl(fd, fcntl.F_GETFL)
    fcntl.fcntl(fd, fcntl.F_SETFL, flags | os.O_NONBLOCK)


def bytes_available(stream: IO[bytes] | None) -> int:
    """Return the number of bytes that can be read from a pipe right now."""
    if stream is None or stream.closed:
        return 0
    try:
        raw = fcntl.ioctl(stream.fileno(), termios.FIONREAD, b"\0\0\0\0")
    except (OSError, ValueError):
        return 0
    return struct.unpack("i", raw)[0]


def drain_stream(stream: IO[bytes] | None, chunk_size: int = 4096) -> int:
    """Read and discard the bytes already available on a pipe.

    Only the amount reported available before the loop starts is read, so
    a chatty decoder cannot keep the caller here indefinitely.

    Returns:
        Number of bytes discarded
    """
    remaining = bytes_available(stream)
    if stream is None or remaining <= 0:
        return 0

    fd = stream.fileno()
    total = 0
    while remaining > 0:
        try:
            chunk = os.read(fd, min(remaining, chunk_size))
        except BlockingIOError:
            break
        if not chunk:
            break
        remaining -= len(chunk)
        total += len(chunk)
    return total


class SubprocessDecoder:
    """Supervises one mpg321/mpg123 process.

    Implements the DecoderProcess protocol.
    """

    def __init__(self, config: "DecoderConfig | None" = None) -> None:
        """Initialize the supervisor without starting anything.

        Args:
            config: Decoder configuration (uses defaults if None)
        """
        if config is None:
            from ..config import DecoderConfig

            config = DecoderConfig()

        self._config = config
        self._process: subprocess.Popen[bytes] | None = None
        self._variant: DecoderVariant | None = None
        self._buffer_grace_seconds = PREFERRED_GRACE_SECONDS

    def start(self) -> bool:
        """Launch the decoder if no process is owned yet."""
        if self._process is not None:
            return True

        variant = select_decoder_variant(self._config)
        logger.info(f"Starting decoder {variant.name}: {' '.join(variant.command)}")

        try:
            process = subprocess.Popen(
                variant.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                bufsize=0,
            )
        except FileNotFoundError:
            logger.error(f"Decoder executable not found: {variant.command[0]}")
            return False
        except (OSError, subprocess.SubprocessError) as e:
            logger.error(f"Failed to start decoder {variant.name}: {e}")
            return False

        try:
            _set_non_blocking(process.stdout)
            _set_non_blocking(process.stderr)
        except OSError as e:
            logger.warning(f"Failed to set decoder pipes non-blocking: {e}")

        self._process = process
        self._variant = variant
        self._buffer_grace_seconds = variant.buffer_grace_seconds
        return True

    def send(self, line: str) -> None:
        """Write one command line to the decoder's stdin."""
        if self._process is None or self._process.stdin is None:
            raise RuntimeError("Decoder not started")

        # Filesystem encoding, so undecodable file names reach the decoder byte for byte
        data = os.fsencode(line.rstrip("\n") + "\n")
        self._process.stdin.write(data)
        self._process.stdin.flush()
        logger.debug(f"Sent to decoder: {line.rstrip()}")

    def has_pending_output(self) -> bool:
        """Return True if stdout or stderr has unread bytes."""
        if self._process is None:
            return False
        return bytes_available(self._process.stdout) > 0 or bytes_available(self._process.stderr) > 0

    def drain_output(self) -> int:
        """Discard bytes currently available on stdout."""
        if self._process is None:
            return 0
        return drain_stream(self._process.stdout, self._config.drain_chunk_size)

    def drain_errors(self) -> int:
        """Discard bytes currently available on stderr."""
        if self._process is None:
            return 0
        return drain_stream(self._process.stderr, self._config.drain_chunk_size)

    def terminate(self) -> None:
        """Kill the decoder and release its pipes."""
        process = self._process
        if process is None:
            return

        self._process = None
        self._variant = None

        if process.poll() is None:
            logger.info(f"Killing decoder process {process.pid}")
            try:
                process.kill()
                process.wait(timeout=1)
            except subprocess.TimeoutExpired:
                logger.warning(f"Decoder process {process.pid} did not exit after kill")
            except OSError as e:
                logger.warning(f"Error while killing decoder: {e}")

        for stream in (process.stdin, process.stdout, process.stderr):
            if stream is None:
                continue
            try:
                stream.close()
            except OSError:
                pass

    @property
    def is_started(self) -> bool:
        """Return True while a process is owned."""
        return self._process is not None

    @property
    def is_running(self) -> bool:
        """Return True if the owned process is alive."""
        return self._process is not None and self._process.poll() is None

    @property
    def buffer_grace_seconds(self) -> int:
        """Grace period for the running decoder variant."""
        return self._buffer_grace_seconds

    @property
    def variant(self) -> DecoderVariant | None:
        """Decoder variant of the owned process."""
        return self._variant

    @property
    def pid(self) -> int | None:
        """Process id of the owned decoder."""
        return self._process.pid if self._process is not None else None


__all__ = ["SubprocessDecoder", "bytes_available", "drain_stream"]
