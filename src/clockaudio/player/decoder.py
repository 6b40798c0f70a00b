"""Decoder process protocol and variant selection.

Defines the interface the playback controller uses to talk to the
external decoder, plus the logic choosing between the two supported
decoder binaries.
"""

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from ..config.profiles import default_buffer_time

if TYPE_CHECKING:
    from ..config import DecoderConfig

SAMPLE_RATE = 44100
BYTES_PER_SAMPLE = 2
CHANNELS = 2

# Grace period used with the preferred decoder, which stops producing
# audio as soon as its status output stops.
PREFERRED_GRACE_SECONDS = 1


def buffer_size_kb(buffer_time_seconds: int) -> int:
    """Compute the fallback decoder buffer size in KB.

    Args:
        buffer_time_seconds: Seconds of CD quality audio to buffer

    Returns:
        Buffer size in kilobytes
    """
    return (SAMPLE_RATE * BYTES_PER_SAMPLE * CHANNELS * buffer_time_seconds) // 1024


@dataclass
class DecoderVariant:
    """A concrete decoder command line.

    Attributes:
        name: Short name used in log messages
        command: Full argv for subprocess
        buffer_grace_seconds: Extra seconds of audio the decoder may still
            play after its output goes quiet
    """

    name: str
    command: list[str] = field(default_factory=list)
    buffer_grace_seconds: int = PREFERRED_GRACE_SECONDS


def select_decoder_variant(config: "DecoderConfig | None" = None) -> DecoderVariant:
    """Pick the decoder command line for this machine.

    The preferred binary is used if it exists on disk. Otherwise the
    fallback binary is started with an explicit buffer sized from the
    buffer time, and the buffer time becomes the grace period.
    """
    if config is None:
        from ..config import DecoderConfig

        config = DecoderConfig()

    if os.path.exists(config.preferred_binary):
        return DecoderVariant(
            name=os.path.basename(config.preferred_binary),
            command=[config.preferred_binary, *config.preferred_args],
            buffer_grace_seconds=PREFERRED_GRACE_SECONDS,
        )

    buffer_time = config.buffer_time_seconds
    if buffer_time is None:
        buffer_time = default_buffer_time()

    return DecoderVariant(
        name=os.path.basename(config.fallback_binary),
        command=[
            config.fallback_binary,
            "--buffer",
            str(buffer_size_kb(buffer_time)),
            *config.fallback_args,
        ],
        buffer_grace_seconds=buffer_time,
    )


class DecoderProcess(Protocol):
    """Interface for a supervised decoder process.

    An implementation owns at most one child process at a time. The
    process is created by start() and destroyed by terminate(); between
    those calls it can be addressed with send() and observed through the
    drain and pending-output methods.
    """

    def start(self) -> bool:
        """Launch the decoder.

        Returns:
            True if a process is now running, False if the launch failed
        """
        ...

    def send(self, line: str) -> None:
        """Write one newline-terminated command to the decoder.

        Raises:
            OSError: If the decoder input pipe is broken
            RuntimeError: If no process has been started
        """
        ...

    def has_pending_output(self) -> bool:
        """Return True if bytes are waiting on stdout or stderr."""
        ...

    def drain_output(self) -> int:
        """Discard bytes currently available on stdout.

        Returns:
            Number of bytes discarded
        """
        ...

    def drain_errors(self) -> int:
        """Discard bytes currently available on stderr.

        Returns:
            Number of bytes discarded
        """
        ...

    def terminate(self) -> None:
        """Kill the process and release it.

        Safe to call when no process exists.
        """
        ...

    @property
    def is_started(self) -> bool:
        """Return True while a process is owned."""
        ...

    @property
    def is_running(self) -> bool:
        """Return True if the owned process is alive."""
        ...

    @property
    def buffer_grace_seconds(self) -> int:
        """Grace period for the variant chosen at start time."""
        ...


__all__ = [
    "DecoderProcess",
    "DecoderVariant",
    "PREFERRED_GRACE_SECONDS",
    "buffer_size_kb",
    "select_decoder_variant",
]
