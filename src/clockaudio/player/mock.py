"""Mock decoder and mixer for testing.

Provides controllable stand-ins for the decoder process and the system
mixer so the playback controller can be exercised without mpg123 or ALSA.
"""

from .decoder import PREFERRED_GRACE_SECONDS


class MockDecoderProcess:
    """Mock decoder process for testing.

    Records every command sent and lets tests decide when the "decoder"
    produces output, goes quiet, or dies. Implements the DecoderProcess
    protocol.
    """

    CHUNK = 4096

    def __init__(
        self,
        buffer_grace_seconds: int = PREFERRED_GRACE_SECONDS,
        start_succeeds: bool = True,
    ) -> None:
        """Initialize mock decoder.

        Args:
            buffer_grace_seconds: Grace period reported after start
            start_succeeds: If False, start() fails like a missing binary
        """
        self._grace = buffer_grace_seconds
        self._start_succeeds = start_succeeds
        self._started = False
        self._running = False
        self._continuous = False
        self._pending_stdout = 0
        self._pending_stderr = 0
        self._broken_pipe = False
        self._generation = 0
        self._start_count = 0
        self._terminate_count = 0
        self._sent: list[str] = []
        self._drained = 0

    def start(self) -> bool:
        """Pretend to launch a decoder."""
        if self._started:
            return True
        if not self._start_succeeds:
            return False
        self._started = True
        self._running = True
        self._broken_pipe = False
        self._generation += 1
        self._start_count += 1
        return True

    def send(self, line: str) -> None:
        """Record a command."""
        if not self._started:
            raise RuntimeError("Decoder not started")
        if self._broken_pipe:
            raise BrokenPipeError("Decoder stdin closed")
        self._sent.append(line.rstrip("\n"))

    def has_pending_output(self) -> bool:
        """Return True if simulated output is waiting."""
        if not self._running:
            return False
        return self._continuous or self._pending_stdout > 0 or self._pending_stderr > 0

    def drain_output(self) -> int:
        """Discard simulated stdout."""
        drained = self._pending_stdout
        if self._continuous and self._running:
            drained = max(drained, self.CHUNK)
        self._pending_stdout = 0
        self._drained += drained
        return drained

    def drain_errors(self) -> int:
        """Discard simulated stderr."""
        drained = self._pending_stderr
        self._pending_stderr = 0
        self._drained += drained
        return drained

    def terminate(self) -> None:
        """Pretend to kill the decoder."""
        if not self._started:
            return
        self._terminate_count += 1
        self._started = False
        self._running = False
        self._continuous = False
        self._pending_stdout = 0
        self._pending_stderr = 0

    # ---------- test controls ----------

    def emit(self, stdout: int = 0, stderr: int = 0) -> None:
        """Queue bytes on the simulated pipes."""
        self._pending_stdout += stdout
        self._pending_stderr += stderr

    def set_continuous_output(self, enabled: bool) -> None:
        """Make the decoder chatter on every poll (a song in progress)."""
        self._continuous = enabled

    def crash(self) -> None:
        """Make the process exit without being terminated."""
        self._running = False
        self._continuous = False

    def break_pipe(self) -> None:
        """Make the next send() fail."""
        self._broken_pipe = True

    def set_start_succeeds(self, succeeds: bool) -> None:
        """Control whether start() works."""
        self._start_succeeds = succeeds

    def clear(self) -> None:
        """Reset recorded commands."""
        self._sent.clear()

    # ---------- protocol properties ----------

    @property
    def is_started(self) -> bool:
        """Return True while a process is owned."""
        return self._started

    @property
    def is_running(self) -> bool:
        """Return True if the simulated process is alive."""
        return self._started and self._running

    @property
    def buffer_grace_seconds(self) -> int:
        """Grace period reported by the decoder."""
        return self._grace

    # ---------- inspection ----------

    @property
    def sent_commands(self) -> list[str]:
        """Get list of commands sent."""
        return self._sent.copy()

    @property
    def start_count(self) -> int:
        """Get number of successful starts."""
        return self._start_count

    @property
    def terminate_count(self) -> int:
        """Get number of terminations."""
        return self._terminate_count

    @property
    def generation(self) -> int:
        """Identifies the current simulated process; bumps on each start."""
        return self._generation

    @property
    def drained_bytes(self) -> int:
        """Get total bytes drained."""
        return self._drained


class MockMixer:
    """Mock mixer for testing.

    Records every volume level applied. Implements the Mixer protocol.
    """

    def __init__(self, succeeds: bool = True) -> None:
        """Initialize mock mixer.

        Args:
            succeeds: Value returned from apply()
        """
        self._succeeds = succeeds
        self._applied: list[int] = []

    def apply(self, volume: int) -> bool:
        """Record a volume level."""
        self._applied.append(volume)
        return self._succeeds

    @property
    def applied(self) -> list[int]:
        """Get list of applied volume levels."""
        return self._applied.copy()

    @property
    def last_volume(self) -> int | None:
        """Get the last applied volume level."""
        if not self._applied:
            return None
        return self._applied[-1]


__all__ = ["MockDecoderProcess", "MockMixer"]
