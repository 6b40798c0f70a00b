"""System volume control through a one-shot mixer command."""

import logging
import subprocess
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..config import MixerConfig

logger = logging.getLogger(__name__)

MIN_VOLUME = 0
MAX_VOLUME = 100


def clamp_volume(volume: int) -> int:
    """Clamp a volume level to the 0-100 range."""
    return max(MIN_VOLUME, min(MAX_VOLUME, int(volume)))


class Mixer(Protocol):
    """Interface for applying a volume level to the audio output."""

    def apply(self, volume: int) -> bool:
        """Set the output volume.

        Args:
            volume: Volume percentage, already clamped to 0-100

        Returns:
            True if the mixer accepted the level
        """
        ...


class AmixerVolume:
    """ALSA mixer control via ``amixer set <control> N%``.

    Implements the Mixer protocol. Each call runs amixer to completion.
    """

    def __init__(self, config: "MixerConfig | None" = None) -> None:
        """Initialize mixer.

        Args:
            config: Mixer configuration (uses defaults if None)
        """
        if config is None:
            from ..config import MixerConfig

            config = MixerConfig()

        self._command = config.command
        self._control = config.control
        self._timeout = config.timeout_seconds

    def build_command(self, volume: int) -> list[str]:
        """Return the argv that sets the given volume."""
        return [self._command, "set", self._control, f"{clamp_volume(volume)}%"]

    def apply(self, volume: int) -> bool:
        """Run the mixer command and wait for it to finish."""
        cmd = self.build_command(volume)
        try:
            subprocess.run(cmd, check=True, capture_output=True, timeout=self._timeout)
        except FileNotFoundError:
            logger.error(f"Mixer command not found: {self._command}")
            return False
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            logger.error(f"Mixer command failed ({e.returncode}): {stderr}")
            return False
        except (OSError, subprocess.SubprocessError) as e:
            logger.error(f"Failed to set volume: {e}")
            return False

        logger.debug(f"Volume set to {clamp_volume(volume)}%")
        return True


__all__ = ["AmixerVolume", "MAX_VOLUME", "MIN_VOLUME", "Mixer", "clamp_volume"]
