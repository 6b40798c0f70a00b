"""Default mpg123 equalizer file.

mpg123 reads a 32 band, 2 channel equalizer file. When the configured
file does not exist a flat profile is written so it can be edited later.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

EQUALIZER_BANDS = 32
FLAT_BAND = "1 1"
EQUALIZER_HEADER = (
    "# mpg123 equalizer file",
    "# 32 Band 2 Channel",
    "# Levels 0 -> 1 e.g. 0.5 0.5",
    "#",
)


def default_equalizer_lines() -> list[str]:
    """Return the lines of a flat equalizer profile."""
    return [*EQUALIZER_HEADER, *([FLAT_BAND] * EQUALIZER_BANDS), ""]


def write_default_equalizer(path: str | Path) -> bool:
    """Write a flat equalizer profile.

    Args:
        path: Destination file

    Returns:
        True if the file was written
    """
    path = Path(path).expanduser()
    content = "\n".join(default_equalizer_lines()) + "\n"
    try:
        path.write_text(content, encoding="ascii")
    except OSError as e:
        logger.warning(f"Could not write default equalizer {path}: {e}")
        return False

    logger.info(f"Wrote default equalizer file {path}")
    return True


__all__ = [
    "EQUALIZER_BANDS",
    "EQUALIZER_HEADER",
    "default_equalizer_lines",
    "write_default_equalizer",
]
