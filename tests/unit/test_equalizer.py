"""Unit tests for the default equalizer file."""

from pathlib import Path
from unittest.mock import patch

from clockaudio.player.equalizer import default_equalizer_lines, write_default_equalizer


class TestDefaultEqualizerLines:
    """Tests for the flat profile content."""

    def test_layout(self) -> None:
        """Four comment lines, 32 flat bands, one blank line."""
        lines = default_equalizer_lines()

        assert len(lines) == 37
        assert all(line.startswith("#") for line in lines[:4])
        assert lines[4:36] == ["1 1"] * 32
        assert lines[36] == ""


class TestWriteDefaultEqualizer:
    """Tests for writing the file."""

    def test_writes_file(self, tmp_path: Path) -> None:
        """The file is written with the flat profile."""
        path = tmp_path / "eq.cfg"

        assert write_default_equalizer(path) is True

        content = path.read_text()
        lines = content.splitlines()
        assert lines[0] == "# mpg123 equalizer file"
        assert lines[4:36] == ["1 1"] * 32
        assert lines[36] == ""
        assert content.endswith("1 1\n\n")

    def test_unwritable_path(self, tmp_path: Path) -> None:
        """Write failures return False."""
        assert write_default_equalizer(tmp_path / "missing" / "eq.cfg") is False

    def test_permission_error(self, tmp_path: Path) -> None:
        """OS errors are swallowed."""
        with patch.object(Path, "write_text", side_effect=PermissionError("read-only")):
            assert write_default_equalizer(tmp_path / "eq.cfg") is False
