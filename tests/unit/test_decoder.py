"""Unit tests for decoder variant selection."""

from unittest.mock import patch

from clockaudio.config import DecoderConfig
from clockaudio.player.decoder import (
    PREFERRED_GRACE_SECONDS,
    buffer_size_kb,
    select_decoder_variant,
)


class TestBufferSize:
    """Tests for buffer_size_kb."""

    def test_desktop_buffer(self) -> None:
        """Two seconds of CD audio is 344 KB."""
        assert buffer_size_kb(2) == 344

    def test_embedded_buffer(self) -> None:
        """Eighteen seconds of CD audio is 3100 KB."""
        assert buffer_size_kb(18) == 3100

    def test_zero(self) -> None:
        """No buffer time means no buffer."""
        assert buffer_size_kb(0) == 0


class TestSelectDecoderVariant:
    """Tests for select_decoder_variant."""

    def test_preferred_binary_when_present(self, tmp_path) -> None:
        """The preferred decoder is used when its binary exists."""
        binary = tmp_path / "mpg321"
        binary.write_text("#!/bin/sh\n")
        config = DecoderConfig(preferred_binary=str(binary))

        variant = select_decoder_variant(config)

        assert variant.name == "mpg321"
        assert variant.command == [str(binary), "-R", "1"]
        assert variant.buffer_grace_seconds == PREFERRED_GRACE_SECONDS

    def test_fallback_with_configured_buffer(self, tmp_path) -> None:
        """The fallback decoder gets an explicit buffer size."""
        config = DecoderConfig(
            preferred_binary=str(tmp_path / "missing"),
            buffer_time_seconds=18,
        )

        variant = select_decoder_variant(config)

        assert variant.name == "mpg123"
        assert variant.command == [
            "mpg123",
            "--buffer",
            "3100",
            "--rva-mix",
            "--preload",
            "1.0",
            "-R",
        ]
        assert variant.buffer_grace_seconds == 18

    def test_fallback_platform_default_desktop(self, tmp_path) -> None:
        """Without a configured buffer time the platform decides."""
        config = DecoderConfig(preferred_binary=str(tmp_path / "missing"))

        with patch("clockaudio.player.decoder.default_buffer_time", return_value=2):
            variant = select_decoder_variant(config)

        assert variant.command[1:3] == ["--buffer", "344"]
        assert variant.buffer_grace_seconds == 2

    def test_fallback_platform_default_embedded(self, tmp_path) -> None:
        """Embedded targets get the long buffer."""
        config = DecoderConfig(preferred_binary=str(tmp_path / "missing"))

        with patch("clockaudio.player.decoder.default_buffer_time", return_value=18):
            variant = select_decoder_variant(config)

        assert variant.buffer_grace_seconds == 18
