"""Player module for clockaudio.

Provides the playback controller and its collaborators: the decoder
supervisor, tag readers, mixer and equalizer file writer.

Usage:
    # Player driving a real mpg321/mpg123 process
    player = create_music_player(config)

    # For testing, use mock decoder and mixer
    player = create_music_player(use_mock=True)
    # or build one directly
    from clockaudio.player.mock import MockDecoderProcess, MockMixer
"""

import logging
from typing import TYPE_CHECKING

from .controller import MusicPlayer
from .decoder import DecoderProcess, DecoderVariant, buffer_size_kb, select_decoder_variant
from .mixer import AmixerVolume, Mixer, clamp_volume
from .sources import PlaybackSource
from .state import PlaybackState

if TYPE_CHECKING:
    from ..config import ClockAudioConfig

logger = logging.getLogger(__name__)


def create_music_player(
    config: "ClockAudioConfig | None" = None,
    use_mock: bool = False,
) -> MusicPlayer:
    """Create a MusicPlayer wired to its collaborators.

    Args:
        config: Full configuration (uses defaults if None)
        use_mock: If True, use mock decoder and mixer for testing

    Returns:
        MusicPlayer; the decoder is not started until the first play()
    """
    if config is None:
        from ..config import ClockAudioConfig

        config = ClockAudioConfig()

    decoder: DecoderProcess
    mixer: Mixer

    if use_mock:
        from .mock import MockDecoderProcess, MockMixer

        logger.info("Player: Using mock decoder and mixer")
        decoder = MockDecoderProcess()
        mixer = MockMixer()
    else:
        from .process import SubprocessDecoder

        decoder = SubprocessDecoder(config.decoder)
        mixer = AmixerVolume(config.mixer)

    return MusicPlayer(decoder=decoder, mixer=mixer, config=config.player)


__all__ = [
    "AmixerVolume",
    "DecoderProcess",
    "DecoderVariant",
    "Mixer",
    "MusicPlayer",
    "PlaybackSource",
    "PlaybackState",
    "buffer_size_kb",
    "clamp_volume",
    "create_music_player",
    "select_decoder_variant",
]
