"""Shared fixtures for clockaudio tests."""

from pathlib import Path

import pytest

from clockaudio.config import PlayerConfig
from clockaudio.player import MusicPlayer
from clockaudio.player.mock import MockDecoderProcess, MockMixer


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock."""
    return FakeClock()


@pytest.fixture
def decoder() -> MockDecoderProcess:
    """Provide a mock decoder."""
    return MockDecoderProcess()


@pytest.fixture
def mixer() -> MockMixer:
    """Provide a mock mixer."""
    return MockMixer()


@pytest.fixture
def player(decoder: MockDecoderProcess, mixer: MockMixer, clock: FakeClock) -> MusicPlayer:
    """Provide a player wired to mocks and the fake clock."""
    return MusicPlayer(decoder=decoder, mixer=mixer, config=PlayerConfig(), clock=clock)


@pytest.fixture
def song(tmp_path: Path) -> Path:
    """Provide an untagged song file."""
    path = tmp_path / "song.mp3"
    path.write_bytes(bytes(1024))
    return path


@pytest.fixture
def other_song(tmp_path: Path) -> Path:
    """Provide a second untagged song file."""
    path = tmp_path / "other.mp3"
    path.write_bytes(bytes(1024))
    return path
