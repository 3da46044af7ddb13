"""Pytest fixtures for tests."""

from pathlib import Path
from tempfile import TemporaryDirectory

import numpy as np
import pytest
import soundfile as sf

from padplayer.devices.protocols import LedMode

SAMPLE_RATE = 44100


def write_sine(path: Path, frequency: float = 440.0, duration: float = 0.05,
               sample_rate: int = SAMPLE_RATE, channels: int = 1) -> Path:
    """Write a short sine wave to ``path``."""
    t = np.arange(int(sample_rate * duration), dtype=np.float32) / sample_rate
    tone = (0.5 * np.sin(2 * np.pi * frequency * t)).astype(np.float32)
    data = tone if channels == 1 else np.column_stack([tone] * channels)
    path.parent.mkdir(parents=True, exist_ok=True)
    sf.write(str(path), data, sample_rate)
    return path


class RecordingLeds:
    """LedOutput fake that records every command."""

    def __init__(self):
        self.commands: list[tuple[LedMode, int, int]] = []

    def set_led(self, mode: LedMode, target: int, color: int) -> None:
        self.commands.append((mode, int(target), int(color)))

    def clear(self) -> None:
        self.commands.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_audio_file(temp_dir):
    """Create a simple mono test audio file."""
    return write_sine(temp_dir / "test.wav")


@pytest.fixture
def music_root(temp_dir):
    """
    Music root with one folder per pad::

        01_a/      b.wav, a.wav
        02_broken/ bad.wav (not audio), good.wav
        10_stereo/ only.wav (stereo)
        notes/     readme.wav (no pad prefix)
    """
    root = temp_dir / "music"
    write_sine(root / "01_a" / "b.wav", frequency=330.0)
    write_sine(root / "01_a" / "a.wav", frequency=220.0)

    (root / "02_broken").mkdir(parents=True)
    (root / "02_broken" / "bad.wav").write_bytes(b"not a wav file")
    write_sine(root / "02_broken" / "good.wav")

    write_sine(root / "10_stereo" / "only.wav", channels=2)
    write_sine(root / "notes" / "readme.wav")
    return root


@pytest.fixture
def leds():
    """Recording LED output."""
    return RecordingLeds()


@pytest.fixture
def make_sine():
    """Factory writing sine wave files (see write_sine)."""
    return write_sine
