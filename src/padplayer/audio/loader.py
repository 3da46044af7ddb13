"""Track loader for decoding audio files."""

import logging
from pathlib import Path
from typing import Optional

import soundfile as sf

from padplayer.exceptions import TrackLoadError
from padplayer.utils import match_channels, resample_linear

from .data import AudioData

logger = logging.getLogger(__name__)


class TrackLoader:
    """
    Decode audio files into AudioData matched to the output stream.

    Handles every format libsndfile supports (WAV, FLAC, OGG, MP3 with
    libsndfile >= 1.1).
    """

    def __init__(self, target_sample_rate: Optional[int] = None, num_channels: Optional[int] = None):
        """
        Initialize track loader.

        Args:
            target_sample_rate: If set, resample all audio to this rate
            num_channels: If set, convert all audio to this channel count
        """
        self.target_sample_rate = target_sample_rate
        self.num_channels = num_channels

    def load(self, path: Path) -> AudioData:
        """
        Decode a track.

        Args:
            path: Path to audio file

        Returns:
            AudioData at the target sample rate and channel count

        Raises:
            TrackLoadError: If the file is missing, empty, or cannot be decoded
        """
        path = Path(path)
        if not path.is_file():
            raise TrackLoadError(path, "file not found")

        try:
            data, sample_rate = sf.read(str(path), dtype="float32", always_2d=False)
        except (RuntimeError, OSError) as e:
            raise TrackLoadError(path, str(e)) from e

        if len(data) == 0:
            raise TrackLoadError(path, "file is empty")

        if self.target_sample_rate and sample_rate != self.target_sample_rate:
            logger.debug(f"Resampling {path.name} from {sample_rate} to {self.target_sample_rate} Hz")
            data = resample_linear(data, sample_rate, self.target_sample_rate)
            sample_rate = self.target_sample_rate

        if self.num_channels:
            data = match_channels(data, self.num_channels)

        return AudioData.from_array(data, sample_rate, path=path)
