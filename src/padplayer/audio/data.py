"""Decoded audio buffers.

AudioData is a plain dataclass, not a pydantic model: it carries NumPy
arrays and is read from the audio thread, so it should have minimal
overhead.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
import numpy.typing as npt


@dataclass(slots=True)
class AudioData:
    """Raw audio data for one decoded track."""

    data: npt.NDArray[np.float32]  # Shape (frames,) or (frames, channels)
    sample_rate: int                # Sample rate in Hz
    num_channels: int               # Number of channels (1=mono, 2=stereo)
    num_frames: int                 # Number of frames (samples per channel)
    path: Optional[Path] = None     # Source file, if decoded from disk

    @classmethod
    def from_array(
        cls,
        data: npt.NDArray[np.float32],
        sample_rate: int,
        path: Optional[Path] = None,
    ) -> "AudioData":
        """
        Create AudioData from a NumPy array.

        Args:
            data: Shape (frames,) for mono or (frames, channels)
            sample_rate: Sample rate in Hz
            path: Source file, if any
        """
        if data.ndim == 1:
            num_channels = 1
            num_frames = len(data)
        elif data.ndim == 2:
            num_frames, num_channels = data.shape
        else:
            raise ValueError(f"Audio data must be 1D or 2D, got {data.ndim}D")

        if data.dtype != np.float32:
            data = data.astype(np.float32)

        return cls(
            data=data,
            sample_rate=sample_rate,
            num_channels=num_channels,
            num_frames=num_frames,
            path=path,
        )

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.num_frames / self.sample_rate

    @property
    def name(self) -> str:
        return self.path.name if self.path else "<memory>"
