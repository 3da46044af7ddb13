"""Audio mixer for combining playback lanes."""

from typing import Optional, Sequence

import numpy as np
import numpy.typing as npt


class AudioMixer:
    """
    Sum the blocks rendered by each playback lane into one output buffer.

    Called from the audio callback; holds no state besides the channel count.
    """

    def __init__(self, num_channels: int = 2):
        """
        Initialize audio mixer.

        Args:
            num_channels: Number of output channels (1=mono, 2=stereo)
        """
        self.num_channels = num_channels

    def mix(
        self,
        blocks: Sequence[Optional[npt.NDArray[np.float32]]],
        num_frames: int,
    ) -> npt.NDArray[np.float32]:
        """
        Mix lane blocks into a single buffer.

        Args:
            blocks: Blocks of shape (n, num_channels); None entries are skipped
            num_frames: Number of frames to generate

        Returns:
            Mixed buffer of shape (num_frames, num_channels)
        """
        output = np.zeros((num_frames, self.num_channels), dtype=np.float32)

        for block in blocks:
            if block is None or len(block) == 0:
                continue
            add_length = min(len(block), num_frames)
            output[:add_length] += block[:add_length]

        return output

    @staticmethod
    def clip(buffer: npt.NDArray[np.float32]) -> None:
        """
        Clip audio buffer to valid range [-1.0, 1.0] in-place.

        Args:
            buffer: Audio buffer to clip
        """
        np.clip(buffer, -1.0, 1.0, out=buffer)
