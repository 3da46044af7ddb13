"""Audio array utilities."""

import numpy as np
import numpy.typing as npt


def match_channels(frames: npt.NDArray[np.float32], num_channels: int) -> npt.NDArray[np.float32]:
    """
    Convert audio frames to a given channel count.

    Args:
        frames: Shape (frames,) for mono or (frames, channels)
        num_channels: Target channel count (1 or 2)

    Returns:
        Shape (frames,) when num_channels == 1, else (frames, num_channels)
    """
    source_channels = 1 if frames.ndim == 1 else frames.shape[1]

    if num_channels == 1:
        if source_channels == 1:
            return frames if frames.ndim == 1 else frames[:, 0]
        # Down-mix to mono
        return np.mean(frames, axis=1, dtype=np.float32)

    if source_channels == 1:
        mono = frames if frames.ndim == 1 else frames[:, 0]
        return np.column_stack([mono] * num_channels).astype(np.float32, copy=False)

    if source_channels >= num_channels:
        # Multi-channel to stereo: take the first channels
        return frames[:, :num_channels]

    raise ValueError(f"Cannot map {source_channels} channels to {num_channels}")


def resample_linear(
    data: npt.NDArray[np.float32],
    orig_sr: int,
    target_sr: int,
) -> npt.NDArray[np.float32]:
    """
    Simple linear resampling.

    Args:
        data: Shape (frames,) or (frames, channels)
        orig_sr: Original sample rate
        target_sr: Target sample rate
    """
    if orig_sr == target_sr or len(data) == 0:
        return data

    new_length = max(1, int(len(data) * target_sr / orig_sr))
    x_old = np.linspace(0, 1, len(data))
    x_new = np.linspace(0, 1, new_length)

    if data.ndim == 1:
        return np.interp(x_new, x_old, data).astype(np.float32)

    resampled = np.zeros((new_length, data.shape[1]), dtype=np.float32)
    for ch in range(data.shape[1]):
        resampled[:, ch] = np.interp(x_new, x_old, data[:, ch])
    return resampled
