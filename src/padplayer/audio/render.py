"""Sample sources pulled by the audio-render thread.

A sample source is a sequence of interleaved float samples plus stream
metadata. It can be pulled one sample at a time (``next_sample``) or in
whole frames (``read``); the audio callback uses ``read`` so that locks
and NumPy calls happen once per block instead of once per sample.
"""

from typing import Optional, Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt

from .data import AudioData
from .filter import FilterEngine


@runtime_checkable
class SampleSource(Protocol):
    """Protocol for anything the render thread can pull samples from."""

    @property
    def channels(self) -> int:
        """Number of interleaved channels."""
        ...

    @property
    def sample_rate(self) -> int:
        """Sample rate in Hz."""
        ...

    @property
    def total_duration(self) -> Optional[float]:
        """Total duration in seconds, or None if unknown/endless."""
        ...

    @property
    def current_span_len(self) -> Optional[int]:
        """Samples left before the stream parameters may change, or None."""
        ...

    def next_sample(self) -> Optional[float]:
        """Next interleaved sample, or None at end of stream."""
        ...

    def read(self, frames: int) -> Optional[npt.NDArray[np.float32]]:
        """
        Up to ``frames`` whole frames, shape (n, channels).

        Returns None at end of stream. May return fewer frames than asked.
        """
        ...


class TrackSource:
    """A decoded track exposed as a finite sample source."""

    def __init__(self, audio: AudioData):
        self._audio = audio
        data = audio.data
        self._frames = data.reshape(-1, 1) if data.ndim == 1 else data
        self._total_samples = self._frames.shape[0] * self._frames.shape[1]
        self._cursor = 0  # interleaved sample index

    @property
    def audio(self) -> AudioData:
        return self._audio

    @property
    def name(self) -> str:
        return self._audio.name

    @property
    def channels(self) -> int:
        return self._frames.shape[1]

    @property
    def sample_rate(self) -> int:
        return self._audio.sample_rate

    @property
    def total_duration(self) -> Optional[float]:
        return self._audio.duration

    @property
    def current_span_len(self) -> Optional[int]:
        return self._total_samples - self._cursor

    def next_sample(self) -> Optional[float]:
        if self._cursor >= self._total_samples:
            return None
        frame, channel = divmod(self._cursor, self.channels)
        self._cursor += 1
        return float(self._frames[frame, channel])

    def read(self, frames: int) -> Optional[npt.NDArray[np.float32]]:
        if self._cursor % self.channels:
            raise RuntimeError("read() called in the middle of a frame")

        start = self._cursor // self.channels
        if start >= self._frames.shape[0]:
            return None

        block = self._frames[start:start + frames]
        self._cursor += block.shape[0] * self.channels
        return block


class FilteredRenderStage:
    """
    Pass every sample of a source through a FilterEngine.

    Transparent to everything except sample values: channel count,
    sample rate, duration and span length are those of the wrapped source.
    Runs on the audio-render thread and performs no I/O.
    """

    def __init__(self, source: SampleSource, engine: FilterEngine):
        """
        Initialize render stage.

        Args:
            source: Underlying sample source
            engine: Filter engine applied to every pulled sample

        Raises:
            ValueError: If the engine has fewer delay lines than the source has channels
        """
        if engine.num_channels < source.channels:
            raise ValueError(
                f"Filter engine has {engine.num_channels} channel(s), "
                f"source has {source.channels}"
            )
        self._source = source
        self._engine = engine
        self._channel = 0  # channel of the next interleaved sample

    @property
    def source(self) -> SampleSource:
        return self._source

    @property
    def channels(self) -> int:
        return self._source.channels

    @property
    def sample_rate(self) -> int:
        return self._source.sample_rate

    @property
    def total_duration(self) -> Optional[float]:
        return self._source.total_duration

    @property
    def current_span_len(self) -> Optional[int]:
        return self._source.current_span_len

    def next_sample(self) -> Optional[float]:
        """Pull one sample from the source and filter it."""
        sample = self._source.next_sample()
        if sample is None:
            return None

        channel = self._channel
        self._channel = (channel + 1) % self._source.channels
        return self._engine.process(sample, channel)

    def read(self, frames: int) -> Optional[npt.NDArray[np.float32]]:
        """Pull a block of frames from the source and filter it."""
        block = self._source.read(frames)
        if block is None:
            return None
        return self._engine.process_block(block)
