"""Real-time biquad filter shared between the control and audio threads.

Threading model
---------------

::

    control thread                       audio-render thread
    ──────────────                       ───────────────────
    FilterEngine.update(delta, kind)     FilterEngine.process_block(frames)
      design coefficients (no lock)        with lock:
      build new BiquadFilter                 filter.process_block(frames)
      with lock:
        swap filter + state

The lock is only ever held for a pointer swap (control side) or for one
sample/block of arithmetic (render side), so neither side can block the
other for longer than one block of filtering.

Coefficients follow the RBJ audio-EQ cookbook. The filter runs in
transposed direct form II, which keeps the same two-value delay line per
channel that ``scipy.signal.lfilter`` uses for its ``zi`` argument, so the
per-sample and per-block paths are interchangeable.
"""

import logging
import math
import threading
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
from scipy import signal

from padplayer.exceptions import FilterDesignError
from padplayer.models import FilterKind

logger = logging.getLogger(__name__)

Q_BUTTERWORTH = 1.0 / math.sqrt(2.0)

# Lowest cutoff percentage; keeps the designed cutoff strictly above 0 Hz
MIN_CUTOFF_PERCENTAGE = 0.01
MAX_CUTOFF_PERCENTAGE = 1.0

# cutoff_hz = (sample_rate / CUTOFF_DIVISOR) * percentage
CUTOFF_DIVISOR = 100.0


def clamp_percentage(percentage: float) -> float:
    """Clamp a cutoff percentage into [MIN_CUTOFF_PERCENTAGE, 1.0]."""
    return max(MIN_CUTOFF_PERCENTAGE, min(MAX_CUTOFF_PERCENTAGE, percentage))


def cutoff_frequency(percentage: float, sample_rate: float) -> float:
    """
    Map a cutoff percentage to an absolute frequency in Hz.

    The result never exceeds the Nyquist frequency.
    """
    return min((sample_rate / CUTOFF_DIVISOR) * percentage, sample_rate / 2.0)


@dataclass(frozen=True, slots=True)
class BiquadCoefficients:
    """Normalized biquad coefficients (a0 == 1)."""

    b0: float
    b1: float
    b2: float
    a1: float
    a2: float

    @classmethod
    def identity(cls) -> "BiquadCoefficients":
        """Coefficients that pass every sample through unchanged."""
        return cls(b0=1.0, b1=0.0, b2=0.0, a1=0.0, a2=0.0)

    @property
    def b(self) -> npt.NDArray[np.float64]:
        """Numerator in ``lfilter`` order."""
        return np.array([self.b0, self.b1, self.b2])

    @property
    def a(self) -> npt.NDArray[np.float64]:
        """Denominator in ``lfilter`` order."""
        return np.array([1.0, self.a1, self.a2])


def design_biquad(
    kind: FilterKind,
    sample_rate: float,
    cutoff_hz: float,
    q: float = Q_BUTTERWORTH,
) -> BiquadCoefficients:
    """
    Compute biquad coefficients for a filter topology.

    Args:
        kind: Filter topology
        sample_rate: Sample rate in Hz
        cutoff_hz: Cutoff frequency in Hz, in (0, sample_rate / 2]
        q: Quality factor (Butterworth by default)

    Raises:
        FilterDesignError: If the cutoff is outside (0, Nyquist]
    """
    if not 0.0 < cutoff_hz <= sample_rate / 2.0 or q <= 0.0:
        raise FilterDesignError(cutoff_hz, sample_rate)

    if kind == FilterKind.ALL_PASS:
        return BiquadCoefficients.identity()

    w0 = 2.0 * math.pi * cutoff_hz / sample_rate
    cos_w0 = math.cos(w0)
    alpha = math.sin(w0) / (2.0 * q)
    a0 = 1.0 + alpha

    if kind == FilterKind.LOW_PASS:
        b0 = (1.0 - cos_w0) / 2.0
        b1 = 1.0 - cos_w0
        b2 = (1.0 - cos_w0) / 2.0
    else:
        raise ValueError(f"Unsupported filter kind: {kind}")

    return BiquadCoefficients(
        b0=b0 / a0,
        b1=b1 / a0,
        b2=b2 / a0,
        a1=(-2.0 * cos_w0) / a0,
        a2=(1.0 - alpha) / a0,
    )


class BiquadFilter:
    """
    Live biquad instance: fixed coefficients plus per-channel delay lines.

    Not thread-safe on its own; FilterEngine serializes access.
    """

    def __init__(self, coefficients: BiquadCoefficients, num_channels: int = 1):
        self.coefficients = coefficients
        self.num_channels = num_channels
        self._b = coefficients.b
        self._a = coefficients.a
        # Delay line per channel: [z1, z2]
        self._state = np.zeros((num_channels, 2), dtype=np.float64)

    def process(self, sample: float, channel: int = 0) -> float:
        """Filter one sample on the given channel."""
        c = self.coefficients
        z = self._state[channel]
        z1 = float(z[0])
        z2 = float(z[1])

        out = c.b0 * sample + z1
        z[0] = c.b1 * sample - c.a1 * out + z2
        z[1] = c.b2 * sample - c.a2 * out
        return out

    def process_block(self, block: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
        """
        Filter a block of frames.

        Args:
            block: Shape (frames,) for mono or (frames, channels)

        Returns:
            Filtered block with the same shape, float32
        """
        if block.size == 0:
            return block

        if block.ndim == 1:
            out, self._state[0] = signal.lfilter(self._b, self._a, block, zi=self._state[0])
            return out.astype(np.float32)

        out = np.empty(block.shape, dtype=np.float32)
        for ch in range(block.shape[1]):
            out[:, ch], self._state[ch] = signal.lfilter(
                self._b, self._a, block[:, ch], zi=self._state[ch]
            )
        return out


@dataclass(frozen=True, slots=True)
class FilterState:
    """Snapshot of the last applied filter settings."""

    cutoff_percentage: float
    kind: FilterKind
    sample_rate: float
    cutoff_hz: float
    coefficients: BiquadCoefficients


class FilterEngine:
    """
    Owns the single live filter for one playback lane.

    ``update``/``set_percentage`` are called from the control thread;
    ``process``/``process_block`` from the audio-render thread. One lock
    guards the live filter instance and its state snapshot, so the render
    path never sees coefficients that don't match the stored settings.

    Replacing the filter resets the delay line. A topology switch can
    produce a short transient; that is accepted.
    """

    def __init__(
        self,
        sample_rate: float = 44100.0,
        num_channels: int = 2,
        kind: FilterKind = FilterKind.ALL_PASS,
        cutoff_percentage: float = MAX_CUTOFF_PERCENTAGE,
    ):
        """
        Initialize filter engine.

        Args:
            sample_rate: Sample rate of the filtered stream in Hz
            num_channels: Number of interleaved channels (one delay line each)
            kind: Initial topology (ALL_PASS = filter disabled)
            cutoff_percentage: Initial cutoff percentage
        """
        self._sample_rate = float(sample_rate)
        self._num_channels = num_channels
        self._lock = threading.Lock()

        self._state, self._filter = self._build(clamp_percentage(cutoff_percentage), kind)

    def _build(self, percentage: float, kind: FilterKind) -> tuple[FilterState, BiquadFilter]:
        cutoff_hz = cutoff_frequency(percentage, self._sample_rate)
        coefficients = design_biquad(kind, self._sample_rate, cutoff_hz)
        state = FilterState(
            cutoff_percentage=percentage,
            kind=kind,
            sample_rate=self._sample_rate,
            cutoff_hz=cutoff_hz,
            coefficients=coefficients,
        )
        return state, BiquadFilter(coefficients, self._num_channels)

    def _apply(self, percentage: float, kind: FilterKind) -> FilterState:
        # Design happens outside the lock; only the swap is guarded
        state, new_filter = self._build(percentage, kind)
        with self._lock:
            self._state = state
            self._filter = new_filter
        logger.debug(
            f"Filter set to {kind.value} at {state.cutoff_hz:.1f} Hz "
            f"({percentage:.2f})"
        )
        return state

    def update(self, cutoff_delta: float, kind: FilterKind) -> FilterState:
        """
        Move the cutoff by ``cutoff_delta`` and switch to ``kind``.

        The new percentage is ``min(1.0, previous + cutoff_delta)``, floored
        at MIN_CUTOFF_PERCENTAGE.

        Args:
            cutoff_delta: Change in cutoff percentage (normalized, 0.01 = 1 %)
            kind: Filter topology to apply

        Returns:
            The newly applied FilterState
        """
        return self._apply(clamp_percentage(self._state.cutoff_percentage + cutoff_delta), kind)

    def set_percentage(self, percentage: float, kind: FilterKind) -> FilterState:
        """Set an absolute cutoff percentage (clamped) and topology."""
        return self._apply(clamp_percentage(percentage), kind)

    def process(self, sample: float, channel: int = 0) -> float:
        """Filter a single sample (render thread)."""
        with self._lock:
            return self._filter.process(sample, channel)

    def process_block(self, block: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
        """Filter a block of frames (render thread, one lock per block)."""
        with self._lock:
            return self._filter.process_block(block)

    @property
    def state(self) -> FilterState:
        """Last applied filter settings."""
        return self._state

    @property
    def cutoff_percentage(self) -> float:
        return self._state.cutoff_percentage

    @property
    def cutoff_hz(self) -> float:
        return self._state.cutoff_hz

    @property
    def kind(self) -> FilterKind:
        return self._state.kind

    @property
    def sample_rate(self) -> float:
        return self._sample_rate

    @property
    def num_channels(self) -> int:
        return self._num_channels
