"""Audio engine: decoding, filtering, mixing and output."""

from .data import AudioData
from .device import AudioDevice
from .filter import BiquadCoefficients, BiquadFilter, FilterEngine, FilterState, design_biquad
from .loader import TrackLoader
from .mixer import AudioMixer
from .render import FilteredRenderStage, SampleSource, TrackSource

__all__ = [
    "AudioData",
    "AudioDevice",
    "AudioMixer",
    "BiquadCoefficients",
    "BiquadFilter",
    "FilterEngine",
    "FilterState",
    "FilteredRenderStage",
    "SampleSource",
    "TrackLoader",
    "TrackSource",
    "design_biquad",
]
