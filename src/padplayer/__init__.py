"""Padplayer: folder player for MIDI pad controllers with a live filter."""

__version__ = "0.1.0"

from .audio import FilterEngine, FilteredRenderStage
from .core import ControlStateMachine, PlaybackQueue, Player

__all__ = [
    "ControlStateMachine",
    "FilterEngine",
    "FilteredRenderStage",
    "PlaybackQueue",
    "Player",
]
