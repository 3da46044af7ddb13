"""Playback lanes, player and control logic."""

from .control import ControlStateMachine, SessionState, ToggleSet
from .dispatcher import ControlDispatcher
from .playback_queue import PlaybackQueue, clamp_volume
from .player import Player

__all__ = [
    "ControlDispatcher",
    "ControlStateMachine",
    "PlaybackQueue",
    "Player",
    "SessionState",
    "ToggleSet",
    "clamp_volume",
]
