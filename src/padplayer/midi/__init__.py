"""MIDI port management."""

from .manager import MidiManager

__all__ = ["MidiManager"]
