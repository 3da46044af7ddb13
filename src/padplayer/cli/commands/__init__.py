"""CLI commands for padplayer."""

from .audio import audio_group
from .midi import midi_group

__all__ = ["audio_group", "midi_group"]
