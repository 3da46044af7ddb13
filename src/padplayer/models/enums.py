"""Enumerations for padplayer."""

from enum import Enum


class FilterKind(str, Enum):
    """Filter topologies applied to the music lane."""

    LOW_PASS = "low_pass"  # Butterworth low-pass at the current cutoff
    ALL_PASS = "all_pass"  # Pass-through, used as "filter disabled"
