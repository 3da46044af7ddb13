"""Generic utilities that are not specific to any domain."""

from .audio import match_channels, resample_linear

__all__ = ["match_channels", "resample_linear"]
