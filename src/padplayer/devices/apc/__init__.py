"""Akai APC Key 25 support."""

from .input import ApcInput
from .mapper import ApcKey25Mapper
from .output import ApcOutput
from .palette import ACCENT_COLOR, LedColor, pad_color, palette_color

__all__ = [
    "ACCENT_COLOR",
    "ApcInput",
    "ApcKey25Mapper",
    "ApcOutput",
    "LedColor",
    "pad_color",
    "palette_color",
]
