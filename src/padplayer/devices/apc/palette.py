"""APC Key 25 mk2 LED palette."""

from enum import IntEnum


class LedColor(IntEnum):
    """Named entries of the 128-color pad palette."""

    OFF = 0
    DARK_GREY = 1
    GREY = 2
    WHITE = 3
    RED = 5
    ORANGE = 9
    YELLOW = 13
    LIME = 17
    GREEN = 21
    CYAN = 33
    BLUE = 45
    PURPLE = 49
    MAGENTA = 53
    PINK = 57


PALETTE_SIZE = 128
ACCENT_COLOR = LedColor.GREEN


def palette_color(index: int, default: int = LedColor.GREEN) -> int:
    """
    Palette color for an arbitrary index.

    Args:
        index: Palette index
        default: Returned when ``index`` is outside the palette

    Returns:
        ``index`` if it is a valid palette index, else ``default``
    """
    if 0 <= index < PALETTE_SIZE:
        return index
    return int(default)


def pad_color(pad_index: int) -> int:
    """Color used to light an active pad: palette entry ``pad_index + 1``."""
    return palette_color(pad_index + 1)
