"""Controller events and device protocols.

Each physical input group produces its own event type; consumers
dispatch on the event class.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol


class Button(IntEnum):
    """Non-pad buttons, valued by their note number on the APC Key 25."""

    UP = 64
    DOWN = 65
    LEFT = 66
    RIGHT = 67
    VOLUME = 68
    PAN = 69
    SEND = 70
    DEVICE = 71
    STOP_ALL_CLIPS = 81
    CLIP_STOP = 82
    SOLO = 83
    REC_ARM = 84
    MUTE = 85
    SELECT = 86
    RESUME_PAUSE = 91
    START = 93
    SHIFT = 98


class LedMode(IntEnum):
    """LED brightness/animation, sent as the MIDI channel of a note_on."""

    ON_10_PERCENT = 0
    ON_25_PERCENT = 1
    ON_50_PERCENT = 2
    ON_65_PERCENT = 3
    ON_75_PERCENT = 4
    ON_90_PERCENT = 5
    ON_100_PERCENT = 6
    PULSING_1_16 = 7
    PULSING_1_8 = 8
    PULSING_1_4 = 9
    PULSING_1_2 = 10
    BLINKING_1_24 = 11
    BLINKING_1_16 = 12
    BLINKING_1_8 = 13
    BLINKING_1_4 = 14
    BLINKING_1_2 = 15


class ControllerEvent:
    """Base class for input events from the controller."""

    pass


@dataclass(frozen=True)
class PadPressEvent(ControllerEvent):
    """Pad was pressed."""

    pad_index: int
    velocity: int


@dataclass(frozen=True)
class PadReleaseEvent(ControllerEvent):
    """Pad was released."""

    pad_index: int


@dataclass(frozen=True)
class KnobTurnEvent(ControllerEvent):
    """Endless encoder moved. ``value`` > 63 means counter-clockwise."""

    knob: int  # 1-8
    value: int


@dataclass(frozen=True)
class ButtonEvent(ControllerEvent):
    """Button pressed (value > 0) or released (value == 0)."""

    button: Button
    value: int

    @property
    def is_press(self) -> bool:
        return self.value > 0


class LedOutput(Protocol):
    """Protocol for LED feedback. Best effort: never raises, never waits."""

    def set_led(self, mode: LedMode, target: int, color: int) -> None:
        """
        Set one LED.

        Args:
            mode: Brightness/animation
            target: Pad index or button note
            color: Palette color index (0 = off)
        """
        ...
