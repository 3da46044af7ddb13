"""Controller devices: input events and LED output."""

from .controller import ApcController
from .protocols import (
    Button,
    ButtonEvent,
    ControllerEvent,
    KnobTurnEvent,
    LedMode,
    LedOutput,
    PadPressEvent,
    PadReleaseEvent,
)

__all__ = [
    "ApcController",
    "Button",
    "ButtonEvent",
    "ControllerEvent",
    "KnobTurnEvent",
    "LedMode",
    "LedOutput",
    "PadPressEvent",
    "PadReleaseEvent",
]
