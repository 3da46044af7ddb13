"""LED output for the APC Key 25."""

import logging
from typing import Callable

import mido

from padplayer.devices.protocols import LedMode, LedOutput

from .mapper import NUM_PADS
from .palette import LedColor

logger = logging.getLogger(__name__)


class ApcOutput(LedOutput):
    """
    Send LED commands as note_on messages.

    The LED mode is the MIDI channel, the target is the note and the
    color is the velocity. Failures are logged and dropped: LED feedback
    is best effort.
    """

    def __init__(self, send: Callable[[mido.Message], bool]):
        """
        Initialize LED output.

        Args:
            send: Function sending a MIDI message, returning False on failure
        """
        self._send = send

    def set_led(self, mode: LedMode, target: int, color: int) -> None:
        try:
            msg = mido.Message("note_on", channel=int(mode), note=int(target), velocity=int(color))
        except ValueError as e:
            logger.debug(f"Invalid LED command ({mode}, {target}, {color}): {e}")
            return

        if not self._send(msg):
            logger.debug(f"Failed to set LED {target}")

    def clear_pads(self) -> None:
        """Turn every pad LED off."""
        for note in range(NUM_PADS):
            self.set_led(LedMode.ON_100_PERCENT, note, LedColor.OFF)
