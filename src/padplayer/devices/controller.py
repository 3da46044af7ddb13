"""
Controller facade: MIDI ports in, controller events out, LED commands back.

::

    mido I/O thread                         control thread
    ───────────────                         ──────────────
    MidiManager ─► ApcInput.parse_message ─► on_event callback
                                               (ControlDispatcher.submit)

    ControlStateMachine ─► ApcController.set_led ─► ApcOutput ─► MidiManager.send
"""

import logging
from typing import Callable, Optional

import mido

from padplayer.midi import MidiManager

from .apc import ApcInput, ApcOutput
from .protocols import ControllerEvent, LedMode, LedOutput

logger = logging.getLogger(__name__)


class ApcController(LedOutput):
    """High-level handle on an APC Key 25."""

    def __init__(self, port_filter: str = "APC Key 25", poll_interval: float = 2.0):
        """
        Initialize controller.

        Args:
            port_filter: Substring identifying the controller's MIDI ports
            poll_interval: How often to check for device changes (seconds)
        """
        self._port_filter = port_filter
        self._midi = MidiManager(device_filter=self._matches, poll_interval=poll_interval)
        self._input = ApcInput()
        self._output = ApcOutput(self._midi.send)
        self._on_event: Optional[Callable[[ControllerEvent], None]] = None

        self._midi.on_message(self._handle_message)
        self._midi.on_connection_changed(self._handle_connection_changed)

    def _matches(self, port_name: str) -> bool:
        return self._port_filter.lower() in port_name.lower()

    def on_event(self, callback: Callable[[ControllerEvent], None]) -> None:
        """Register the consumer of parsed controller events."""
        self._on_event = callback

    def start(self) -> None:
        """Start monitoring for the controller."""
        self._midi.start()
        logger.info(f"Waiting for MIDI controller matching '{self._port_filter}'")

    def stop(self) -> None:
        """Turn the pads off and close the MIDI ports."""
        if self._midi.is_connected:
            self._output.clear_pads()
        self._midi.stop()
        logger.info("Controller stopped")

    def set_led(self, mode: LedMode, target: int, color: int) -> None:
        self._output.set_led(mode, target, color)

    def _handle_message(self, msg: mido.Message) -> None:
        """Called from mido's internal I/O thread."""
        event = self._input.parse_message(msg)
        if event is None:
            logger.debug(f"Ignored message: {msg}")
            return

        if self._on_event:
            self._on_event(event)

    def _handle_connection_changed(self, is_connected: bool, port_name: Optional[str]) -> None:
        if is_connected:
            self._output.clear_pads()
        logger.info(
            f"MIDI controller {'connected' if is_connected else 'disconnected'}: {port_name}"
        )

    @property
    def is_connected(self) -> bool:
        return self._midi.is_connected
