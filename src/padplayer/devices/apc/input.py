"""MIDI input parsing for the APC Key 25.

::

    note_on 12, velocity 100  ->  PadPressEvent(pad_index=12, velocity=100)
    note_on 85, velocity 127  ->  ButtonEvent(Button.MUTE, 127)
    note_off 85               ->  ButtonEvent(Button.MUTE, 0)
    control_change 55, 127    ->  KnobTurnEvent(knob=8, value=127)

Note-on with velocity 0 is a release, as in plain MIDI.
"""

import mido

from padplayer.devices.protocols import (
    ButtonEvent,
    ControllerEvent,
    KnobTurnEvent,
    PadPressEvent,
    PadReleaseEvent,
)

from .mapper import ApcKey25Mapper


class ApcInput:
    """Parse APC Key 25 MIDI messages into controller events."""

    def __init__(self, mapper: ApcKey25Mapper | None = None):
        self.mapper = mapper or ApcKey25Mapper()

    def parse_message(self, msg: mido.Message) -> ControllerEvent | None:
        """
        Parse a MIDI message.

        Args:
            msg: Incoming MIDI message

        Returns:
            ControllerEvent, or None if the message should be ignored
        """
        if msg.type in ("note_on", "note_off"):
            value = msg.velocity if msg.type == "note_on" else 0

            pad_index = self.mapper.note_to_pad(msg.note)
            if pad_index is not None:
                if value > 0:
                    return PadPressEvent(pad_index, value)
                return PadReleaseEvent(pad_index)

            button = self.mapper.note_to_button(msg.note)
            if button is not None:
                return ButtonEvent(button, value)
            return None

        if msg.type == "control_change":
            knob = self.mapper.cc_to_knob(msg.control)
            if knob is not None:
                return KnobTurnEvent(knob, msg.value)

        # Clock, sysex, unknown CCs
        return None
