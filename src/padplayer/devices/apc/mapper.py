"""Note and CC layout of the Akai APC Key 25 mk2."""

from padplayer.devices.protocols import Button

NUM_PADS = 40          # 5 rows x 8 columns, notes 0-39
KNOB_CC_OFFSET = 48    # knobs 1-8 send CC 48-55
NUM_KNOBS = 8

_BUTTON_NOTES = {button.value: button for button in Button}


class ApcKey25Mapper:
    """Translate between hardware note/CC numbers and logical controls."""

    num_pads = NUM_PADS

    @staticmethod
    def note_to_pad(note: int) -> int | None:
        """Pad index for a note, or None if the note is not a pad."""
        return note if 0 <= note < NUM_PADS else None

    @staticmethod
    def pad_to_note(pad_index: int) -> int:
        """Note for a pad index."""
        if not 0 <= pad_index < NUM_PADS:
            raise ValueError(f"Invalid pad index: {pad_index} (valid: 0-{NUM_PADS - 1})")
        return pad_index

    @staticmethod
    def note_to_button(note: int) -> Button | None:
        """Button for a note, or None if the note is not a button."""
        return _BUTTON_NOTES.get(note)

    @staticmethod
    def cc_to_knob(control: int) -> int | None:
        """Knob number (1-8) for a CC, or None if the CC is not a knob."""
        knob = control - KNOB_CC_OFFSET + 1
        return knob if 1 <= knob <= NUM_KNOBS else None
