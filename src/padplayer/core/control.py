"""Controller-driven state machine.

One event in, one mutation out. Events are handled strictly one at a
time on the control thread (see ControlDispatcher); this class holds no
lock of its own.

==================  ===============================================
Event               Effect
==================  ===============================================
Pad press n         play folder ``{n:02}_*`` (music lane, or
                    effects lane while Shift is on), light pad n
Knob 1              music volume +/- ``volume_step`` unless muted
Knob 8              low-pass cutoff +/- ``filter_step`` percent
Resume/Pause        filter on (low-pass, fully open) / off (all-pass)
Mute                volume to 0 / restore previous volume
Other toggles       flip flag, mirror on LED
Up/Down/Left/Right  LED while held; Right also skips to next track
==================  ===============================================
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

from padplayer.audio import FilterEngine
from padplayer.devices.apc import ACCENT_COLOR, LedColor, pad_color
from padplayer.devices.protocols import (
    Button,
    ButtonEvent,
    ControllerEvent,
    KnobTurnEvent,
    LedMode,
    LedOutput,
    PadPressEvent,
)
from padplayer.exceptions import FolderNotFoundError, TrackLoadError
from padplayer.library import resolve_pad
from padplayer.models import FilterKind

from .playback_queue import PlaybackQueue

logger = logging.getLogger(__name__)

VOLUME_KNOB = 1
FILTER_KNOB = 8

# Relative encoders send 1..63 clockwise and 65..127 counter-clockwise
ENCODER_CENTER = 63


@dataclass(slots=True)
class ToggleSet:
    """Independent on/off flags for the controller's toggle buttons."""

    clip_stop: bool = False
    solo: bool = False
    mute: bool = False
    rec_arm: bool = False
    select: bool = False
    stop_all: bool = False
    volume: bool = False
    pan: bool = False
    send: bool = False
    device: bool = False
    shift: bool = False
    filter: bool = False
    start: bool = False

    def toggle(self, name: str) -> bool:
        """Flip a flag and return its new value."""
        value = not getattr(self, name)
        setattr(self, name, value)
        return value

    def as_dict(self) -> dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# Button -> ToggleSet flag, for buttons that only flip a flag
TOGGLE_BUTTONS: dict[Button, str] = {
    Button.CLIP_STOP: "clip_stop",
    Button.SOLO: "solo",
    Button.REC_ARM: "rec_arm",
    Button.SELECT: "select",
    Button.STOP_ALL_CLIPS: "stop_all",
    Button.VOLUME: "volume",
    Button.PAN: "pan",
    Button.SEND: "send",
    Button.DEVICE: "device",
    Button.SHIFT: "shift",
    Button.START: "start",
}

DIRECTIONAL_BUTTONS = frozenset({Button.UP, Button.DOWN, Button.LEFT, Button.RIGHT})


@dataclass(slots=True)
class SessionState:
    """Everything the control thread remembers between events."""

    music_folder: Path
    previous_volume: float = 1.0  # restored on unmute
    active_pad: Optional[int] = None
    toggles: ToggleSet = field(default_factory=ToggleSet)


class ControlStateMachine:
    """Apply controller events to the filter, the playback lanes and the LEDs."""

    def __init__(
        self,
        session: SessionState,
        music: PlaybackQueue,
        effects: PlaybackQueue,
        filter_engine: FilterEngine,
        leds: LedOutput,
        volume_step: float = 0.01,
        filter_step: float = 1.0,
    ):
        """
        Initialize the state machine.

        Args:
            session: Session state, owned by the control thread
            music: Filtered playback lane
            effects: Unfiltered playback lane (pads while Shift is on)
            filter_engine: Filter applied to the music lane
            leds: LED output
            volume_step: Volume change per knob-1 tick
            filter_step: Cutoff change per knob-8 tick, in percentage points
        """
        self.session = session
        self.music = music
        self.effects = effects
        self.filter = filter_engine
        self.leds = leds
        self.volume_step = volume_step
        self.filter_step = filter_step

    def handle(self, event: ControllerEvent) -> None:
        """
        Apply one controller event.

        Raises:
            FilterDesignError: If a filter update breaks the cutoff invariant
        """
        logger.debug(f"Event: {event}")

        if isinstance(event, PadPressEvent):
            self._handle_pad(event.pad_index)
        elif isinstance(event, KnobTurnEvent):
            self._handle_knob(event.knob, event.value)
        elif isinstance(event, ButtonEvent):
            self._handle_button(event)
        # Pad releases and unknown events are ignored

    # =================================================================
    # Pads
    # =================================================================

    def _handle_pad(self, pad_index: int) -> None:
        try:
            selection = resolve_pad(self.session.music_folder, pad_index)
        except (FolderNotFoundError, OSError) as e:
            logger.warning(f"No folder associated with pad {pad_index}: {e}")
            return

        lane = self.effects if self.session.toggles.shift else self.music
        logger.info(f"Playing folder {selection.folder_name!r} on the {lane.name} lane")
        self._play_tracks(lane, selection.tracks)

        previous = self.session.active_pad
        if previous is not None:
            self.leds.set_led(LedMode.ON_10_PERCENT, previous, LedColor.OFF)

        self.session.active_pad = pad_index
        self.leds.set_led(LedMode.ON_100_PERCENT, pad_index, pad_color(pad_index))

    def _play_tracks(self, lane: PlaybackQueue, tracks: list[Path]) -> None:
        """Start the first loadable track and queue the rest behind it."""
        for i, track in enumerate(tracks):
            try:
                lane.replace_and_play(track)
            except TrackLoadError as e:
                logger.error(f"Skipping track: {e.technical_message}")
                continue

            # The lane decodes queued tracks lazily and skips broken ones
            for queued in tracks[i + 1:]:
                lane.enqueue(queued)
            return

        logger.warning(f"No playable track among {len(tracks)} file(s)")

    # =================================================================
    # Knobs
    # =================================================================

    def _handle_knob(self, knob: int, value: int) -> None:
        direction = -1.0 if value > ENCODER_CENTER else 1.0

        if knob == VOLUME_KNOB:
            if not self.session.toggles.mute:
                volume = self.music.change_volume(direction * self.volume_step)
                logger.debug(f"Volume: {volume:.2f}")
        elif knob == FILTER_KNOB:
            self.filter.update(direction * self.filter_step / 100.0, FilterKind.LOW_PASS)

    # =================================================================
    # Buttons
    # =================================================================

    def _handle_button(self, event: ButtonEvent) -> None:
        button = event.button

        if button in DIRECTIONAL_BUTTONS:
            self._handle_directional(button, event.is_press)
            return

        # Toggles react to the press only
        if not event.is_press:
            return

        if button == Button.RESUME_PAUSE:
            self._toggle_filter()
        elif button == Button.MUTE:
            self._toggle_mute()
        elif button in TOGGLE_BUTTONS:
            self._toggle(button, TOGGLE_BUTTONS[button])

    def _toggle(self, button: Button, flag: str) -> bool:
        """Flip a flag and mirror it on the button LED."""
        value = self.session.toggles.toggle(flag)
        self.leds.set_led(LedMode.ON_100_PERCENT, button, ACCENT_COLOR if value else LedColor.OFF)
        logger.debug(f"{flag} {'on' if value else 'off'}")
        return value

    def _toggle_filter(self) -> None:
        if self._toggle(Button.RESUME_PAUSE, "filter"):
            self.filter.set_percentage(1.0, FilterKind.LOW_PASS)
        else:
            # Back to pass-through, left fully open for the next enable
            self.filter.set_percentage(0.0, FilterKind.ALL_PASS)
            self.filter.update(1.0, FilterKind.ALL_PASS)
        logger.info(f"Filter {self.filter.kind.value} at {self.filter.cutoff_hz:.1f} Hz")

    def _toggle_mute(self) -> None:
        if self._toggle(Button.MUTE, "mute"):
            self.session.previous_volume = self.music.volume
            self.music.volume = 0.0
        else:
            self.music.volume = self.session.previous_volume

    def _handle_directional(self, button: Button, pressed: bool) -> None:
        self.leds.set_led(LedMode.ON_100_PERCENT, button, ACCENT_COLOR if pressed else LedColor.OFF)
        if pressed and button == Button.RIGHT:
            self.music.skip()
