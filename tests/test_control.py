"""Tests for the controller-driven state machine."""

from pathlib import Path
from unittest.mock import Mock, call

import numpy as np
import pytest

from padplayer.audio import AudioData, FilterEngine, TrackLoader
from padplayer.core import ControlStateMachine, PlaybackQueue, SessionState, ToggleSet
from padplayer.core.control import TOGGLE_BUTTONS
from padplayer.devices.apc import ACCENT_COLOR, LedColor, pad_color
from padplayer.devices.protocols import (
    Button,
    ButtonEvent,
    KnobTurnEvent,
    LedMode,
    PadPressEvent,
    PadReleaseEvent,
)
from padplayer.exceptions import TrackLoadError
from padplayer.models import FilterKind


class FakeLane:
    """PlaybackQueue stand-in with real volume clamping."""

    def __init__(self, name: str):
        self.name = name
        self.calls = Mock(spec=PlaybackQueue)
        self._volume = 1.0
        self.broken: set[str] = set()

    def replace_and_play(self, track: Path) -> None:
        if track.name in self.broken:
            raise TrackLoadError(track, "corrupt")
        self.calls.replace_and_play(track)

    def enqueue(self, track: Path) -> None:
        self.calls.enqueue(track)

    def skip(self) -> None:
        self.calls.skip()

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        self._volume = max(0.0, min(1.0, value))

    def change_volume(self, delta: float) -> float:
        self.volume = self._volume + delta
        return self._volume


@pytest.fixture
def music():
    return FakeLane("music")


@pytest.fixture
def effects():
    return FakeLane("effects")


@pytest.fixture
def engine():
    return FilterEngine(sample_rate=44100, num_channels=2)


@pytest.fixture
def machine(music_root, music, effects, engine, leds):
    return ControlStateMachine(
        session=SessionState(music_folder=music_root),
        music=music,
        effects=effects,
        filter_engine=engine,
        leds=leds,
    )


def press(button: Button) -> ButtonEvent:
    return ButtonEvent(button, 127)


def release(button: Button) -> ButtonEvent:
    return ButtonEvent(button, 0)


@pytest.mark.unit
class TestToggleSet:
    """Independent boolean flags."""

    def test_all_flags_start_off(self):
        assert not any(ToggleSet().as_dict().values())

    def test_toggle_twice_restores(self):
        toggles = ToggleSet()
        assert toggles.toggle("solo") is True
        assert toggles.toggle("solo") is False
        assert toggles.as_dict() == ToggleSet().as_dict()


@pytest.mark.unit
class TestPadPress:
    """Pad press selects a folder and lights the pad."""

    def test_plays_folder_in_lexicographic_order(self, machine, music, music_root):
        machine.handle(PadPressEvent(1, 100))

        folder = music_root / "01_a"
        assert music.calls.mock_calls == [
            call.replace_and_play((folder / "a.wav").absolute()),
            call.enqueue((folder / "b.wav").absolute()),
        ]

    def test_lights_new_pad_and_clears_previous(self, machine, leds):
        machine.handle(PadPressEvent(1, 100))
        assert leds.commands == [(LedMode.ON_100_PERCENT, 1, pad_color(1))]

        leds.clear()
        machine.handle(PadPressEvent(10, 100))
        assert leds.commands == [
            (LedMode.ON_10_PERCENT, 1, LedColor.OFF),
            (LedMode.ON_100_PERCENT, 10, pad_color(10)),
        ]
        assert machine.session.active_pad == 10

    def test_unmatched_prefix_changes_nothing(self, machine, music, leds):
        machine.handle(PadPressEvent(1, 100))
        music.calls.reset_mock()
        leds.clear()

        machine.handle(PadPressEvent(7, 100))

        assert music.calls.mock_calls == []
        assert leds.commands == []
        assert machine.session.active_pad == 1

    def test_missing_music_root_is_not_fatal(self, music, effects, engine, leds, temp_dir):
        machine = ControlStateMachine(
            SessionState(music_folder=temp_dir / "nowhere"), music, effects, engine, leds
        )
        machine.handle(PadPressEvent(1, 100))
        assert music.calls.mock_calls == []
        assert machine.session.active_pad is None

    def test_broken_track_is_skipped(self, machine, music, music_root):
        music.broken.add("bad.wav")
        machine.handle(PadPressEvent(2, 100))

        good = (music_root / "02_broken" / "good.wav").absolute()
        assert music.calls.mock_calls == [call.replace_and_play(good)]
        assert machine.session.active_pad == 2

    def test_shift_plays_on_effects_lane(self, machine, music, effects):
        machine.handle(press(Button.SHIFT))
        machine.handle(PadPressEvent(10, 100))

        assert music.calls.mock_calls == []
        assert len(effects.calls.replace_and_play.mock_calls) == 1

    def test_pad_release_is_ignored(self, machine, music, leds):
        machine.handle(PadReleaseEvent(1))
        assert music.calls.mock_calls == []
        assert leds.commands == []


@pytest.mark.unit
class TestLazyFolderDecoding:
    """A pad press decodes the head track and one track ahead, not the whole folder."""

    @pytest.fixture
    def loader(self):
        def load(path):
            data = np.full((4, 2), 0.1, dtype=np.float32)
            return AudioData.from_array(data, 44100, path=path)

        mock = Mock(spec=TrackLoader)
        mock.load.side_effect = load
        return mock

    @pytest.fixture
    def album(self, temp_dir):
        folder = temp_dir / "music" / "05_album"
        folder.mkdir(parents=True)
        for i in range(6):
            (folder / f"{i}.wav").touch()
        return folder

    def test_press_decodes_at_most_two_tracks(self, loader, album, engine, leds):
        music = PlaybackQueue(loader, name="music")
        machine = ControlStateMachine(
            SessionState(music_folder=album.parent), music, PlaybackQueue(loader), engine, leds
        )

        machine.handle(PadPressEvent(5, 100))

        assert [c.args[0].name for c in loader.load.call_args_list] == ["0.wav", "1.wav"]
        music.read(1)
        assert music.now_playing == "0.wav"
        assert music.queued == ["1.wav", "2.wav", "3.wav", "4.wav", "5.wav"]


@pytest.mark.unit
class TestKnobs:
    """Knob 1 is volume, knob 8 is filter cutoff."""

    def test_volume_knob_direction(self, machine, music):
        music.volume = 0.5
        machine.handle(KnobTurnEvent(1, 1))
        assert music.volume == pytest.approx(0.51)
        machine.handle(KnobTurnEvent(1, 127))
        machine.handle(KnobTurnEvent(1, 64))
        assert music.volume == pytest.approx(0.49)

    def test_value_63_increases(self, machine, music):
        music.volume = 0.5
        machine.handle(KnobTurnEvent(1, 63))
        assert music.volume == pytest.approx(0.51)

    def test_volume_stays_clamped(self, machine, music):
        for _ in range(5):
            machine.handle(KnobTurnEvent(1, 1))
        assert music.volume == 1.0

    def test_volume_knob_ignored_while_muted(self, machine, music):
        music.volume = 0.5
        machine.handle(press(Button.MUTE))
        machine.handle(KnobTurnEvent(1, 1))
        assert music.volume == 0.0

    def test_filter_knob_moves_cutoff_in_low_pass(self, machine, engine):
        machine.handle(KnobTurnEvent(8, 127))
        assert engine.kind == FilterKind.LOW_PASS
        assert engine.cutoff_percentage == pytest.approx(0.99)

        machine.handle(KnobTurnEvent(8, 1))
        assert engine.cutoff_percentage == pytest.approx(1.0)

    def test_filter_knob_never_exceeds_bounds(self, machine, engine):
        for _ in range(150):
            machine.handle(KnobTurnEvent(8, 127))
        assert engine.cutoff_percentage > 0.0
        for _ in range(150):
            machine.handle(KnobTurnEvent(8, 1))
        assert engine.cutoff_percentage == 1.0
        assert engine.cutoff_hz <= engine.sample_rate / 2

    def test_filter_step_is_in_percentage_points(self, music, effects, engine, leds, temp_dir):
        machine = ControlStateMachine(
            SessionState(music_folder=temp_dir), music, effects, engine, leds, filter_step=5.0
        )
        machine.handle(KnobTurnEvent(8, 127))
        assert engine.cutoff_percentage == pytest.approx(0.95)

    @pytest.mark.parametrize("knob", [2, 3, 4, 5, 6, 7])
    def test_other_knobs_are_unmapped(self, machine, music, engine, leds, knob):
        before = engine.state
        machine.handle(KnobTurnEvent(knob, 1))
        assert engine.state is before
        assert music.volume == 1.0
        assert leds.commands == []


@pytest.mark.unit
class TestFilterToggle:
    """Resume/Pause enables and disables the filter."""

    def test_enable_opens_low_pass(self, machine, engine, leds):
        engine.set_percentage(0.3, FilterKind.ALL_PASS)
        machine.handle(press(Button.RESUME_PAUSE))

        assert machine.session.toggles.filter
        assert engine.kind == FilterKind.LOW_PASS
        assert engine.cutoff_percentage == 1.0
        assert leds.commands == [(LedMode.ON_100_PERCENT, Button.RESUME_PAUSE, ACCENT_COLOR)]

    def test_disable_goes_all_pass_fully_open(self, machine, engine):
        machine.handle(press(Button.RESUME_PAUSE))
        machine.handle(KnobTurnEvent(8, 127))
        machine.handle(press(Button.RESUME_PAUSE))

        assert not machine.session.toggles.filter
        assert engine.kind == FilterKind.ALL_PASS
        assert engine.cutoff_percentage == 1.0


@pytest.mark.unit
class TestMute:
    """Mute snapshots and restores the volume."""

    @pytest.mark.parametrize("volume", [0.0, 0.25, 0.77, 1.0])
    def test_mute_round_trip(self, machine, music, volume):
        music.volume = volume
        machine.handle(press(Button.MUTE))
        assert music.volume == 0.0
        machine.handle(press(Button.MUTE))
        assert music.volume == volume

    def test_mute_release_is_ignored(self, machine, music):
        machine.handle(press(Button.MUTE))
        machine.handle(release(Button.MUTE))
        assert machine.session.toggles.mute


@pytest.mark.unit
class TestToggleButtons:
    """Plain toggles flip a flag and mirror it on the LED."""

    @pytest.mark.parametrize("button,flag", sorted(TOGGLE_BUTTONS.items()))
    def test_toggle_twice(self, machine, leds, button, flag):
        machine.handle(press(button))
        machine.handle(release(button))
        assert getattr(machine.session.toggles, flag) is True

        machine.handle(press(button))
        assert getattr(machine.session.toggles, flag) is False

        assert leds.commands == [
            (LedMode.ON_100_PERCENT, button, ACCENT_COLOR),
            (LedMode.ON_100_PERCENT, button, LedColor.OFF),
        ]

    @pytest.mark.parametrize("button", [Button.MUTE, Button.RESUME_PAUSE])
    def test_audio_toggles_mirror_on_led(self, machine, leds, button):
        machine.handle(press(button))
        machine.handle(release(button))
        machine.handle(press(button))

        assert leds.commands == [
            (LedMode.ON_100_PERCENT, button, ACCENT_COLOR),
            (LedMode.ON_100_PERCENT, button, LedColor.OFF),
        ]

    def test_toggles_do_not_touch_audio(self, machine, music, engine):
        before = engine.state
        for button in TOGGLE_BUTTONS:
            machine.handle(press(button))
        assert engine.state is before
        assert music.calls.mock_calls == []
        assert music.volume == 1.0


@pytest.mark.unit
class TestDirectionalButtons:
    """Directional buttons are momentary."""

    @pytest.mark.parametrize("button", [Button.UP, Button.DOWN, Button.LEFT, Button.RIGHT])
    def test_led_follows_hold(self, machine, leds, button):
        machine.handle(press(button))
        machine.handle(release(button))
        assert leds.commands == [
            (LedMode.ON_100_PERCENT, button, ACCENT_COLOR),
            (LedMode.ON_100_PERCENT, button, LedColor.OFF),
        ]

    def test_right_skips_on_press_only(self, machine, music):
        machine.handle(press(Button.RIGHT))
        machine.handle(release(Button.RIGHT))
        assert music.calls.mock_calls == [call.skip()]

    @pytest.mark.parametrize("button", [Button.UP, Button.DOWN, Button.LEFT])
    def test_other_directions_do_not_skip(self, machine, music, button):
        machine.handle(press(button))
        assert music.calls.mock_calls == []


@pytest.mark.unit
class TestUnknownEvents:
    def test_unknown_event_is_ignored(self, machine, leds):
        machine.handle(object())
        assert leds.commands == []
