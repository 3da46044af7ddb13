"""Integration tests: controller events through the app into the audio lanes."""

from unittest.mock import Mock

import mido
import numpy as np
import pytest

from padplayer.app import PadPlayerApp
from padplayer.audio import AudioDevice
from padplayer.core import Player
from padplayer.devices import ApcController
from padplayer.exceptions import FilterDesignError
from padplayer.models import AppConfig, FilterKind


@pytest.fixture
def config(music_root):
    return AppConfig(music_folder=music_root)


@pytest.fixture
def app(config):
    player = Player(config, audio_device=Mock(spec=AudioDevice))
    controller = ApcController()
    controller._midi = Mock()  # no hardware
    controller._output._send = Mock(return_value=True)
    return PadPlayerApp(config, player=player, controller=controller)


@pytest.mark.integration
class TestPadPlayerApp:
    """Wiring of controller, dispatcher, state machine and player."""

    def test_midi_message_plays_folder(self, app):
        with app:
            app.controller._handle_message(mido.Message("note_on", note=1, velocity=100))
            app.dispatcher.stop(timeout=5.0)

        assert app.session.active_pad == 1

        outdata = np.zeros((64, 2), dtype=np.float32)
        app.player._audio_callback(outdata, 64)
        assert app.player.music.now_playing == "a.wav"
        assert app.player.music.queued == ["b.wav"]
        assert outdata.any()

    def test_knob_and_filter_toggle(self, app):
        with app:
            app.controller._handle_message(mido.Message("note_on", note=91, velocity=127))
            app.controller._handle_message(mido.Message("control_change", control=55, value=127))
            app.dispatcher.stop(timeout=5.0)

        assert app.player.filter.kind == FilterKind.LOW_PASS
        assert app.player.filter.cutoff_percentage == pytest.approx(0.99)

    def test_start_order_and_stop(self, app):
        app.player._device = Mock(spec=AudioDevice)
        app.start()
        app.player._device.start.assert_called_once()
        assert app.dispatcher.is_running
        app.controller._midi.start.assert_called_once()

        app.stop()
        app.controller._midi.stop.assert_called_once()
        app.player._device.stop.assert_called_once()
        assert not app.dispatcher.is_running

    def test_run_blocks_on_wait_then_stops(self, app):
        wait = Mock()
        app.run(wait=wait)
        wait.assert_called_once()
        assert not app.dispatcher.is_running

    def test_run_reraises_fatal_control_error(self, app):
        error = FilterDesignError(0.0, 44100)
        app.machine.handle = Mock(side_effect=error)

        def wait(prompt):
            app.dispatcher.submit(object())
            app.dispatcher._thread.join(timeout=5.0)

        with pytest.raises(FilterDesignError):
            app.run(wait=wait)
