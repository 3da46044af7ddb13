"""Tests for MIDI port management and the APC controller facade."""

from unittest.mock import MagicMock, Mock, patch

import mido
import pytest

from padplayer.devices import ApcController, ButtonEvent, PadPressEvent
from padplayer.devices.protocols import Button, LedMode
from padplayer.midi import MidiManager

APC = "APC Key 25 mk2"


def fake_port(name):
    port = MagicMock()
    port.name = name
    return port


@pytest.fixture
def fake_mido():
    """Patch mido port discovery/opening inside the manager module."""
    with patch("padplayer.midi.manager.mido") as mock_mido:
        mock_mido.get_input_names.return_value = ["Other Keyboard", APC]
        mock_mido.get_output_names.return_value = [APC]
        mock_mido.open_input.side_effect = lambda name, callback=None: fake_port(name)
        mock_mido.open_output.side_effect = lambda name: fake_port(name)
        yield mock_mido


@pytest.mark.unit
class TestMidiManager:
    """Connection handling through poll()."""

    def test_connects_to_matching_ports(self, fake_mido):
        manager = MidiManager(device_filter=lambda p: "APC" in p)
        changed = Mock()
        manager.on_connection_changed(changed)

        manager.poll()

        assert manager.is_connected
        assert manager.current_port == APC
        fake_mido.open_input.assert_called_once_with(APC, callback=manager._midi_callback)
        changed.assert_called_once_with(True, APC)

    def test_no_matching_device(self, fake_mido):
        fake_mido.get_input_names.return_value = ["Other Keyboard"]
        manager = MidiManager(device_filter=lambda p: "APC" in p)
        manager.poll()
        manager.poll()
        assert not manager.is_connected
        fake_mido.open_input.assert_not_called()

    def test_detects_unplug_and_replug(self, fake_mido):
        manager = MidiManager(device_filter=lambda p: "APC" in p)
        changed = Mock()
        manager.on_connection_changed(changed)
        manager.poll()

        fake_mido.get_input_names.return_value = []
        manager.poll()
        assert not manager.is_connected
        changed.assert_called_with(False, None)

        fake_mido.get_input_names.return_value = [APC]
        manager.poll()
        assert manager.is_connected
        assert fake_mido.open_input.call_count == 2

    def test_send_when_disconnected(self):
        manager = MidiManager(device_filter=lambda p: True)
        assert manager.send(mido.Message("note_on")) is False

    def test_send_failure_returns_false(self, fake_mido):
        manager = MidiManager(device_filter=lambda p: "APC" in p)
        manager.poll()
        manager._output.send.side_effect = OSError("unplugged")
        assert manager.send(mido.Message("note_on")) is False

    def test_callback_errors_are_contained(self):
        manager = MidiManager(device_filter=lambda p: True)
        manager.on_message(Mock(side_effect=RuntimeError("boom")))
        manager._midi_callback(mido.Message("note_on"))

    def test_stop_closes_ports(self, fake_mido):
        manager = MidiManager(device_filter=lambda p: "APC" in p)
        manager.poll()
        input_port, output_port = manager._input, manager._output

        manager.stop()

        input_port.close.assert_called_once()
        output_port.close.assert_called_once()
        assert not manager.is_connected

    def test_list_ports(self, fake_mido):
        assert MidiManager.list_ports() == {"input": ["Other Keyboard", APC], "output": [APC]}


@pytest.mark.unit
class TestApcController:
    """Messages in, events out, LEDs back."""

    def test_port_filter_is_case_insensitive(self):
        controller = ApcController(port_filter="apc key 25")
        assert controller._matches("APC Key 25 mk2 MIDI 1")
        assert not controller._matches("Launchpad X")

    def test_parsed_events_reach_callback(self):
        controller = ApcController()
        received = Mock()
        controller.on_event(received)

        controller._handle_message(mido.Message("note_on", note=3, velocity=90))
        controller._handle_message(mido.Message("note_on", note=98, velocity=127))
        controller._handle_message(mido.Message("clock"))

        assert [c.args[0] for c in received.call_args_list] == [
            PadPressEvent(3, 90),
            ButtonEvent(Button.SHIFT, 127),
        ]

    def test_set_led_sends_note_on(self, fake_mido):
        controller = ApcController()
        controller._midi.poll()

        controller.set_led(LedMode.BLINKING_1_2, 7, 5)

        msg = controller._midi._output.send.call_args[0][0]
        assert (msg.channel, msg.note, msg.velocity) == (15, 7, 5)

    def test_connect_clears_pads(self, fake_mido):
        controller = ApcController()
        controller._midi.poll()
        assert controller._midi._output.send.call_count == 40
