"""MIDI port management with hot-plug support."""

import logging
import threading
from typing import Callable, Optional

import mido

logger = logging.getLogger(__name__)


class MidiManager:
    """
    Keep one MIDI input and one MIDI output open for a controller.

    A monitor thread polls the available port names, connects to the
    first ports matching ``device_filter`` and reconnects when the device
    is unplugged and plugged back in.
    """

    def __init__(self, device_filter: Callable[[str], bool], poll_interval: float = 2.0):
        """
        Initialize MIDI manager.

        Args:
            device_filter: Returns True if a port name belongs to the controller
            poll_interval: How often to check for device changes (seconds)
        """
        self._device_filter = device_filter
        self._poll_interval = poll_interval

        self._running = False
        self._monitor_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

        self._port_lock = threading.Lock()
        self._input: Optional[mido.ports.BaseInput] = None
        self._output: Optional[mido.ports.BaseOutput] = None
        self._no_device_warned = False

        self._message_callback: Optional[Callable[[mido.Message], None]] = None
        self._on_connection_changed: Optional[Callable[[bool, Optional[str]], None]] = None

    def on_message(self, callback: Callable[[mido.Message], None]) -> None:
        """
        Register callback for incoming MIDI messages.

        Callback is executed in mido's internal I/O thread - keep it fast!
        """
        self._message_callback = callback

    def on_connection_changed(self, callback: Callable[[bool, Optional[str]], None]) -> None:
        """Register callback receiving (is_connected, output_port_name)."""
        self._on_connection_changed = callback

    def send(self, message: mido.Message) -> bool:
        """
        Send MIDI message to the controller.

        Returns:
            True if sent, False if not connected or the send failed
        """
        with self._port_lock:
            if self._output is None:
                return False
            try:
                self._output.send(message)
                return True
            except (OSError, ValueError) as e:
                logger.debug(f"Error sending MIDI message: {e}")
                return False

    def start(self) -> None:
        """Start monitoring for MIDI devices."""
        if self._running:
            logger.warning("MidiManager is already running")
            return

        self._running = True
        self._stop_event.clear()
        self._monitor_thread = threading.Thread(
            target=self._monitor_devices, name="midi-monitor", daemon=True
        )
        self._monitor_thread.start()
        logger.debug("MidiManager started")

    def stop(self) -> None:
        """Stop monitoring and close ports."""
        self._running = False
        self._stop_event.set()

        if self._monitor_thread and self._monitor_thread.is_alive():
            self._monitor_thread.join(timeout=1.0)

        with self._port_lock:
            self._close_ports()

        logger.debug("MidiManager stopped")

    def poll(self) -> None:
        """Run one connect/disconnect check."""
        inputs = mido.get_input_names()
        outputs = mido.get_output_names()

        connected: Optional[bool] = None
        port_name: Optional[str] = None

        with self._port_lock:
            if self._input and (self._input.name not in inputs or self._output is None
                                or self._output.name not in outputs):
                logger.warning(f"MIDI controller disconnected: {self._input.name}")
                self._close_ports()
                self._no_device_warned = False
                connected = False

            if self._input is None:
                input_name = next((p for p in inputs if self._device_filter(p)), None)
                output_name = next((p for p in outputs if self._device_filter(p)), None)

                if input_name and output_name:
                    try:
                        self._input = mido.open_input(input_name, callback=self._midi_callback)
                        self._output = mido.open_output(output_name)
                        logger.info(f"Connected to MIDI controller: {input_name} / {output_name}")
                        connected = True
                        port_name = output_name
                    except (OSError, IOError) as e:
                        logger.error(f"Failed to connect to {input_name}: {e}")
                        self._close_ports()
                elif not self._no_device_warned:
                    logger.warning("No matching MIDI controller found")
                    self._no_device_warned = True

        # Callbacks run outside the lock; they may send LED messages
        if connected is not None and self._on_connection_changed:
            self._on_connection_changed(connected, port_name)

    def _monitor_devices(self) -> None:
        while self._running:
            try:
                self.poll()
            except Exception as e:
                logger.error(f"Error in MIDI monitoring: {e}")
            self._stop_event.wait(self._poll_interval)

    def _close_ports(self) -> None:
        """Close both ports. Call with _port_lock held."""
        for port in (self._input, self._output):
            if port is None:
                continue
            try:
                port.close()
            except (OSError, IOError) as e:
                logger.error(f"Error closing MIDI port: {e}")
        self._input = None
        self._output = None

    def _midi_callback(self, msg: mido.Message) -> None:
        """MIDI message callback - called from mido's internal I/O thread."""
        try:
            if self._message_callback:
                self._message_callback(msg)
        except Exception as e:
            logger.error(f"Error in MIDI input callback: {e}")

    @property
    def is_connected(self) -> bool:
        with self._port_lock:
            return self._input is not None and self._output is not None

    @property
    def current_port(self) -> Optional[str]:
        with self._port_lock:
            return self._input.name if self._input else None

    @staticmethod
    def list_ports() -> dict:
        """
        List all available MIDI ports.

        Returns:
            Dictionary with 'input' and 'output' lists of port names
        """
        return {
            "input": mido.get_input_names(),
            "output": mido.get_output_names(),
        }

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
