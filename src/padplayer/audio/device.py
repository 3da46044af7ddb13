"""Audio output stream (sounddevice)."""

import logging
import sys
from typing import Callable, Optional

import numpy as np
import sounddevice as sd

logger = logging.getLogger(__name__)

RenderCallback = Callable[[np.ndarray, int], None]

# Host APIs offering low-latency output, per platform
LOW_LATENCY_APIS: dict[str, list[str]] = {
    "win32": ["ASIO", "WASAPI"],
    "darwin": ["Core Audio"],
    "linux": ["ALSA", "JACK", "PulseAudio"],
}


def low_latency_apis(platform: str = sys.platform) -> list[str]:
    """Host API names considered low-latency on ``platform``."""
    return LOW_LATENCY_APIS.get(platform, LOW_LATENCY_APIS["linux"])


class AudioDevice:
    """
    One float32 output stream pulled by the audio backend.

    The backend calls the render callback from its own thread once per
    block of ``buffer_size`` frames; the callback fills the buffer in place.
    """

    def __init__(
        self,
        sample_rate: int = 44100,
        buffer_size: int = 512,
        num_channels: int = 2,
        device: Optional[int] = None,
    ):
        """
        Args:
            sample_rate: Output sample rate in Hz
            buffer_size: Frames per block (lower = less latency)
            num_channels: Output channels (1=mono, 2=stereo)
            device: Output device ID (None for the system default)
        """
        self.sample_rate = sample_rate
        self.buffer_size = buffer_size
        self.num_channels = num_channels
        self.device = device

        self._stream: Optional[sd.OutputStream] = None
        self._render: Optional[RenderCallback] = None

    def set_callback(self, callback: RenderCallback) -> None:
        """Register ``callback(outdata, frames)``, which must fill ``outdata`` in place."""
        self._render = callback

    def start(self) -> None:
        """
        Open the output stream and start pulling audio.

        Raises:
            RuntimeError: If no render callback is registered
            sounddevice.PortAudioError: If the stream cannot be opened
        """
        if self._stream is not None:
            return
        if self._render is None:
            raise RuntimeError("No render callback registered; call set_callback() first")

        stream = sd.OutputStream(
            samplerate=self.sample_rate,
            blocksize=self.buffer_size,
            channels=self.num_channels,
            device=self.device,
            dtype=np.float32,
            callback=self._on_block,
        )
        stream.start()
        self._stream = stream

        logger.info(
            f"Audio output on {self.device_name}: {self.num_channels} ch @ {self.sample_rate} Hz, "
            f"block {self.buffer_size} frames ({self.block_ms:.1f}ms), "
            f"latency {stream.latency * 1000:.1f}ms"
        )

    def stop(self) -> None:
        """Stop and close the output stream."""
        stream, self._stream = self._stream, None
        if stream is None:
            return
        stream.stop()
        stream.close()
        logger.info("Audio output stopped")

    def _on_block(self, outdata: np.ndarray, frames: int, time_info, status: sd.CallbackFlags) -> None:
        # Underruns/overruns are reported here, once per affected block
        if status:
            logger.warning(f"Audio stream status: {status}")

        render = self._render
        if render is None:
            outdata.fill(0)
        else:
            render(outdata, frames)

    @property
    def is_running(self) -> bool:
        return self._stream is not None

    @property
    def block_ms(self) -> float:
        """Duration of one block in milliseconds."""
        return self.buffer_size / self.sample_rate * 1000

    @property
    def device_name(self) -> str:
        """Name of the output device, for logs and the CLI."""
        try:
            if self.device is not None:
                return sd.query_devices(self.device)["name"]
            default_output = sd.default.device[1]
            if default_output is not None and default_output >= 0:
                return f"{sd.query_devices(default_output)['name']} (default)"
        except sd.PortAudioError:
            return "Unknown Device"
        return "Default Device"

    @staticmethod
    def list_output_devices() -> tuple[list[tuple[int, str, str]], str]:
        """
        List output devices on a low-latency host API.

        Returns:
            Tuple of ([(device_id, device_name, host_api_name), ...], api_names)
        """
        apis = low_latency_apis()
        hostapis = sd.query_hostapis()

        found = []
        for device_id, info in enumerate(sd.query_devices()):
            if info["max_output_channels"] <= 0:
                continue
            hostapi_name = hostapis[info["hostapi"]]["name"]
            if any(api in hostapi_name for api in apis):
                found.append((device_id, info["name"], hostapi_name))

        return found, "/".join(apis)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
