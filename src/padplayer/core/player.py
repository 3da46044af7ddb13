"""
Audio side of the player: output device, filter and playback lanes.

::

    music lane ──► FilteredRenderStage(FilterEngine) ──┐
                                                      ├─► AudioMixer ─► AudioDevice
    effects lane ─────────────────────────────────────┘
"""

import logging
from typing import Optional

import numpy as np
import sounddevice as sd

from padplayer.audio import AudioDevice, AudioMixer, FilteredRenderStage, FilterEngine, TrackLoader
from padplayer.exceptions import wrap_audio_device_error
from padplayer.models import AppConfig

from .playback_queue import PlaybackQueue

logger = logging.getLogger(__name__)


class Player:
    """
    Owns the audio output and the two playback lanes.

    The music lane is pulled through a FilteredRenderStage so every sample
    it produces passes through ``filter``; the effects lane is mixed in
    unfiltered.
    """

    def __init__(self, config: AppConfig, audio_device: Optional[AudioDevice] = None):
        """
        Initialize player.

        Args:
            config: Application configuration
            audio_device: Output device (created from config if None)
        """
        self.config = config
        self._device = audio_device or AudioDevice(
            sample_rate=config.sample_rate,
            buffer_size=config.buffer_size,
            num_channels=config.num_channels,
            device=config.audio_device,
        )

        loader = TrackLoader(target_sample_rate=config.sample_rate, num_channels=config.num_channels)
        self.filter = FilterEngine(sample_rate=config.sample_rate, num_channels=config.num_channels)
        self.music = PlaybackQueue(loader, config.num_channels, config.sample_rate, name="music")
        self.effects = PlaybackQueue(loader, config.num_channels, config.sample_rate, name="effects")

        self._music_stage = FilteredRenderStage(self.music, self.filter)
        self._mixer = AudioMixer(num_channels=config.num_channels)

        self._device.set_callback(self._audio_callback)

    def start(self) -> None:
        """
        Start the audio stream.

        Raises:
            AudioDeviceError: If the output stream cannot be opened
        """
        try:
            self._device.start()
        except sd.PortAudioError as e:
            raise wrap_audio_device_error(e, self.config.audio_device) from e

        self.music.start()
        self.effects.start()
        logger.info("Player started")

    def stop(self) -> None:
        """Stop the audio stream and the lane loaders."""
        self._device.stop()
        self.music.stop()
        self.effects.stop()
        logger.info("Player stopped")

    def _audio_callback(self, outdata: np.ndarray, frames: int) -> None:
        """
        Render one block. Runs on the audio backend's thread.

        Args:
            outdata: Output buffer to fill, shape (frames, channels)
            frames: Number of frames requested
        """
        try:
            music = self._music_stage.read(frames)
            effects = self.effects.read(frames)

            mixed = self._mixer.mix([music, effects], frames)
            self._mixer.clip(mixed)
            outdata[:] = mixed

        except Exception as e:
            # Output silence rather than killing the stream
            logger.exception(f"Error in audio callback: {e}")
            outdata.fill(0.0)

    @property
    def is_running(self) -> bool:
        return self._device.is_running

    @property
    def device_name(self) -> str:
        return self._device.device_name
