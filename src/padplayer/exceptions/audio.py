"""Audio-related exceptions.

This module defines exceptions for audio errors:
- AudioDeviceError: Base class for audio device errors
- AudioDeviceInUseError: Device is already in use
- AudioDeviceNotFoundError: Device was not found
- TrackLoadError: A track file could not be opened or decoded
- FilterDesignError: Filter coefficients could not be computed
"""

from pathlib import Path

from .base import PadPlayerError


class AudioDeviceError(PadPlayerError):
    """Audio device initialization or operation failed."""

    def __init__(self, user_message: str, device_id: int | None = None, **kwargs):
        super().__init__(user_message, **kwargs)
        self.device_id = device_id


class AudioDeviceInUseError(AudioDeviceError):
    """Audio device is already in use by another application."""

    def __init__(self, device_id: int | None = None, original_error: str | None = None):
        user_msg = "Audio device is already in use by another application."
        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            device_id=device_id,
            recoverable=True,
            recovery_hint=(
                "Close other audio applications. "
                "Run 'padplayer audio list' to see available devices."
            ),
        )


class AudioDeviceNotFoundError(AudioDeviceError):
    """Requested audio device was not found."""

    def __init__(self, device_id: int):
        super().__init__(
            user_message=f"Audio device {device_id} not found.",
            device_id=device_id,
            recoverable=True,
            recovery_hint="Run 'padplayer audio list' to see available devices.",
        )


class TrackLoadError(PadPlayerError):
    """A track could not be opened or decoded."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            user_message=f"Cannot play {Path(path).name}",
            technical_message=f"Failed to load track {path}: {reason}",
            recoverable=True,
            recovery_hint="Check that the file is a supported audio format and is not corrupt.",
        )
        self.path = Path(path)
        self.reason = reason


class FilterDesignError(PadPlayerError):
    """
    Filter coefficients could not be computed.

    Cutoff values are clamped before design, so this signals a broken
    invariant and is never recovered from.
    """

    def __init__(self, cutoff_hz: float, sample_rate: float):
        super().__init__(
            user_message=f"Invalid filter cutoff {cutoff_hz:.2f} Hz",
            technical_message=(
                f"Cutoff {cutoff_hz} Hz is outside (0, {sample_rate / 2}] "
                f"for sample rate {sample_rate} Hz"
            ),
            recoverable=False,
        )
        self.cutoff_hz = cutoff_hz
        self.sample_rate = sample_rate
