"""Helpers that turn library errors into Padplayer exceptions."""

from typing import Optional

from pydantic import ValidationError

from .audio import AudioDeviceError, AudioDeviceInUseError, AudioDeviceNotFoundError
from .base import PadPlayerError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError


def wrap_pydantic_error(error: ValidationError, file_path: str) -> ConfigurationError:
    """
    Convert a pydantic validation error raised while loading a config file.

    Args:
        error: The pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        ConfigFileInvalidError for JSON syntax errors,
        ConfigValidationError for invalid values
    """
    errors = error.errors()

    json_errors = [err for err in errors if err.get("type") == "json_invalid"]
    if json_errors:
        ctx = json_errors[0].get("ctx") or {}
        return ConfigFileInvalidError(file_path, str(ctx.get("error", json_errors[0].get("msg"))))

    if len(errors) == 1:
        err = errors[0]
        field = ".".join(str(loc) for loc in err.get("loc", ("unknown",)))
        return ConfigValidationError(
            field=field,
            value=err.get("input"),
            error_msg=err.get("msg", "validation failed"),
            file_path=file_path,
        )

    lines = [
        f"  - {'.'.join(str(loc) for loc in err.get('loc', ('unknown',)))}: {err.get('msg')}"
        for err in errors
    ]
    return ConfigValidationError(
        field="multiple fields",
        value=None,
        error_msg=f"{len(errors)} validation errors:\n" + "\n".join(lines),
        file_path=file_path,
    )


def wrap_audio_device_error(error: Exception, device_id: Optional[int] = None) -> AudioDeviceError:
    """
    Convert low-level PortAudio/sounddevice errors to Padplayer exceptions.

    Args:
        error: The original exception from the audio library
        device_id: The device ID involved in the error
    """
    error_msg = str(error)

    if "PaErrorCode -9996" in error_msg or "Invalid device" in error_msg:
        return AudioDeviceInUseError(device_id=device_id, original_error=error_msg)

    if "not found" in error_msg.lower() and device_id is not None:
        return AudioDeviceNotFoundError(device_id)

    return AudioDeviceError(
        user_message=f"Audio device error: {error_msg}",
        technical_message=f"Audio device {device_id} error: {error_msg}",
        device_id=device_id,
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, PadPlayerError):
        return error.user_message, error.recovery_hint

    return f"{type(error).__name__}: {error}", None
