"""Application configuration model."""

import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_serializer

from padplayer.exceptions import wrap_pydantic_error

DEFAULT_CONFIG_PATH = Path.home() / ".padplayer" / "config.json"
MUSIC_FOLDER_ENV = "MUSIC_FOLDER"
DEFAULT_MUSIC_FOLDER = "music"


def _default_music_folder() -> Path:
    return Path(os.environ.get(MUSIC_FOLDER_ENV, DEFAULT_MUSIC_FOLDER))


class AppConfig(BaseModel):
    """Application configuration and settings."""

    # Paths
    music_folder: Path = Field(
        default_factory=_default_music_folder,
        description=(
            "Root directory holding one sub-folder per pad, named with a "
            "two-digit prefix (e.g. '03_housetrack'). Defaults to $MUSIC_FOLDER or './music'."
        ),
    )

    # Audio
    audio_device: int | None = Field(
        default=None, description="Audio output device ID (None = system default)"
    )
    buffer_size: int = Field(default=512, gt=0, description="Audio buffer size in frames")
    sample_rate: int = Field(default=44100, gt=0, description="Output sample rate in Hz")
    num_channels: int = Field(default=2, ge=1, le=2, description="Output channels (1=mono, 2=stereo)")

    # MIDI
    midi_port_filter: str = Field(
        default="APC Key 25",
        description="Substring used to pick the controller's MIDI ports",
    )
    midi_poll_interval: float = Field(
        default=2.0, gt=0, description="How often to check for MIDI device changes (seconds)"
    )

    # Controls
    volume_step: float = Field(
        default=0.01, gt=0, le=1.0, description="Volume change per knob-1 tick"
    )
    filter_step: float = Field(
        default=1.0,
        gt=0,
        le=100.0,
        description="Cutoff change per knob-8 tick, in percentage points of the cutoff range",
    )
    """Percentage points: 1.0 moves the normalized cutoff (0..1) by 0.01."""

    @field_serializer("music_folder")
    def serialize_path(self, path: Path) -> str:
        """Serialize Path to string."""
        return str(path)

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from a JSON file, or return defaults if it doesn't exist.

        Args:
            path: Path to config file. If None, uses ~/.padplayer/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH

        if not path.exists():
            return cls()

        try:
            return cls.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise wrap_pydantic_error(e, str(path)) from e
