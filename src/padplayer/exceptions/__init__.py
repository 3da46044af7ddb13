"""
Custom exception hierarchy for Padplayer.

```
PadPlayerError (base)
├── AudioDeviceError
│   ├── AudioDeviceInUseError
│   └── AudioDeviceNotFoundError
├── TrackLoadError
├── FilterDesignError
├── FolderNotFoundError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

`FolderNotFoundError` and `TrackLoadError` are recoverable: the control
thread logs them and keeps going. `FilterDesignError` means a clamping
invariant was broken and is treated as fatal.
"""

from .audio import (
    AudioDeviceError,
    AudioDeviceInUseError,
    AudioDeviceNotFoundError,
    FilterDesignError,
    TrackLoadError,
)
from .base import PadPlayerError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .handlers import format_error_for_display, wrap_audio_device_error, wrap_pydantic_error
from .library import FolderNotFoundError

__all__ = [
    # Audio
    "AudioDeviceError",
    "AudioDeviceInUseError",
    "AudioDeviceNotFoundError",
    "FilterDesignError",
    "TrackLoadError",
    # Base
    "PadPlayerError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Library
    "FolderNotFoundError",
    # Handlers
    "format_error_for_display",
    "wrap_audio_device_error",
    "wrap_pydantic_error",
]
