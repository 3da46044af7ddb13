"""Music library exceptions."""

from pathlib import Path

from .base import PadPlayerError


class FolderNotFoundError(PadPlayerError):
    """No folder in the music root matches a pad prefix."""

    def __init__(self, prefix: str, root: Path):
        super().__init__(
            user_message=f"No audio folder found that matches the prefix: {prefix}",
            technical_message=f"No directory in {root} starts with {prefix!r}",
            recoverable=True,
            recovery_hint=f"Create a folder named '{prefix}<name>' in {root}",
        )
        self.prefix = prefix
        self.root = Path(root)
