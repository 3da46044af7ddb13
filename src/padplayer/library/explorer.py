"""Resolve pad indices to track folders in the music root."""

import logging
from dataclasses import dataclass
from pathlib import Path

from padplayer.exceptions import FolderNotFoundError

logger = logging.getLogger(__name__)


def pad_prefix(pad_index: int) -> str:
    """Folder prefix for a pad, e.g. 3 -> '03_'."""
    return f"{pad_index:02d}_"


@dataclass(frozen=True)
class Selection:
    """Tracks resolved for one pad press."""

    folder_name: str
    tracks: list[Path]


def resolve_folder(root: Path, prefix: str) -> Selection:
    """
    Find the first sub-folder of ``root`` whose name starts with ``prefix``.

    All regular files directly inside that folder are candidate tracks,
    returned as absolute paths sorted lexicographically. Nothing is cached:
    the folder is scanned on every call.

    Args:
        root: Music root directory
        prefix: Folder name prefix, e.g. '03_'

    Returns:
        Selection with the folder name and its sorted tracks

    Raises:
        FolderNotFoundError: If no sub-folder matches
        OSError: If the root or the matched folder cannot be read
    """
    root = Path(root)
    for entry in sorted(root.iterdir()):
        if entry.is_dir() and entry.name.startswith(prefix):
            tracks = sorted(
                (path.absolute() for path in entry.iterdir() if path.is_file()),
                key=str,
            )
            return Selection(folder_name=entry.name, tracks=tracks)

    raise FolderNotFoundError(prefix, root)


def resolve_pad(root: Path, pad_index: int) -> Selection:
    """Resolve the folder for a pad index."""
    return resolve_folder(root, pad_prefix(pad_index))
