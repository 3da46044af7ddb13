"""Music library: mapping pads to track folders."""

from .explorer import Selection, pad_prefix, resolve_folder, resolve_pad

__all__ = ["Selection", "pad_prefix", "resolve_folder", "resolve_pad"]
