"""Data models for padplayer."""

from .config import AppConfig
from .enums import FilterKind

__all__ = ["AppConfig", "FilterKind"]
