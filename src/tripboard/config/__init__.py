"""Configuration management for Tripboard."""

from __future__ import annotations

from tripboard.config.paths import TripboardPaths, get_paths, reset_paths
from tripboard.config.settings import Settings, get_settings_path, settings

__all__ = [
    "Settings",
    "TripboardPaths",
    "get_paths",
    "get_settings_path",
    "reset_paths",
    "settings",
]
