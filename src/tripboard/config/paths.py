"""Centralized path management for Tripboard.

Global settings follow the XDG Base Directory layout:
$XDG_CONFIG_HOME/tripboard (default: ~/.config/tripboard).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path


def _xdg_config_home() -> Path:
    """Get XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


@dataclass
class TripboardPaths:
    """Centralized path management following the XDG base directory layout."""

    workspace: Path  # Current working directory

    _config_home: Path = field(default_factory=_xdg_config_home)

    # === WORKSPACE PATHS ===

    @property
    def workspace_config(self) -> Path:
        """Workspace .tripboard/ directory."""
        return self.workspace / ".tripboard"

    @property
    def trip_file(self) -> Path:
        """Default trip data: .tripboard/trip.yaml"""
        return self.workspace_config / "trip.yaml"

    @property
    def debug_log(self) -> Path:
        """Debug log: .tripboard/debug.log"""
        return self.workspace_config / "debug.log"

    # === GLOBAL PATHS (XDG compliant) ===

    @property
    def global_config_dir(self) -> Path:
        """Global config: ~/.config/tripboard/"""
        return self._config_home / "tripboard"

    @property
    def global_settings(self) -> Path:
        """Global settings file: ~/.config/tripboard/settings.json"""
        return self.global_config_dir / "settings.json"

    def ensure_workspace_dirs(self) -> None:
        """Create the workspace .tripboard/ directory."""
        self.workspace_config.mkdir(parents=True, exist_ok=True)


# Singleton instance
_paths: TripboardPaths | None = None


def get_paths(workspace: Path | None = None) -> TripboardPaths:
    """Get the paths singleton.

    On first call, optionally set the workspace directory.
    Subsequent calls return the same instance.

    Args:
        workspace: The workspace directory. If not provided on first call,
                   defaults to current working directory.

    Returns:
        The TripboardPaths singleton instance.
    """
    global _paths
    if _paths is None:
        _paths = TripboardPaths(workspace=workspace or Path.cwd())
    return _paths


def reset_paths() -> None:
    """Forget the paths singleton (used when --workdir changes it)."""
    global _paths
    _paths = None
