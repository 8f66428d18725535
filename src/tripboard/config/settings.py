"""Configuration and settings persistence."""

import json
import logging
from pathlib import Path
from typing import Any

from tripboard.config.paths import get_paths

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_LOWER_LIMIT_MS = 350
DEFAULT_BLOCK_UPPER_LIMIT_MS = 1000
DEFAULT_LOAD_TIMEOUT_SECONDS = 10.0
DEFAULT_LOAD_MAX_ATTEMPTS = 3
DEFAULT_LOAD_RETRY_DELAY_SECONDS = 0.5


def get_settings_path() -> Path:
    """Get the path to the settings file."""
    return get_paths().global_settings


def _as_int(raw: Any, default: int, minimum: int = 0) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return max(minimum, value)


def _as_float(raw: Any, default: float, minimum: float = 0.0) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    return max(minimum, value)


class Settings:
    """Persistent settings for Tripboard."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        """Load settings from disk."""
        path = get_settings_path()
        if path.exists():
            try:
                self._data = json.loads(path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError):
                self._data = {}
        else:
            self._data = {}

    def _save(self) -> None:
        """Save settings to disk."""
        path = get_settings_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
            logger.info("Saved settings to %s: %s", path, self._data)
        except OSError as e:
            logger.error("Failed to save settings: %s", e)

    def get(self, key: str) -> Any:
        """Get a top-level setting value."""
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        """Set a setting value and persist to disk."""
        self._data[key] = value
        self._save()

    def _section(self, name: str) -> dict[str, Any]:
        raw = self._data.get(name, {})
        if isinstance(raw, dict):
            return raw
        return {}

    def _set_in_section(self, name: str, key: str, value: Any) -> None:
        section = self._section(name)
        section[key] = value
        self.set(name, section)

    @property
    def theme(self) -> str:
        """Get the Textual theme name."""
        saved = self._data.get("theme")
        if saved:
            return str(saved)
        return "textual-dark"

    @theme.setter
    def theme(self, value: str) -> None:
        self.set("theme", value)

    # --- Board Settings ---

    @property
    def block_lower_limit_ms(self) -> int:
        """Minimum time the board stays blocked while a change is saved."""
        raw = self._section("board").get(
            "block_lower_limit_ms", DEFAULT_BLOCK_LOWER_LIMIT_MS
        )
        return _as_int(raw, DEFAULT_BLOCK_LOWER_LIMIT_MS)

    @block_lower_limit_ms.setter
    def block_lower_limit_ms(self, value: int) -> None:
        self._set_in_section("board", "block_lower_limit_ms", max(0, int(value)))

    @property
    def block_upper_limit_ms(self) -> int:
        """Time after which the board is unblocked even if a save still hangs.

        Never lower than the lower limit.
        """
        raw = self._section("board").get(
            "block_upper_limit_ms", DEFAULT_BLOCK_UPPER_LIMIT_MS
        )
        value = _as_int(raw, DEFAULT_BLOCK_UPPER_LIMIT_MS)
        return max(value, self.block_lower_limit_ms)

    @block_upper_limit_ms.setter
    def block_upper_limit_ms(self, value: int) -> None:
        self._set_in_section("board", "block_upper_limit_ms", max(0, int(value)))

    @property
    def load_timeout_seconds(self) -> float:
        """Seconds to wait for the first load before showing an error."""
        raw = self._section("board").get(
            "load_timeout_seconds", DEFAULT_LOAD_TIMEOUT_SECONDS
        )
        return _as_float(raw, DEFAULT_LOAD_TIMEOUT_SECONDS)

    @load_timeout_seconds.setter
    def load_timeout_seconds(self, value: float) -> None:
        self._set_in_section("board", "load_timeout_seconds", max(0.0, float(value)))

    # --- Load Retry Settings ---

    @property
    def load_max_attempts(self) -> int:
        """How many times the initial fetch is attempted."""
        raw = self._section("load").get("max_attempts", DEFAULT_LOAD_MAX_ATTEMPTS)
        return _as_int(raw, DEFAULT_LOAD_MAX_ATTEMPTS, minimum=1)

    @load_max_attempts.setter
    def load_max_attempts(self, value: int) -> None:
        self._set_in_section("load", "max_attempts", max(1, int(value)))

    @property
    def load_retry_delay_seconds(self) -> float:
        """Delay before the first retry; doubled on every further retry."""
        raw = self._section("load").get(
            "retry_delay_seconds", DEFAULT_LOAD_RETRY_DELAY_SECONDS
        )
        return _as_float(raw, DEFAULT_LOAD_RETRY_DELAY_SECONDS)

    @load_retry_delay_seconds.setter
    def load_retry_delay_seconds(self, value: float) -> None:
        self._set_in_section("load", "retry_delay_seconds", max(0.0, float(value)))

    # --- Simulated Backend Settings ---

    @property
    def backend_latency_ms(self) -> int:
        """Artificial latency added to every backend call."""
        raw = self._section("backend").get("latency_ms", 0)
        return _as_int(raw, 0)

    @backend_latency_ms.setter
    def backend_latency_ms(self, value: int) -> None:
        self._set_in_section("backend", "latency_ms", max(0, int(value)))

    @property
    def backend_failure_rate(self) -> float:
        """Probability (0..1) that a simulated mutation is rejected."""
        raw = self._section("backend").get("failure_rate", 0.0)
        return min(1.0, _as_float(raw, 0.0))

    @backend_failure_rate.setter
    def backend_failure_rate(self, value: float) -> None:
        clamped = min(1.0, max(0.0, float(value)))
        self._set_in_section("backend", "failure_rate", clamped)


# Global settings instance
settings = Settings()
