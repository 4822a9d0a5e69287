"""Watchdog configuration.

Precedence: explicit path > ``AUTONOMY_WATCHDOG_CONFIG`` > default YAML file >
environment variables. The activity windows themselves (5 min running,
2 min unknown) are fixed and not configurable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .sessions import DEFAULT_SESSIONS_COMMAND, SUBAGENT_MARKER

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "autonomy-watchdog"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "watchdog.yaml"

DEFAULT_ACTIVE_MINUTES = 10
DEFAULT_QUEUE_PATH = "tasks/QUEUE.md"
DEFAULT_QUEUE_MAX_AGE_HOURS = 24.0


def _positive_int(name: str, value: Any) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ConfigError(f"{name} must be positive, got {parsed}")
    return parsed


def _positive_float(name: str, value: Any) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc
    if parsed <= 0:
        raise ConfigError(f"{name} must be positive, got {parsed}")
    return parsed


@dataclass
class WatchdogConfig:
    """Settings for the CLI sweep and workspace checks."""

    active_minutes: int = DEFAULT_ACTIVE_MINUTES  # pre-filter for the session lister
    sessions_command: str = DEFAULT_SESSIONS_COMMAND
    subagent_marker: str = SUBAGENT_MARKER
    queue_path: str = DEFAULT_QUEUE_PATH
    queue_max_age_hours: float = DEFAULT_QUEUE_MAX_AGE_HOURS

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WatchdogConfig:
        """Create config from a dictionary (e.g., parsed YAML)."""
        section = data.get("watchdog", data)
        if not isinstance(section, dict):
            raise ConfigError("'watchdog' must be a mapping")

        config = cls.from_env()
        if "active_minutes" in section:
            config.active_minutes = _positive_int("active_minutes", section["active_minutes"])
        if "sessions_command" in section:
            config.sessions_command = str(section["sessions_command"])
        if "subagent_marker" in section:
            config.subagent_marker = str(section["subagent_marker"])
        if "queue_path" in section:
            config.queue_path = str(Path(str(section["queue_path"])).expanduser())
        if "queue_max_age_hours" in section:
            config.queue_max_age_hours = _positive_float(
                "queue_max_age_hours", section["queue_max_age_hours"]
            )
        return config

    @classmethod
    def from_yaml(cls, path: str | Path) -> WatchdogConfig:
        """Load config from YAML file."""
        path = Path(path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_env(cls) -> WatchdogConfig:
        """Create config from environment variables only."""
        config = cls()
        active = os.getenv("AUTONOMY_WATCHDOG_ACTIVE_MINUTES")
        if active:
            config.active_minutes = _positive_int("AUTONOMY_WATCHDOG_ACTIVE_MINUTES", active)
        command = os.getenv("AUTONOMY_WATCHDOG_SESSIONS_COMMAND")
        if command:
            config.sessions_command = command
        queue = os.getenv("AUTONOMY_WATCHDOG_QUEUE")
        if queue:
            config.queue_path = queue
        return config

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> WatchdogConfig:
        """Resolve config using the standard precedence chain."""
        if config_path:
            return cls.from_yaml(config_path)
        env_path = os.getenv("AUTONOMY_WATCHDOG_CONFIG")
        if env_path:
            return cls.from_yaml(env_path)
        if DEFAULT_CONFIG_FILE.exists():
            return cls.from_yaml(DEFAULT_CONFIG_FILE)
        return cls.from_env()
