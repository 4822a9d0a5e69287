"""Error types surfaced by the watchdog's outer layers.

The activity engine itself never raises; these cover configuration, the
session-listing collaborator and the queue checks.
"""


class WatchdogError(Exception):
    """Base class for user-facing watchdog errors."""


class ConfigError(WatchdogError, ValueError):
    """Raised when watchdog configuration values are invalid."""

    def __init__(self, details: str) -> None:
        super().__init__(f"Invalid watchdog configuration: {details}")


class SessionListError(WatchdogError):
    """Raised when the session-listing command fails or returns bad output."""


class QueueFileError(WatchdogError):
    """Raised when the task queue file is missing or malformed."""
