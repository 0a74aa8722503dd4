"""Errors raised while loading or watching a configuration file."""

from pathlib import Path


class ConfigError(Exception):
    """Base class for configuration load and watch failures."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ConfigIOError(ConfigError):
    """Raised when the file is missing, unreadable or has no metadata."""


class DecodeError(ConfigError):
    """Raised when the file content is malformed or does not fit the model."""


class ClockError(ConfigError):
    """Raised when the modification time predates the Unix epoch."""
