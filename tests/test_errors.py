"""Tests for the error types."""

from pathlib import Path

import pytest

from config_updater.errors import ClockError, ConfigError, ConfigIOError, DecodeError


class TestConfigErrors:
    """Tests for the configuration error hierarchy."""

    @pytest.mark.parametrize("error_cls", [ConfigIOError, DecodeError, ClockError])
    def test_subclasses_config_error(self, error_cls):
        """All specific errors can be caught as ConfigError."""
        error = error_cls(Path("config.json"), "boom")
        assert isinstance(error, ConfigError)

    def test_message_includes_path_and_reason(self):
        """The message names the file and the reason."""
        error = DecodeError(Path("/etc/app/config.json"), "malformed content")

        assert error.path == Path("/etc/app/config.json")
        assert error.reason == "malformed content"
        assert str(error) == "/etc/app/config.json: malformed content"
