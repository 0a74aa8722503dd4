"""Pytest configuration and fixtures."""

import json
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Arbitrary whole-second timestamp the fixtures pin files to
BASE_MTIME = 1_700_000_000


@pytest.fixture
def base_mtime() -> int:
    return BASE_MTIME


@pytest.fixture
def set_mtime() -> Callable[[Path, int], None]:
    """Pin a file's modification time to a whole second."""

    def _set(path: Path, mtime: int) -> None:
        os.utime(path, (mtime, mtime))

    return _set


@pytest.fixture
def write_config(set_mtime) -> Callable[..., Path]:
    """Write content to a file and pin its modification time.

    Tests control timestamps explicitly so they never depend on the
    filesystem's timestamp resolution.
    """

    def _write(path: Path, content: Any, mtime: int = BASE_MTIME) -> Path:
        if isinstance(content, bytes):
            path.write_bytes(content)
        elif isinstance(content, str):
            path.write_text(content)
        else:
            path.write_text(json.dumps(content))
        set_mtime(path, mtime)
        return path

    return _write


@pytest.fixture
def config_file(tmp_path: Path, write_config) -> Path:
    """A JSON config file containing {"id": 1}."""
    return write_config(tmp_path / "config.json", {"id": 1})
