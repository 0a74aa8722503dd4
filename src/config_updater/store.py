"""Shared, lock-guarded holder for the current configuration value."""

import contextlib
import threading
from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class ConfigStore(Generic[T]):
    """Single-slot container for the latest decoded configuration.

    Every holder of a store sees the same live value. Reads and writes are
    serialized through one lock, and the lock is only held for the slot
    access itself, never while reading or decoding the file.

    Replacing a value swaps the whole slot, so a reader gets either the
    value before a replace or the value after it.
    """

    def __init__(self, initial: T) -> None:
        self._lock = threading.Lock()
        self._value = initial
        self._version = 0

    def get(self) -> T:
        """Return the current value."""
        with self._lock:
            return self._value

    @property
    def version(self) -> int:
        """Number of replacements since the initial load."""
        with self._lock:
            return self._version

    def snapshot(self) -> tuple[int, T]:
        """Return the current version and value as one consistent pair."""
        with self._lock:
            return self._version, self._value

    @contextlib.contextmanager
    def locked(self) -> Iterator[T]:
        """Hold the guard while working with the current value.

        Keep the body short: replacements wait until it exits.
        """
        with self._lock:
            yield self._value

    def replace(self, value: T) -> int:
        """Atomically substitute the stored value.

        Returns:
            The new version number.
        """
        with self._lock:
            self._value = value
            self._version += 1
            return self._version
