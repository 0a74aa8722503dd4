"""Top-level handle tying the loader, store and watcher together."""

import asyncio
import logging
import math
from collections.abc import Callable
from pathlib import Path
from typing import Any, Generic, TypeVar

from config_updater.loader import ConfigLoader, Decoder, file_mtime
from config_updater.store import ConfigStore
from config_updater.watcher import ConfigWatcher, ErrorPolicy, ReloadResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_INTERVAL = 300.0


class ConfigMonitor(Generic[T]):
    """Keeps a decoded configuration value in sync with its file.

    The file is loaded synchronously on construction; any failure there is
    raised to the caller and no monitor is created. After monitor() is
    called, a background task polls the file and publishes changes to the
    shared store returned by data().

    Example:
        class AppConfig(BaseModel):
            id: int

        config_monitor = ConfigMonitor("config.json", AppConfig, interval=30)
        config = config_monitor.data()
        task = config_monitor.monitor()

        print(config.get().id)
    """

    def __init__(
        self,
        path: str | Path,
        model: type[T] | Any,
        interval: float | None = None,
        decoder: str | Decoder | None = None,
        error_policy: ErrorPolicy = ErrorPolicy.STOP,
    ):
        self.path = Path(path)
        self.interval = float(interval) if interval is not None else DEFAULT_INTERVAL
        if not math.isfinite(self.interval) or self.interval <= 0:
            raise ValueError(f"Poll interval must be a positive number of seconds, got {self.interval}")

        self._loader: ConfigLoader[T] = ConfigLoader(self.path, model, decoder=decoder)

        # Timestamp first so an edit racing the initial load is picked up
        last_modified = file_mtime(self.path)
        self._store: ConfigStore[T] = ConfigStore(self._loader.load())

        self._watcher: ConfigWatcher[T] = ConfigWatcher(
            self._loader,
            self._store,
            interval=self.interval,
            error_policy=error_policy,
            last_seen=last_modified,
        )

        logger.info(f"Loaded config from {self.path}")

    def data(self) -> ConfigStore[T]:
        """Get the shared store holding the current value."""
        return self._store

    @property
    def watcher(self) -> ConfigWatcher[T]:
        return self._watcher

    def monitor(self) -> asyncio.Task[None]:
        """Start the background watcher.

        Must be called from a running event loop. Awaiting the returned task
        raises the error that stopped the watcher, if any.
        """
        return self._watcher.start()

    async def stop(self) -> None:
        """Stop the background watcher and wait for it to exit."""
        await self._watcher.stop()

    def add_callback(self, callback: Callable[[ReloadResult], Any]) -> None:
        """Add a callback to be called with every reload result."""
        self._watcher.add_callback(callback)

    def get_reload_history(self, limit: int = 10) -> list[ReloadResult]:
        return self._watcher.get_reload_history(limit)

    async def __aenter__(self) -> "ConfigMonitor[T]":
        self.monitor()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()
