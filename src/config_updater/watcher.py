"""Background polling of the configuration file.

The watcher compares the file's modification time (whole seconds) on every
poll. When it differs from the last seen value the file is loaded again and
the new value replaces the one in the store.
"""

import asyncio
import contextlib
import logging
import math
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Generic, TypeVar

from config_updater import __version__
from config_updater.errors import ConfigError
from config_updater.loader import ConfigLoader, file_mtime
from config_updater.store import ConfigStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorPolicy(Enum):
    """What the watcher does when a poll iteration fails."""

    STOP = "stop"  # End the watcher task, keep the last good value
    CONTINUE = "continue"  # Log, keep the last good value, keep polling


class ReloadStatus(Enum):
    """Outcome of a reload attempt."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class ReloadResult:
    """Result of one reload attempt."""

    status: ReloadStatus
    path: Path
    modified_at: int | None
    version: int | None = None
    error_message: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


class ConfigWatcher(Generic[T]):
    """Polls a file and publishes every new decoded value to a store.

    Flow per iteration:
    1. Read the modification time
    2. If it changed: load the file and replace the stored value
    3. Sleep for the interval (or until stop() is called)

    With ErrorPolicy.STOP any failure ends the task and re-raises, so the
    store keeps its last good value and no further reloads happen.
    """

    def __init__(
        self,
        loader: ConfigLoader[T],
        store: ConfigStore[T],
        interval: float = 300.0,
        error_policy: ErrorPolicy = ErrorPolicy.STOP,
        last_seen: int | None = None,
        history_limit: int = 50,
    ):
        if not math.isfinite(interval) or interval <= 0:
            raise ValueError(f"Poll interval must be a positive number of seconds, got {interval}")

        self.loader = loader
        self.store = store
        self.interval = float(interval)
        self.error_policy = error_policy

        self._last_seen = last_seen
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._running = False
        self._callbacks: list[Callable[[ReloadResult], Any]] = []
        self._history: deque[ReloadResult] = deque(maxlen=history_limit)

    @property
    def path(self) -> Path:
        return self.loader.path

    @property
    def last_seen(self) -> int | None:
        """Last modification time the watcher acted on."""
        return self._last_seen

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def task(self) -> asyncio.Task[None] | None:
        return self._task

    def add_callback(self, callback: Callable[[ReloadResult], Any]) -> None:
        """Add a callback to be called with every reload result."""
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[ReloadResult], Any]) -> None:
        """Remove a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def get_reload_history(self, limit: int = 10) -> list[ReloadResult]:
        """Get recent reload results, oldest first."""
        return list(self._history)[-limit:]

    def check_changed(self) -> int | None:
        """Check the file's modification time against the last seen one.

        The first call only records the current time.

        Returns:
            The new modification time if it changed, else None.
        """
        current = file_mtime(self.path)

        if self._last_seen is None:
            self._last_seen = current
            return None

        if current == self._last_seen:
            return None

        self._last_seen = current
        return current

    async def poll_once(self) -> ReloadResult | None:
        """Run a single poll iteration without sleeping.

        Returns:
            The reload result, or None if the file did not change.

        Raises:
            ConfigError: If reading the timestamp or loading the file fails.
        """
        modified_at = None
        try:
            modified_at = self.check_changed()
            if modified_at is None:
                logger.debug(f"No changes to {self.path}")
                return None

            logger.info("Found file changes, updating config...")
            value = await asyncio.to_thread(self.loader.load)
        except ConfigError as e:
            await self._publish(
                ReloadResult(
                    status=ReloadStatus.FAILED,
                    path=self.path,
                    modified_at=modified_at,
                    error_message=str(e),
                )
            )
            raise

        version = self.store.replace(value)
        logger.info(f"Reloaded config from {self.path} (version {version})")

        result = ReloadResult(
            status=ReloadStatus.SUCCESS,
            path=self.path,
            modified_at=modified_at,
            version=version,
        )
        await self._publish(result)
        return result

    async def run(self) -> None:
        """Poll until stopped or, under ErrorPolicy.STOP, until a failure."""
        self._running = True
        logger.info(
            f"Watching {self.path} every {self.interval:g}s (config-updater v{__version__})"
        )

        try:
            while not self._stop_event.is_set():
                try:
                    await self.poll_once()
                except ConfigError as e:
                    if self.error_policy is ErrorPolicy.STOP:
                        logger.error(f"Config reload failed, no further reloads: {e}")
                        raise
                    logger.error(f"Config reload failed, keeping last good value: {e}")

                await self._sleep()
        finally:
            self._running = False
            logger.info(f"Stopped watching {self.path}")

    def start(self) -> asyncio.Task[None]:
        """Spawn the poll loop on the running event loop.

        Returns the existing task if the watcher is already running.
        """
        if self._task is not None and not self._task.done():
            return self._task

        self._stop_event.clear()
        self._task = asyncio.create_task(self.run(), name=f"config-watcher:{self.path}")
        return self._task

    async def stop(self) -> None:
        """Signal the poll loop to exit and wait for the task to finish.

        A failure the task already ended with is not raised here; await the
        task itself to observe it.
        """
        self._stop_event.set()
        if self._task is None:
            return

        if not self._task.done():
            await asyncio.wait([self._task])

        # Marks the failure as retrieved so asyncio does not report it on gc
        if not self._task.cancelled():
            self._task.exception()

    async def _sleep(self) -> None:
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)

    async def _publish(self, result: ReloadResult) -> None:
        self._history.append(result)

        for callback in list(self._callbacks):
            try:
                outcome = callback(result)
                if asyncio.iscoroutine(outcome):
                    await outcome
            except Exception as e:
                logger.error(f"Reload callback error: {e}")
