"""Keep a typed configuration value up to date without restarting.

- Initial synchronous load into a shared, lock-guarded store
- Background polling of the file's modification time
- Atomic replacement of the stored value on change
"""

__version__ = "0.1.0"

from config_updater.errors import ClockError, ConfigError, ConfigIOError, DecodeError
from config_updater.loader import ConfigLoader, file_mtime
from config_updater.log import setup_logging
from config_updater.monitor import ConfigMonitor
from config_updater.store import ConfigStore
from config_updater.watcher import ConfigWatcher, ErrorPolicy, ReloadResult, ReloadStatus

__all__ = [
    "ClockError",
    "ConfigError",
    "ConfigIOError",
    "ConfigLoader",
    "ConfigMonitor",
    "ConfigStore",
    "ConfigWatcher",
    "DecodeError",
    "ErrorPolicy",
    "ReloadResult",
    "ReloadStatus",
    "file_mtime",
    "setup_logging",
    "__version__",
]
