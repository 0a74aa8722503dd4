"""Reading and decoding the configuration file.

Decoding happens in two steps:
- A format decoder turns raw bytes into plain Python data (JSON, YAML, TOML)
- A pydantic TypeAdapter validates that data into the target type
"""

import json
import logging
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, Generic, TypeVar

import yaml
from pydantic import TypeAdapter, ValidationError

from config_updater.errors import ClockError, ConfigIOError, DecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Decoder = Callable[[bytes], Any]


def _decode_toml(raw: bytes) -> Any:
    return tomllib.loads(raw.decode("utf-8"))


DECODERS: dict[str, Decoder] = {
    "json": json.loads,
    "yaml": yaml.safe_load,
    "toml": _decode_toml,
}

SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
}


def resolve_decoder(path: Path, decoder: str | Decoder | None = None) -> Decoder:
    """Pick the format decoder for a file.

    Args:
        path: The configuration file.
        decoder: Explicit format name or callable. When None, the file
            suffix decides, falling back to JSON.

    Returns:
        Callable turning raw bytes into plain Python data.

    Raises:
        ValueError: If an unknown format name is given.
    """
    if callable(decoder):
        return decoder

    if decoder is None:
        decoder = SUFFIX_FORMATS.get(path.suffix.lower(), "json")

    try:
        return DECODERS[decoder.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown config format '{decoder}' (expected one of: {', '.join(DECODERS)})"
        ) from None


def file_mtime(path: Path) -> int:
    """Get the file's modification time in whole seconds since the Unix epoch.

    Raises:
        ConfigIOError: If the file is missing or its metadata is unavailable.
        ClockError: If the modification time is before the epoch.
    """
    try:
        mtime = path.stat().st_mtime
    except OSError as e:
        raise ConfigIOError(path, f"cannot read modification time: {e}") from e

    if mtime < 0:
        raise ClockError(path, f"modification time {mtime} predates the Unix epoch")

    return int(mtime)


class ConfigLoader(Generic[T]):
    """Loads a configuration file into a typed value.

    The model can be anything pydantic can validate: a BaseModel subclass,
    a dataclass, a TypedDict or a plain annotated type like dict[str, int].
    """

    def __init__(
        self,
        path: str | Path,
        model: type[T] | Any,
        decoder: str | Decoder | None = None,
    ):
        self.path = Path(path)
        self.model = model
        self._decode = resolve_decoder(self.path, decoder)
        self._adapter: TypeAdapter[T] = TypeAdapter(model)

    def read(self) -> bytes:
        """Read the full file contents."""
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise ConfigIOError(self.path, f"cannot read file: {e}") from e

    def decode(self, raw: bytes) -> T:
        """Decode raw bytes into the model type.

        Raises:
            DecodeError: On a syntax error or a schema mismatch.
        """
        try:
            data = self._decode(raw)
        except DecodeError:
            raise
        except Exception as e:
            # Custom decoders may raise anything
            raise DecodeError(self.path, f"malformed content: {e}") from e

        try:
            return self._adapter.validate_python(data)
        except ValidationError as e:
            raise DecodeError(
                self.path, f"content does not match {self._model_name()}: {e}"
            ) from e

    def load(self) -> T:
        """Read and decode the file.

        Raises:
            ConfigIOError: If the file is missing or unreadable.
            DecodeError: If the content is malformed or schema-incompatible.
        """
        value = self.decode(self.read())
        logger.debug(f"Loaded {self._model_name()} from {self.path}")
        return value

    def _model_name(self) -> str:
        return getattr(self.model, "__name__", repr(self.model))
