"""Durable key-value store writing one file per key.

Survives process restarts, which gives the cart and order history continuity
across reloads. Writes replace the file through a temporary sibling so a
reader never sees a half-written value.
"""

import os
import re
from pathlib import Path

import structlog

from storefront.storage.port import KeyValueStore

logger = structlog.get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class FileStore(KeyValueStore):
    """Directory-backed store: ``<directory>/<sanitized key>.json``."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)
        logger.debug("Stored value", key=key, path=str(path), size=len(value))

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)
