"""In-process key-value store for development and testing."""

from storefront.storage.port import KeyValueStore


class MemoryStore(KeyValueStore):
    """Dictionary-backed store. Contents live as long as the process."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
