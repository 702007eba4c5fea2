"""Key-value store factory.

Provides get_store() / set_store() to swap implementations:
- MemoryStore for development and testing (default)
- FileStore when STOREFRONT_STORAGE=file
"""

from storefront import config
from storefront.storage.file_adapter import FileStore
from storefront.storage.memory_adapter import MemoryStore
from storefront.storage.port import KeyValueStore

_current_store: KeyValueStore | None = None


def get_store() -> KeyValueStore:
    """Return the current store, building the configured one on first use."""
    global _current_store
    if _current_store is None:
        if config.storage_backend() == config.STORAGE_FILE:
            _current_store = FileStore(config.storage_dir())
        else:
            _current_store = MemoryStore()
    return _current_store


def set_store(store: KeyValueStore) -> None:
    """Override the active store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_store() -> None:
    """Reset to the configured default store."""
    global _current_store
    _current_store = None
