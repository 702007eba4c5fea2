"""Runtime settings for the storefront, read from the environment.

Protean's own settings (providers, processing mode) live in ``domain.toml``;
these cover the collaborators the domain plugs in.

    STOREFRONT_STORAGE         "memory" (default) or "file"
    STOREFRONT_STORAGE_DIR     directory for the file store (default ".storefront")
    STOREFRONT_ORDER_LATENCY   simulated order-service delay in seconds (default 0)
"""

import os

STORAGE_MEMORY = "memory"
STORAGE_FILE = "file"


def storage_backend() -> str:
    backend = os.getenv("STOREFRONT_STORAGE", STORAGE_MEMORY).lower()
    if backend not in (STORAGE_MEMORY, STORAGE_FILE):
        raise ValueError(f"Unknown storage backend: {backend!r}")
    return backend


def storage_dir() -> str:
    return os.getenv("STOREFRONT_STORAGE_DIR", ".storefront")


def order_latency() -> float:
    return float(os.getenv("STOREFRONT_ORDER_LATENCY", "0"))
