"""
Blob Store Factory

Provides a single entry point for obtaining the blob store that keeps the
menu, order history and cloud configuration.

Usage:
    from brewhouse.services.storage import get_blob_store

    # Returns SqlBlobStore or MemoryBlobStore based on STORAGE_BACKEND
    store = get_blob_store()
    store.put("menu", "[]")

Version: 1.0.0
"""

import logging
from functools import lru_cache

from brewhouse.core.config import StorageBackend, get_settings
from brewhouse.services.storage.base import (
    BaseBlobStore,
    CLOUD_CONFIG_KEY,
    MENU_KEY,
    ORDER_HISTORY_KEY,
)
from brewhouse.services.storage.memory import MemoryBlobStore
from brewhouse.services.storage.sql import SqlBlobStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_blob_store() -> BaseBlobStore:
    """
    Get the configured blob store instance.

    The instance is cached so every caller shares the same store.

    Returns:
        BaseBlobStore: Configured blob store
    """
    settings = get_settings()

    if settings.storage_backend == StorageBackend.MEMORY:
        logger.info("Blob Store: Using MemoryBlobStore")
        return MemoryBlobStore()

    logger.info("Blob Store: Using SqlBlobStore")
    return SqlBlobStore(settings.database_url, echo=settings.debug)


def reset_blob_store() -> None:
    """
    Clear the cached blob store instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_blob_store.cache_clear()
    logger.debug("Blob store cache cleared")


__all__ = [
    "get_blob_store",
    "reset_blob_store",
    "BaseBlobStore",
    "MemoryBlobStore",
    "SqlBlobStore",
    "MENU_KEY",
    "ORDER_HISTORY_KEY",
    "CLOUD_CONFIG_KEY",
]
