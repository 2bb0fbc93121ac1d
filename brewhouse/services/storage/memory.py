"""
In-Memory Blob Store

Keeps blobs in a dict. Nothing survives a restart, which makes it the
store of choice for tests and demos (STORAGE_BACKEND=memory).

Version: 1.0.0
"""

import logging
from typing import Optional

from brewhouse.services.storage.base import BaseBlobStore

logger = logging.getLogger(__name__)


class MemoryBlobStore(BaseBlobStore):
    """
    Dict-backed blob store.

    Attributes:
        writes: Number of put() calls served, handy for asserting that a
            mutation was (or was not) persisted
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._blobs: dict[str, str] = dict(initial or {})
        self.writes = 0
        logger.info("MemoryBlobStore initialized")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "memory"

    def get(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def put(self, key: str, value: str) -> None:
        self._blobs[key] = value
        self.writes += 1
        logger.debug(f"Memory: stored {key} ({len(value)} chars)")

    def health_check(self) -> bool:
        """Memory store is always available."""
        return True
