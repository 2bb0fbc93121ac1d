"""
Blob Store Abstract Base Class

Defines the interface contract for the key-value store that keeps the
storefront's persisted state. Values are opaque strings (JSON documents);
the store never looks inside them.

Design Pattern: Strategy Pattern
    - MemoryBlobStore for tests and throwaway runs
    - SqlBlobStore for durable storage through SQLAlchemy

Version: 1.0.0
"""

from abc import ABC, abstractmethod
from typing import Optional

MENU_KEY = "menu"
ORDER_HISTORY_KEY = "order_history"
CLOUD_CONFIG_KEY = "cloud_config"


class BaseBlobStore(ABC):
    """
    Abstract base class for blob stores.

    Example:
        >>> store = get_blob_store()
        >>> store.put("menu", "[]")
        >>> store.get("menu")
        '[]'
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the storage backend.

        Returns:
            str: Backend name (e.g., "memory", "sql")
        """
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a blob.

        Args:
            key: Blob name

        Returns:
            The stored string, or None if nothing is stored under ``key``
        """
        pass

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """
        Write a blob, replacing any previous value.

        Args:
            key: Blob name
            value: Serialized document
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """
        Verify the backend is usable.

        Returns:
            bool: True if reads and writes can be served
        """
        pass
