"""
SQL Blob Store Implementation

Durable implementation backed by the ``blobs`` table through SQLAlchemy.
Used when STORAGE_BACKEND=sql (the default). Works with any SQLAlchemy
URL; the default is a SQLite file under ``data/``.

Version: 1.0.0
"""

import logging
from typing import Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError

from brewhouse.database import create_db_engine, create_session_factory, init_db
from brewhouse.models import Blob
from brewhouse.services.storage.base import BaseBlobStore

logger = logging.getLogger(__name__)


class SqlBlobStore(BaseBlobStore):
    """
    Blob store persisting one row per key.

    Each put() is its own transaction, so a mutation is either fully
    written or not written at all.

    Example:
        >>> store = SqlBlobStore("sqlite:///./data/brewhouse.db")
        >>> store.put("order_history", "[]")
    """

    def __init__(self, database_url: str, echo: bool = False):
        """
        Initialize the engine and create the table if needed.

        Args:
            database_url: SQLAlchemy connection URL
            echo: Log all SQL statements
        """
        self._engine = create_db_engine(database_url, echo=echo)
        self._session_factory = create_session_factory(self._engine)
        init_db(self._engine)

        logger.info(f"SqlBlobStore initialized ({self._engine.url.get_backend_name()})")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "sql"

    def get(self, key: str) -> Optional[str]:
        with self._session_factory() as session:
            return session.scalar(select(Blob.value).where(Blob.key == key))

    def put(self, key: str, value: str) -> None:
        with self._session_factory.begin() as session:
            blob = session.get(Blob, key)
            if blob is None:
                session.add(Blob(key=key, value=value))
            else:
                blob.value = value
        logger.debug(f"SQL: stored {key} ({len(value)} chars)")

    def health_check(self) -> bool:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"SQL blob store health check failed: {e}")
            return False

    def dispose(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()
