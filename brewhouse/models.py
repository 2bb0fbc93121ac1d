"""
SQLAlchemy Database Models

The storefront persists three opaque JSON blobs (menu, order_history,
cloud_config). Each one is a row in the ``blobs`` table keyed by name.

Version: 1.0.0
"""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from brewhouse.database import Base


class Blob(Base):
    """One named JSON document."""
    __tablename__ = "blobs"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self):
        return f"<Blob {self.key} ({len(self.value or '')} chars)>"
