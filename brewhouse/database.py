"""
Database Connection Module
Handles the SQLAlchemy engine backing the blob store.

The storefront mutates state synchronously from a single event loop, so a
plain (non-async) engine is used; each blob write is one short transaction.
"""

import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

logger = logging.getLogger(__name__)


# Base class for all our models
class Base(DeclarativeBase):
    pass


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine, making sure a SQLite file's directory exists.

    Args:
        database_url: SQLAlchemy connection URL
        echo: Log all SQL statements
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    return create_engine(database_url, echo=echo, future=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory - creates new database sessions."""
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,  # Objects remain accessible after commit
    )


def init_db(engine: Engine) -> None:
    """
    Create all tables in database.
    Called once when the SQL blob store starts.
    """
    # Import models so they register with Base.metadata
    from brewhouse import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")
