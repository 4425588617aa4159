# Path: rev_index/database/models/base.py
"""
Database Engine Configuration

SQLAlchemy engine construction and connection scopes.
Supports PostgreSQL (primary), any SQLAlchemy URL, and SQLite (testing).

Architecture:
- No module level engine: every run creates its own engine from its
  configuration and disposes it when the run ends
- PostgreSQL with connection pooling for production
- SQLite file or in-memory for testing
- Transactional connection scope for bulk writes
"""

import logging
from pathlib import Path
from contextlib import contextmanager
from typing import Generator, Iterable, Union

from sqlalchemy import MetaData, Table, create_engine
from sqlalchemy.engine import URL, Connection, Engine, make_url
from sqlalchemy.pool import StaticPool, QueuePool


# Logger setup
logger = logging.getLogger(__name__)

# Pool settings for server databases
POOL_SIZE = 5
POOL_MAX_OVERFLOW = 10
POOL_TIMEOUT = 30
POOL_RECYCLE = 3600


def create_db_engine(db_url: Union[str, URL]) -> Engine:
    """
    Create a database engine for one run.

    Args:
        db_url: SQLAlchemy URL. 'sqlite://' or ':memory:' creates an
                in-memory SQLite database.

    Returns:
        SQLAlchemy engine; the caller owns it and must dispose it

    Example:
        # PostgreSQL
        engine = create_db_engine('postgresql+psycopg2://user:pw@host/revisions')

        # In-memory SQLite (for testing)
        engine = create_db_engine(':memory:')
    """
    if db_url == ':memory:':
        db_url = 'sqlite://'
    url = make_url(db_url)

    if url.get_backend_name() == 'sqlite':
        if url.database and url.database != ':memory:':
            # Ensure parent directory exists
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(
                url,
                connect_args={'check_same_thread': False},
                echo=False,
            )
            logger.info("Database engine initialized: SQLite file")
        else:
            engine = create_engine(
                url,
                connect_args={'check_same_thread': False},
                poolclass=StaticPool,
                echo=False,
            )
            logger.info("Database engine initialized: SQLite in-memory (testing)")
        return engine

    engine = create_engine(
        url,
        poolclass=QueuePool,
        pool_size=POOL_SIZE,
        max_overflow=POOL_MAX_OVERFLOW,
        pool_timeout=POOL_TIMEOUT,
        pool_recycle=POOL_RECYCLE,
        echo=False,
    )
    logger.info(
        f"Database engine initialized: {url.get_backend_name()} "
        f"({url.host}:{url.port or 'default'}/{url.database})"
    )
    return engine


@contextmanager
def connection_scope(engine: Engine) -> Generator[Connection, None, None]:
    """
    Provide transactional scope for database operations.

    Commits when the block finishes, rolls back when it raises.

    Yields:
        SQLAlchemy connection

    Example:
        with connection_scope(engine) as connection:
            connection.execute(insert(table), rows)
    """
    with engine.connect() as connection:
        transaction = connection.begin()
        try:
            yield connection
            transaction.commit()
        except Exception:
            transaction.rollback()
            raise


def create_tables(engine: Engine, tables: Iterable[Table]) -> None:
    """
    Create the given tables if they do not exist.

    Safe to call multiple times (idempotent).
    """
    tables = list(tables)
    if not tables:
        return
    tables[0].metadata.create_all(engine, tables=tables)
    logger.info(f"Database tables ready: {', '.join(t.name for t in tables)}")


def new_metadata() -> MetaData:
    """Fresh MetaData so table names from configuration never collide."""
    return MetaData()


def get_connection_info(engine: Engine) -> dict:
    """
    Get connection info without credentials.

    Returns:
        Dictionary with connection details
    """
    return {
        'type': engine.url.get_backend_name(),
        'url': engine.url.render_as_string(hide_password=True),
    }


__all__ = [
    'create_db_engine',
    'connection_scope',
    'create_tables',
    'new_metadata',
    'get_connection_info',
]
