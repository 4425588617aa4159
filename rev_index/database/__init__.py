# Path: rev_index/database/__init__.py
"""
rev_index Database Module

Reads the revision store and writes the revision index.

This module provides:
- Table definitions for the revision store and the revision index
- Engine construction (PostgreSQL in production, SQLite for tests)
- Paginated reads and batched inserts

Design Principles:
- Table names come from configuration
- One engine per run, owned by the component that opened it
- Every batch is its own transaction

Example:
    from rev_index.database import (
        create_db_engine, connection_scope, create_tables, new_metadata,
        revision_index_table, IndexOperations,
    )

    engine = create_db_engine('sqlite:///index.db')
    table = revision_index_table(new_metadata(), 'index_revisions')
    create_tables(engine, [table])

    with connection_scope(engine) as connection:
        IndexOperations.insert_batch(connection, table, rows)
"""

from rev_index.database.models import (
    create_db_engine,
    connection_scope,
    create_tables,
    new_metadata,
    get_connection_info,
    revision_table,
    revision_index_table,
)
from rev_index.database.operations import (
    IndexOperations,
    RevisionOperations,
)


__all__ = [
    # Engine
    'create_db_engine',
    'connection_scope',
    'create_tables',
    'new_metadata',
    'get_connection_info',
    # Tables
    'revision_table',
    'revision_index_table',
    # Operations
    'IndexOperations',
    'RevisionOperations',
]
