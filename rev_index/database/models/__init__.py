# Path: rev_index/database/models/__init__.py
"""
Database Models for rev_index.

Provides SQLAlchemy table definitions for:
- Revision store (source, read only)
- Revision index (target)

Plus engine construction and connection scopes.
"""

from rev_index.database.models.base import (
    create_db_engine,
    connection_scope,
    create_tables,
    new_metadata,
    get_connection_info,
)
from rev_index.database.models.revisions import revision_table
from rev_index.database.models.revision_index import revision_index_table


__all__ = [
    'create_db_engine',
    'connection_scope',
    'create_tables',
    'new_metadata',
    'get_connection_info',
    'revision_table',
    'revision_index_table',
]
