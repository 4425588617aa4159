# Path: rev_index/database/operations/__init__.py
"""
Database Operations for rev_index.

Provides:
- IndexOperations: bulk inserts and lookups on the index table
- RevisionOperations: paginated reads from the revision store
"""

from rev_index.database.operations.index_ops import IndexOperations
from rev_index.database.operations.revision_ops import RevisionOperations


__all__ = [
    'IndexOperations',
    'RevisionOperations',
]
