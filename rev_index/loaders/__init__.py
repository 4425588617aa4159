# Path: rev_index/loaders/__init__.py
"""
rev_index Loaders Package

Readers for the revision store.

Data Sources:
    - database: revisions table of the revision store (keyset paginated)
    - sequence: any Python iterable of Revision objects

Example:
    from rev_index.loaders import DatabaseRevisionSource

    with DatabaseRevisionSource.open(config) as source:
        while source.has_next():
            revision = source.next()
"""

from .revision_data import Revision
from .revision_reader import (
    RevisionSource,
    SequenceRevisionSource,
    DatabaseRevisionSource,
    open_revision_source,
)

__all__ = [
    'Revision',
    'RevisionSource',
    'SequenceRevisionSource',
    'DatabaseRevisionSource',
    'open_revision_source',
]
