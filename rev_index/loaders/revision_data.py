# Path: rev_index/loaders/revision_data.py
"""
Revision Data

Immutable revision record as read from the revision store.
Content itself is never loaded; only the metadata that locates it.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Revision:
    """
    One stored revision of an article.

    Attributes:
        primary_key: Row key of the revision in the store
        revision_counter: 1-based position within its article
        revision_id: Revision identifier
        article_id: Article identifier
        timestamp: Time the revision was made
        full_revision_pk: Row key of the full revision the stored diff
                          is based on (equals primary_key for full revisions)
        content_size: Stored content size in bytes, if known
    """
    primary_key: int
    revision_counter: int
    revision_id: int
    article_id: int
    timestamp: datetime
    full_revision_pk: int
    content_size: Optional[int] = None

    @property
    def is_full_revision(self) -> bool:
        """True when the stored content is a full text, not a diff."""
        return self.primary_key == self.full_revision_pk


__all__ = ['Revision']
