# Path: rev_index/process/entry_builder.py
"""
Index Entry Builder

Turns one Revision into one IndexEntry.

The builder records the locator the revision store already knows
(row key and full revision row key); it never reads content and never
recomputes offsets. It holds no state, so one instance can build every
entry of a run and building the same revision twice gives equal entries.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from rev_index.loaders.revision_data import Revision


def utc_naive(timestamp: datetime) -> datetime:
    """Naive UTC form of a timestamp; naive timestamps are taken as UTC."""
    if timestamp.tzinfo is None:
        return timestamp
    return timestamp.astimezone(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class Locator:
    """
    Physical location of a revision in the store.

    Attributes:
        primary_key: Row key of the stored revision
        full_revision_pk: Row key of the full revision its diff chain
                          starts from
    """
    primary_key: int
    full_revision_pk: int


@dataclass(frozen=True)
class IndexEntry:
    """
    One row of the revision index.

    Attributes:
        revision_id: Revision identifier (index key)
        article_id: Article identifier
        revision_counter: Position of the revision within its article
        locator: Where the revision is stored
        timestamp: Revision timestamp
        size: Stored content size in bytes, if known
    """
    revision_id: int
    article_id: int
    revision_counter: int
    locator: Locator
    timestamp: datetime
    size: Optional[int] = None

    def to_row(self) -> dict:
        """
        Convert entry to an index table row.

        Returns:
            Dictionary keyed by index table column names
        """
        return {
            'revision_id': self.revision_id,
            'article_id': self.article_id,
            'revision_counter': self.revision_counter,
            'primary_key': self.locator.primary_key,
            'full_revision_pk': self.locator.full_revision_pk,
            'timestamp': utc_naive(self.timestamp),
            'size': self.size,
        }


class IndexEntryBuilder:
    """
    Builds index entries from revisions.

    Example:
        builder = IndexEntryBuilder()
        entry = builder.build(revision)
        assert entry.revision_id == revision.revision_id
    """

    def build(self, revision: Revision) -> IndexEntry:
        """
        Build the index entry of a revision.

        Args:
            revision: Revision read from the store

        Returns:
            IndexEntry pointing at the revision's stored location
        """
        return IndexEntry(
            revision_id=revision.revision_id,
            article_id=revision.article_id,
            revision_counter=revision.revision_counter,
            locator=Locator(
                primary_key=revision.primary_key,
                full_revision_pk=revision.full_revision_pk,
            ),
            timestamp=revision.timestamp,
            size=revision.content_size,
        )


__all__ = ['utc_naive', 'Locator', 'IndexEntry', 'IndexEntryBuilder']
