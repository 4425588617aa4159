# Path: rev_index/database/operations/revision_ops.py
"""
Revision Store Operations

Keyset-paginated reads from the revision store table.
"""

import logging
from typing import Optional, List

from sqlalchemy import Table, func, select
from sqlalchemy.engine import Connection, Row


logger = logging.getLogger(__name__)


class RevisionOperations:
    """
    Read operations on the revision store.

    Pages are ordered by PrimaryKey and selected with
    PrimaryKey > last key, so each page costs one index range scan
    no matter how far into the store the reader is.

    Example:
        with engine.connect() as connection:
            rows = RevisionOperations.fetch_page(connection, table, None, 1000)
            last = rows[-1].PrimaryKey if rows else None
    """

    @staticmethod
    def fetch_page(
        connection: Connection,
        table: Table,
        after_key: Optional[int],
        page_size: int,
    ) -> List[Row]:
        """
        Fetch the next page of revision metadata.

        Args:
            connection: Database connection
            table: Revision store table
            after_key: Last PrimaryKey of the previous page (None for first)
            page_size: Maximum rows to return

        Returns:
            Rows with PrimaryKey, FullRevisionID, RevisionCounter,
            RevisionID, ArticleID, Timestamp and ContentSize
        """
        stmt = select(
            table.c.PrimaryKey,
            table.c.FullRevisionID,
            table.c.RevisionCounter,
            table.c.RevisionID,
            table.c.ArticleID,
            table.c.Timestamp,
            func.length(table.c.Revision).label('ContentSize'),
        ).order_by(table.c.PrimaryKey).limit(page_size)

        if after_key is not None:
            stmt = stmt.where(table.c.PrimaryKey > after_key)

        rows = list(connection.execute(stmt).all())
        logger.debug(f"Fetched {len(rows)} revisions after key {after_key}")
        return rows

    @staticmethod
    def count(connection: Connection, table: Table) -> int:
        """
        Count stored revisions.

        Returns:
            Total count of revisions
        """
        return connection.execute(
            select(func.count()).select_from(table)
        ).scalar_one()


__all__ = ['RevisionOperations']
