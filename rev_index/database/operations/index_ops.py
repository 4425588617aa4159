# Path: rev_index/database/operations/index_ops.py
"""
Index Operations

Bulk insert and lookup operations for the revision index table.
"""

import logging
from typing import Optional, List

from sqlalchemy import Table, func, insert, select
from sqlalchemy.engine import Connection, Row


logger = logging.getLogger(__name__)


class IndexOperations:
    """
    Operations for revision index rows.

    Provides static methods for common index operations.
    All methods require a connection to be passed in.

    Example:
        with connection_scope(engine) as connection:
            IndexOperations.insert_batch(connection, table, rows)
            total = IndexOperations.count(connection, table)
    """

    @staticmethod
    def insert_batch(
        connection: Connection,
        table: Table,
        rows: List[dict],
    ) -> int:
        """
        Insert a batch of index rows in one multi-row statement.

        Args:
            connection: Database connection (inside a transaction)
            table: Revision index table
            rows: Row dictionaries in insertion order

        Returns:
            Number of rows inserted
        """
        if not rows:
            return 0
        connection.execute(insert(table), rows)
        logger.debug(f"Inserted {len(rows)} rows into {table.name}")
        return len(rows)

    @staticmethod
    def find_by_revision_id(
        connection: Connection,
        table: Table,
        revision_id: int,
    ) -> Optional[Row]:
        """
        Find index row by revision id.

        Returns:
            Row or None
        """
        return connection.execute(
            select(table).where(table.c.revision_id == revision_id)
        ).first()

    @staticmethod
    def find_by_article(
        connection: Connection,
        table: Table,
        article_id: int,
    ) -> List[Row]:
        """
        Find all index rows of an article, in revision counter order.

        Returns:
            List of rows
        """
        return list(connection.execute(
            select(table)
            .where(table.c.article_id == article_id)
            .order_by(table.c.revision_counter)
        ).all())

    @staticmethod
    def count(connection: Connection, table: Table) -> int:
        """
        Count index rows.

        Returns:
            Total count of rows
        """
        return connection.execute(
            select(func.count()).select_from(table)
        ).scalar_one()


__all__ = ['IndexOperations']
