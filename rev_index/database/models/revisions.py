# Path: rev_index/database/models/revisions.py
"""
Revision Store Table

Shape of the revision store table as read by DatabaseRevisionSource.
Only the columns needed to locate a revision are declared; the stored
content column is read for its length only, never decoded.

Architecture:
- Column names follow the revision store (PrimaryKey, RevisionID, ...)
- Table name comes from configuration, so the table is built per run
- Never created by rev_index in production; tests create it to seed data
"""

from sqlalchemy import (
    BigInteger, Column, DateTime, Integer, LargeBinary, MetaData, Table,
)


def revision_table(metadata: MetaData, name: str) -> Table:
    """
    Build the revision store table definition.

    Args:
        metadata: MetaData to attach the table to
        name: Table name from configuration

    Returns:
        SQLAlchemy Table

    Example:
        table = revision_table(MetaData(), 'revisions')
        stmt = select(table.c.RevisionID).order_by(table.c.PrimaryKey)
    """
    return Table(
        name,
        metadata,
        Column(
            'PrimaryKey',
            BigInteger,
            primary_key=True,
            autoincrement=False,
            comment="Row key of the stored revision"
        ),
        Column(
            'FullRevisionID',
            BigInteger,
            nullable=False,
            comment="Row key of the full revision the diff is based on"
        ),
        Column(
            'RevisionCounter',
            Integer,
            nullable=False,
            comment="1-based position of the revision within its article"
        ),
        Column(
            'RevisionID',
            BigInteger,
            nullable=False,
            comment="Revision identifier"
        ),
        Column(
            'ArticleID',
            BigInteger,
            nullable=False,
            comment="Article identifier"
        ),
        Column(
            'Timestamp',
            DateTime,
            nullable=False,
            comment="Revision timestamp"
        ),
        Column(
            'Revision',
            LargeBinary,
            comment="Encoded diff or full text"
        ),
    )


__all__ = ['revision_table']
