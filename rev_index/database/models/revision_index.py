# Path: rev_index/database/models/revision_index.py
"""
Revision Index Table

Target table of the revision index: one row per revision, keyed by
revision id, pointing at the stored row and at the full revision its
diff chain starts from.

Shared by DatabaseSink (creates and fills it) and SqlDumpSink (renders
its CREATE TABLE statement into the dump).
"""

from sqlalchemy import (
    BigInteger, Column, DateTime, Index, Integer, MetaData, Table,
)


def revision_index_table(metadata: MetaData, name: str) -> Table:
    """
    Build the revision index table definition.

    Args:
        metadata: MetaData to attach the table to
        name: Table name from configuration

    Returns:
        SQLAlchemy Table
    """
    return Table(
        name,
        metadata,
        Column(
            'revision_id',
            BigInteger,
            primary_key=True,
            autoincrement=False,
            comment="Revision identifier"
        ),
        Column(
            'article_id',
            BigInteger,
            nullable=False,
            comment="Article identifier"
        ),
        Column(
            'revision_counter',
            Integer,
            nullable=False,
            comment="Position of the revision within its article"
        ),
        Column(
            'primary_key',
            BigInteger,
            nullable=False,
            comment="Row key of the stored revision"
        ),
        Column(
            'full_revision_pk',
            BigInteger,
            nullable=False,
            comment="Row key of the full revision of the diff chain"
        ),
        Column(
            'timestamp',
            DateTime,
            nullable=False,
            comment="Revision timestamp"
        ),
        Column(
            'size',
            BigInteger,
            nullable=True,
            comment="Stored content size in bytes"
        ),
        Index(f'ix_{name}_article', 'article_id', 'revision_counter'),
    )


__all__ = ['revision_index_table']
