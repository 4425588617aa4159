# Path: rev_index/loaders/revision_reader.py
"""
Revision Readers for rev_index

Forward-only, lazy revision sequences.

RESPONSIBILITY: Hand revisions to the index generator one at a time,
in store order, holding at most one page in memory.

Contract shared by every source:
    has_next() -> bool
    next() -> Revision        (ExhaustedSourceError after the end,
                               SourceReadError on read/decode failure)
    close()

Sources are not restartable; open a new one to read again.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, Iterator, Optional

from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import SQLAlchemyError

from rev_index.config_loader import IndexerConfig
from rev_index.core.errors import ExhaustedSourceError, SourceReadError
from rev_index.core.logger import get_input_logger
from rev_index.database.models import create_db_engine, new_metadata, revision_table
from rev_index.database.operations import RevisionOperations
from .revision_data import Revision


logger = get_input_logger('revision_reader')

REQUIRED_COLUMNS = (
    'PrimaryKey',
    'FullRevisionID',
    'RevisionCounter',
    'RevisionID',
    'ArticleID',
    'Timestamp',
)


class RevisionSource(ABC):
    """
    Abstract forward-only revision sequence.

    Supports the has_next()/next() contract, Python iteration and the
    context manager protocol.

    Example:
        with SequenceRevisionSource(revisions) as source:
            while source.has_next():
                revision = source.next()
    """

    @abstractmethod
    def has_next(self) -> bool:
        """True if next() will return a revision."""

    @abstractmethod
    def _take(self) -> Revision:
        """Return the next revision; only called after has_next() is True."""

    def next(self) -> Revision:
        """
        Return the next revision.

        Raises:
            ExhaustedSourceError: If the source has no more revisions
            SourceReadError: If the revision cannot be read
        """
        if not self.has_next():
            raise ExhaustedSourceError("Revision source is exhausted")
        return self._take()

    def close(self) -> None:
        """Release resources held by the source."""

    def __iter__(self) -> Iterator[Revision]:
        while self.has_next():
            yield self._take()

    def __enter__(self) -> 'RevisionSource':
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False


class SequenceRevisionSource(RevisionSource):
    """
    Revision source over any iterable of Revision objects.

    The iterable is consumed lazily, one item of look-ahead.
    Anything that is not a Revision is rejected with SourceReadError.
    """

    def __init__(self, revisions: Iterable[Revision]):
        self._iterator = iter(revisions)
        self._pending: Optional[Revision] = None
        self._exhausted = False

    def has_next(self) -> bool:
        if self._pending is not None:
            return True
        if self._exhausted:
            return False
        try:
            item = next(self._iterator)
        except StopIteration:
            self._exhausted = True
            return False
        if not isinstance(item, Revision):
            raise SourceReadError(
                f"Expected Revision, got {type(item).__name__}"
            )
        self._pending = item
        return True

    def _take(self) -> Revision:
        revision, self._pending = self._pending, None
        return revision


class DatabaseRevisionSource(RevisionSource):
    """
    Reads revisions from the revision store table page by page.

    Pages hold page_size rows and are fetched with keyset pagination,
    so memory stays bounded by one page regardless of store size.

    Example:
        source = DatabaseRevisionSource.open(config)
        try:
            for revision in source:
                ...
        finally:
            source.close()
    """

    def __init__(
        self,
        engine: Engine,
        table_name: str,
        page_size: int,
        owns_engine: bool = False,
    ):
        """
        Initialize the reader.

        Args:
            engine: Engine connected to the revision store
            table_name: Revision store table
            page_size: Rows fetched per round trip
            owns_engine: Dispose the engine on close()
        """
        self._engine = engine
        self._table = revision_table(new_metadata(), table_name)
        self._page_size = page_size
        self._owns_engine = owns_engine
        self._page: deque = deque()
        self._last_key: Optional[int] = None
        self._exhausted = False
        self.rows_read = 0

    @classmethod
    def open(cls, config: IndexerConfig) -> 'DatabaseRevisionSource':
        """
        Open a reader for the configured revision store.

        Raises:
            ConfigError: If database access is not configured
            SourceReadError: If the engine cannot be created
        """
        url = config.database_url()
        try:
            engine = create_db_engine(url)
        except (SQLAlchemyError, ImportError) as e:
            raise SourceReadError(f"Cannot open revision store: {e}") from e
        logger.info(
            f"Reading revisions from {config.source_table} "
            f"(page size {config.buffer_size})"
        )
        return cls(engine, config.source_table, config.buffer_size, owns_engine=True)

    def has_next(self) -> bool:
        if self._page:
            return True
        if self._exhausted:
            return False
        self._fetch_page()
        return bool(self._page)

    def _take(self) -> Revision:
        return self._to_revision(self._page.popleft())

    def _fetch_page(self) -> None:
        """Load the next page of raw rows; rows are converted one at a time."""
        try:
            with self._engine.connect() as connection:
                rows = RevisionOperations.fetch_page(
                    connection, self._table, self._last_key, self._page_size
                )
        except SQLAlchemyError as e:
            raise SourceReadError(
                f"Failed reading revisions after key {self._last_key}: {e}"
            ) from e

        if len(rows) < self._page_size:
            self._exhausted = True

        self._page.extend(rows)

        if rows:
            self._last_key = rows[-1].PrimaryKey
            self.rows_read += len(rows)

    def _to_revision(self, row: Row) -> Revision:
        """Convert one store row; rows missing required values are rejected."""
        mapping = row._mapping
        missing = [name for name in REQUIRED_COLUMNS if mapping[name] is None]
        if missing:
            raise SourceReadError(
                f"Revision row {mapping['PrimaryKey']} is missing: {', '.join(missing)}"
            )
        size = mapping['ContentSize']
        return Revision(
            primary_key=int(mapping['PrimaryKey']),
            revision_counter=int(mapping['RevisionCounter']),
            revision_id=int(mapping['RevisionID']),
            article_id=int(mapping['ArticleID']),
            timestamp=mapping['Timestamp'],
            full_revision_pk=int(mapping['FullRevisionID']),
            content_size=int(size) if size is not None else None,
        )

    def close(self) -> None:
        self._page.clear()
        self._exhausted = True
        if self._owns_engine:
            self._engine.dispose()
        logger.info(f"Revision reader closed after {self.rows_read} rows")


def open_revision_source(config: IndexerConfig) -> RevisionSource:
    """Default source factory: the configured revision store."""
    return DatabaseRevisionSource.open(config)


__all__ = [
    'RevisionSource',
    'SequenceRevisionSource',
    'DatabaseRevisionSource',
    'open_revision_source',
]
