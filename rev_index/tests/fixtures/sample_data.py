# Path: rev_index/tests/fixtures/sample_data.py
"""
Sample Data Generators for Testing

Provides functions to generate revisions, seed a revision store and
write configuration files, plus recording fakes for the source and
sink contracts.
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, List, Optional

from sqlalchemy import insert
from sqlalchemy.engine import Engine

from rev_index.constants import OutputKind
from rev_index.core.errors import SinkWriteError, SourceReadError
from rev_index.database.models import connection_scope, create_tables, new_metadata, revision_table
from rev_index.loaders.revision_data import Revision
from rev_index.loaders.revision_reader import RevisionSource
from rev_index.output.sinks import OutputSink


BASE_TIME = datetime(2011, 3, 4, 10, 11, 12)


def make_revision(
    primary_key: int = 1,
    revision_counter: int = 1,
    revision_id: Optional[int] = None,
    article_id: int = 42,
    timestamp: Optional[datetime] = None,
    full_revision_pk: Optional[int] = None,
    content_size: Optional[int] = None,
) -> Revision:
    """
    Create a single revision.

    Defaults give a full revision whose id is 1000 + primary_key.
    """
    return Revision(
        primary_key=primary_key,
        revision_counter=revision_counter,
        revision_id=1000 + primary_key if revision_id is None else revision_id,
        article_id=article_id,
        timestamp=timestamp or BASE_TIME,
        full_revision_pk=primary_key if full_revision_pk is None else full_revision_pk,
        content_size=content_size,
    )


def make_revisions(
    count: int,
    article_id: int = 42,
    full_every: int = 5,
    start_key: int = 1,
) -> List[Revision]:
    """
    Create the revisions of one article in store order.

    Every full_every-th revision is a full revision; the others are
    diffs pointing at the last full revision before them.

    Args:
        count: Number of revisions
        article_id: Article of all revisions
        full_every: Distance between full revisions
        start_key: Primary key of the first revision

    Returns:
        List of revisions with ascending primary keys
    """
    revisions = []
    full_pk = start_key
    for i in range(count):
        primary_key = start_key + i
        if i % full_every == 0:
            full_pk = primary_key
        revisions.append(Revision(
            primary_key=primary_key,
            revision_counter=i + 1,
            revision_id=1000 + primary_key,
            article_id=article_id,
            timestamp=BASE_TIME + timedelta(minutes=i),
            full_revision_pk=full_pk,
            content_size=100 + i,
        ))
    return revisions


def seed_revision_store(
    engine: Engine,
    table_name: str,
    revisions: Iterable[Revision],
) -> None:
    """
    Create the revision store table and insert revisions.

    The stored content is content_size bytes long (NULL when unknown),
    so the reader's size column can be checked.
    """
    table = revision_table(new_metadata(), table_name)
    create_tables(engine, [table])
    rows = [
        {
            'PrimaryKey': r.primary_key,
            'FullRevisionID': r.full_revision_pk,
            'RevisionCounter': r.revision_counter,
            'RevisionID': r.revision_id,
            'ArticleID': r.article_id,
            'Timestamp': r.timestamp,
            'Revision': None if r.content_size is None else b'x' * r.content_size,
        }
        for r in revisions
    ]
    if rows:
        with connection_scope(engine) as connection:
            connection.execute(insert(table), rows)


def write_properties(path: Path, **values) -> Path:
    """
    Write a key=value configuration file.

    Example:
        write_properties(tmp_path / 'index.properties', output=str(out), buffer='3')
    """
    lines = [f"{key}={value}" for key, value in values.items()]
    path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
    return path


# ==============================================================================
# RECORDING FAKES
# ==============================================================================

class RecordingSink(OutputSink):
    """
    Sink keeping entries in memory.

    Set fail_at to make the n-th write (1-based) raise SinkWriteError,
    and fail_on_flush to make close() fail.
    """

    kind = OutputKind.SQL

    def __init__(self, config):
        super().__init__(config)
        self.entries = []
        self.open_calls = 0
        self.flush_calls = 0
        self.release_calls = 0
        self.fail_at: Optional[int] = None
        self.fail_on_flush = False

    def _open(self) -> None:
        self.open_calls += 1

    def _write(self, entry) -> None:
        if self.fail_at is not None and len(self.entries) + 1 == self.fail_at:
            raise SinkWriteError(f"Refusing revision {entry.revision_id}")
        self.entries.append(entry)

    def _flush(self) -> None:
        self.flush_calls += 1
        if self.fail_on_flush:
            raise SinkWriteError("Flush refused")

    def _release(self) -> None:
        self.release_calls += 1


class FailingRevisionSource(RevisionSource):
    """Serves revisions and raises SourceReadError on the n-th one (1-based)."""

    def __init__(self, revisions: Iterable[Revision], fail_at: int):
        self._revisions = list(revisions)
        self._fail_at = fail_at
        self._position = 0
        self.close_calls = 0

    def has_next(self) -> bool:
        return self._position < len(self._revisions)

    def _take(self) -> Revision:
        self._position += 1
        if self._position == self._fail_at:
            raise SourceReadError(f"Corrupt revision at position {self._position}")
        return self._revisions[self._position - 1]

    def close(self) -> None:
        self.close_calls += 1
