# Path: rev_index/output/sinks/sql_dump_sink.py
"""
SQL Dump Sink

Writes the revision index as a SQL script for later import:
a CREATE TABLE IF NOT EXISTS header followed by multi-row INSERT
statements. No database connection is made.

Each INSERT statement, encoded in the configured charset, stays within
max_allowed_packet bytes, so the script can be replayed against a
server with that packet limit.
"""

from pathlib import Path
from typing import List, Optional, TextIO

from sqlalchemy.engine.default import DefaultDialect
from sqlalchemy.schema import CreateIndex, CreateTable

from rev_index.constants import OutputKind, SQL_DUMP_FILENAME
from rev_index.core.errors import SinkInitError, SinkWriteError
from rev_index.core.logger import get_output_logger
from rev_index.database.models import new_metadata, revision_index_table
from rev_index.process.entry_builder import IndexEntry, utc_naive
from .base_sink import OutputSink


logger = get_output_logger('sql_dump_sink')

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'
STATEMENT_END = ';\n'
VALUE_SEPARATOR = ','


def format_values(entry: IndexEntry) -> str:
    """
    Render one entry as a SQL value tuple.

    Timestamps are written in UTC, as the data file stores them.

    Example:
        (1001,42,3,17,15,'2011-03-04 10:11:12',512)
    """
    size = 'NULL' if entry.size is None else str(int(entry.size))
    return (
        f"({int(entry.revision_id)},{int(entry.article_id)},"
        f"{int(entry.revision_counter)},{int(entry.locator.primary_key)},"
        f"{int(entry.locator.full_revision_pk)},"
        f"'{utc_naive(entry.timestamp).strftime(TIMESTAMP_FORMAT)}',{size})"
    )


class SqlDumpSink(OutputSink):
    """
    Renders index entries as a SQL script.

    Example:
        with SqlDumpSink.open(config) as sink:
            sink.write(entry)
        # -> <output>/revision_index.sql
    """

    kind = OutputKind.SQL

    def __init__(self, config):
        super().__init__(config)
        self.path: Optional[Path] = None
        self._file: Optional[TextIO] = None
        self._table = revision_index_table(new_metadata(), config.index_table)
        self._dialect = DefaultDialect()
        table_name = self._dialect.identifier_preparer.format_table(self._table)
        self._prefix = f"INSERT INTO {table_name} VALUES "
        self._pending: List[str] = []
        self._pending_bytes = 0
        self.statements_written = 0

    def _open(self) -> None:
        output_dir = self.config.require_output_dir()
        self.path = output_dir / SQL_DUMP_FILENAME
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            self._file = open(
                self.path, 'w', encoding=self.config.charset, newline='\n'
            )
            self._file.write(self._schema_sql())
        except OSError as e:
            self._release()
            raise SinkInitError(f"Cannot create SQL dump {self.path}: {e}") from e
        logger.info(f"Writing SQL dump to {self.path}")

    def _schema_sql(self) -> str:
        """CREATE TABLE and CREATE INDEX statements for the index table."""
        statements = [
            str(CreateTable(self._table, if_not_exists=True).compile(dialect=self._dialect)).strip()
        ]
        for index in sorted(self._table.indexes, key=lambda i: i.name):
            statements.append(str(CreateIndex(index).compile(dialect=self._dialect)).strip())
        return ''.join(statement + STATEMENT_END for statement in statements)

    def _encoded_size(self, text: str) -> int:
        return len(text.encode(self.config.charset))

    def _write(self, entry: IndexEntry) -> None:
        values = format_values(entry)
        try:
            size = self._encoded_size(values)
        except UnicodeEncodeError as e:
            raise SinkWriteError(
                f"Revision {entry.revision_id} not encodable as {self.config.charset}"
            ) from e

        limit = self.config.max_allowed_packet
        overhead = self._encoded_size(self._prefix) + len(STATEMENT_END)
        if overhead + size > limit:
            raise SinkWriteError(
                f"Revision {entry.revision_id} does not fit in a "
                f"{limit} byte statement"
            )

        separator = len(VALUE_SEPARATOR) if self._pending else 0
        if self._pending and overhead + self._pending_bytes + separator + size > limit:
            self._write_statement()
            separator = 0

        self._pending.append(values)
        self._pending_bytes += separator + size

    def _write_statement(self) -> None:
        """Write pending value tuples as one INSERT statement."""
        if not self._pending:
            return
        statement = self._prefix + VALUE_SEPARATOR.join(self._pending) + STATEMENT_END
        self._pending = []
        self._pending_bytes = 0
        try:
            self._file.write(statement)
        except OSError as e:
            raise SinkWriteError(f"Cannot write SQL dump {self.path}: {e}") from e
        self.statements_written += 1

    def _flush(self) -> None:
        self._write_statement()
        try:
            self._file.flush()
        except OSError as e:
            raise SinkWriteError(f"Cannot flush SQL dump {self.path}: {e}") from e

    def _release(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            except OSError as e:
                logger.error(f"Error closing SQL dump {self.path}: {e}")
            self._file = None


__all__ = ['SqlDumpSink', 'format_values']
