# Path: rev_index/output/sinks/database_sink.py
"""
Database Sink

Writes index entries straight into the index table through batched
multi-row inserts.

A batch is sent when it holds buffer_size entries, or earlier when its
estimated size reaches max_allowed_packet bytes. Each batch is its own
transaction. A failing batch fails the run; it is dropped, never retried.
"""

from typing import List, Optional

from sqlalchemy import Table
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from rev_index.constants import OutputKind
from rev_index.core.errors import SinkInitError, SinkWriteError
from rev_index.core.logger import get_output_logger
from rev_index.database.models import (
    connection_scope,
    create_db_engine,
    create_tables,
    get_connection_info,
    new_metadata,
    revision_index_table,
)
from rev_index.database.operations import IndexOperations
from rev_index.process.entry_builder import IndexEntry
from .base_sink import OutputSink


logger = get_output_logger('database_sink')

# Per-row statement overhead: parentheses, separators, quotes
ROW_OVERHEAD_BYTES = 16


def estimate_row_bytes(row: dict) -> int:
    """Rough encoded size of one row in a multi-row INSERT."""
    return ROW_OVERHEAD_BYTES + sum(len(str(value)) for value in row.values())


class DatabaseSink(OutputSink):
    """
    Inserts index entries into the configured index table.

    Example:
        with DatabaseSink.open(config) as sink:
            sink.write(entry)
    """

    kind = OutputKind.DATABASE

    def __init__(self, config):
        super().__init__(config)
        self._engine: Optional[Engine] = None
        self._table: Table = revision_index_table(new_metadata(), config.index_table)
        self._batch: List[dict] = []
        self._batch_bytes = 0
        self.batches_written = 0

    def _open(self) -> None:
        url = self.config.database_url()
        try:
            self._engine = create_db_engine(url)
            create_tables(self._engine, [self._table])
        except (SQLAlchemyError, ImportError, OSError) as e:
            self._release()
            raise SinkInitError(f"Cannot open index table {self._table.name}: {e}") from e
        logger.info(
            f"Writing index to {get_connection_info(self._engine)['url']} "
            f"table {self._table.name}"
        )

    def _write(self, entry: IndexEntry) -> None:
        row = entry.to_row()
        row_bytes = estimate_row_bytes(row)
        if self._batch and self._batch_bytes + row_bytes > self.config.max_allowed_packet:
            self._send_batch()

        self._batch.append(row)
        self._batch_bytes += row_bytes

        if len(self._batch) >= self.config.buffer_size:
            self._send_batch()

    def _send_batch(self) -> None:
        """Insert the pending batch in one transaction."""
        if not self._batch:
            return
        batch, self._batch, self._batch_bytes = self._batch, [], 0
        try:
            with connection_scope(self._engine) as connection:
                IndexOperations.insert_batch(connection, self._table, batch)
        except SQLAlchemyError as e:
            raise SinkWriteError(
                f"Batch of {len(batch)} entries starting at revision "
                f"{batch[0]['revision_id']} failed: {e}"
            ) from e
        self.batches_written += 1
        logger.debug(f"Wrote batch {self.batches_written} ({len(batch)} entries)")

    def _flush(self) -> None:
        self._send_batch()

    def _release(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None


__all__ = ['DatabaseSink', 'estimate_row_bytes']
