# Path: rev_index/tests/unit/test_database_sink.py
"""
Unit tests for DatabaseSink and IndexOperations against SQLite.
"""

import pytest

from rev_index.constants import OutputKind
from rev_index.core.errors import ConfigError, SinkInitError, SinkWriteError
from rev_index.database.models import (
    connection_scope,
    create_db_engine,
    new_metadata,
    revision_index_table,
)
from rev_index.database.operations import IndexOperations
from rev_index.output.sinks import DatabaseSink
from rev_index.output.sinks.database_sink import estimate_row_bytes
from rev_index.process.entry_builder import IndexEntryBuilder

from fixtures.sample_data import make_revision, make_revisions


def build_entries(revisions):
    builder = IndexEntryBuilder()
    return [builder.build(revision) for revision in revisions]


@pytest.fixture
def db_config(make_config, sqlite_url):
    def _make(**overrides):
        values = {'url': sqlite_url, 'output_kind': OutputKind.DATABASE}
        values.update(overrides)
        return make_config(**values)
    return _make


@pytest.fixture
def read_index(sqlite_url):
    """Read back all index rows in revision order."""
    def _read(table_name='index_revisions'):
        engine = create_db_engine(sqlite_url)
        table = revision_index_table(new_metadata(), table_name)
        try:
            with connection_scope(engine) as connection:
                count = IndexOperations.count(connection, table)
                rows = IndexOperations.find_by_article(connection, table, 42)
        finally:
            engine.dispose()
        return count, rows
    return _read


class TestDatabaseSink:
    """Tests for inserting the index."""

    def test_inserts_all_entries(self, db_config, read_index):
        entries = build_entries(make_revisions(7))

        with DatabaseSink.open(db_config(buffer_size=3)) as sink:
            for entry in entries:
                sink.write(entry)

        count, rows = read_index()
        assert count == 7
        assert [row.revision_id for row in rows] == [e.revision_id for e in entries]
        assert rows[1].full_revision_pk == entries[1].locator.full_revision_pk
        assert rows[1].size == entries[1].size

    def test_batches_by_buffer_size(self, db_config):
        with DatabaseSink.open(db_config(buffer_size=3)) as sink:
            for entry in build_entries(make_revisions(7)):
                sink.write(entry)
            assert sink.batches_written == 2

        assert sink.batches_written == 3

    def test_batches_by_packet_limit(self, db_config, read_index):
        entries = build_entries(make_revisions(6))
        row_bytes = estimate_row_bytes(entries[0].to_row())
        config = db_config(buffer_size=100, max_allowed_packet=row_bytes * 2 + 1)

        with DatabaseSink.open(config) as sink:
            for entry in entries:
                sink.write(entry)

        assert sink.batches_written >= 3
        assert read_index()[0] == 6

    def test_flush_on_close(self, db_config, read_index):
        with DatabaseSink.open(db_config(buffer_size=100)) as sink:
            sink.write(build_entries([make_revision()])[0])
            assert sink.batches_written == 0

        assert read_index()[0] == 1

    def test_creates_table_once(self, db_config, read_index):
        DatabaseSink.open(db_config()).close()
        DatabaseSink.open(db_config()).close()

        assert read_index()[0] == 0

    def test_custom_index_table(self, db_config, read_index):
        with DatabaseSink.open(db_config(index_table='rev_idx')) as sink:
            sink.write(build_entries([make_revision()])[0])

        assert read_index('rev_idx')[0] == 1

    def test_duplicate_revision_is_sink_write_error(self, db_config):
        entry = build_entries([make_revision()])[0]
        sink = DatabaseSink.open(db_config(buffer_size=1))
        sink.write(entry)

        with pytest.raises(SinkWriteError):
            sink.write(entry)
        sink.close()

    def test_unconfigured_database_is_sink_init_error(self, make_config):
        config = make_config(output_kind=OutputKind.DATABASE)

        with pytest.raises(SinkInitError) as exc_info:
            DatabaseSink.open(config)

        assert isinstance(exc_info.value.__cause__, ConfigError)


class TestIndexOperations:
    """Lookups on the index table."""

    def test_find_by_revision_id(self, db_config, sqlite_url):
        with DatabaseSink.open(db_config()) as sink:
            for entry in build_entries(make_revisions(3)):
                sink.write(entry)

        engine = create_db_engine(sqlite_url)
        table = revision_index_table(new_metadata(), 'index_revisions')
        with connection_scope(engine) as connection:
            row = IndexOperations.find_by_revision_id(connection, table, 1002)
            missing = IndexOperations.find_by_revision_id(connection, table, 9)
        engine.dispose()

        assert row.primary_key == 2
        assert missing is None

    def test_insert_empty_batch(self, sqlite_url):
        engine = create_db_engine(sqlite_url)
        table = revision_index_table(new_metadata(), 'index_revisions')
        with connection_scope(engine) as connection:
            assert IndexOperations.insert_batch(connection, table, []) == 0
        engine.dispose()
