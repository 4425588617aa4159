# Path: rev_index/tests/unit/test_revision_reader.py
"""
Unit tests for revision sources.

Tests the has_next()/next() contract, laziness and paginated reads
from a SQLite revision store.
"""

from datetime import datetime

import pytest

from rev_index.config_loader import IndexerConfig
from rev_index.core.errors import (
    ConfigError,
    ErrorKind,
    ExhaustedSourceError,
    IndexGenerationError,
    SourceReadError,
)
from rev_index.database.models import create_db_engine, new_metadata, revision_table
from rev_index.loaders.revision_reader import (
    DatabaseRevisionSource,
    SequenceRevisionSource,
    open_revision_source,
)
from rev_index.process.index_generator import IndexGenerator

from fixtures.sample_data import RecordingSink, make_revision, make_revisions, seed_revision_store


class TestSequenceRevisionSource:
    """Tests for SequenceRevisionSource."""

    def test_yields_in_order(self):
        revisions = make_revisions(4)
        source = SequenceRevisionSource(revisions)

        read = []
        while source.has_next():
            read.append(source.next())

        assert read == revisions

    def test_has_next_is_idempotent(self):
        source = SequenceRevisionSource([make_revision()])

        assert source.has_next()
        assert source.has_next()
        source.next()
        assert not source.has_next()
        assert not source.has_next()

    def test_next_after_end_raises(self):
        source = SequenceRevisionSource([])

        with pytest.raises(ExhaustedSourceError):
            source.next()

    def test_is_lazy(self):
        pulled = []

        def generate():
            for revision in make_revisions(3):
                pulled.append(revision.primary_key)
                yield revision

        source = SequenceRevisionSource(generate())
        source.has_next()
        source.next()

        assert pulled == [1]

    def test_rejects_non_revision_items(self):
        source = SequenceRevisionSource([make_revision(), {'RevisionID': 2}])
        source.next()

        with pytest.raises(SourceReadError):
            source.has_next()

    def test_iteration_and_context_manager(self):
        revisions = make_revisions(3)

        with SequenceRevisionSource(revisions) as source:
            assert list(source) == revisions


class TestDatabaseRevisionSource:
    """Tests for DatabaseRevisionSource against SQLite."""

    @pytest.fixture
    def engine(self, sqlite_url):
        engine = create_db_engine(sqlite_url)
        yield engine
        engine.dispose()

    def test_reads_all_revisions_in_key_order(self, engine, sample_revisions):
        seed_revision_store(engine, 'revisions', reversed(sample_revisions))

        source = DatabaseRevisionSource(engine, 'revisions', page_size=5)
        read = list(source)

        assert [r.primary_key for r in read] == [r.primary_key for r in sample_revisions]
        assert read == sample_revisions
        assert source.rows_read == len(sample_revisions)

    def test_page_size_equal_to_row_count(self, engine):
        revisions = make_revisions(6)
        seed_revision_store(engine, 'revisions', revisions)

        source = DatabaseRevisionSource(engine, 'revisions', page_size=3)

        assert list(source) == revisions
        assert not source.has_next()

    def test_holds_at_most_one_page(self, engine):
        seed_revision_store(engine, 'revisions', make_revisions(10))

        source = DatabaseRevisionSource(engine, 'revisions', page_size=4)
        source.next()

        assert source.rows_read == 4

    def test_empty_store(self, engine):
        seed_revision_store(engine, 'revisions', [])

        source = DatabaseRevisionSource(engine, 'revisions', page_size=4)

        assert not source.has_next()
        with pytest.raises(ExhaustedSourceError):
            source.next()

    def test_content_size_from_stored_bytes(self, engine):
        seed_revision_store(engine, 'revisions', [
            make_revision(primary_key=1, content_size=7),
            make_revision(primary_key=2, content_size=None),
        ])

        first, second = list(DatabaseRevisionSource(engine, 'revisions', page_size=10))

        assert first.content_size == 7
        assert second.content_size is None

    def test_missing_table_is_source_read_error(self, engine):
        source = DatabaseRevisionSource(engine, 'no_such_table', page_size=10)

        with pytest.raises(SourceReadError):
            source.has_next()

    def test_null_required_value_is_source_read_error(self, engine):
        table = revision_table(new_metadata(), 'loose')
        table.c.Timestamp.nullable = True
        table.metadata.create_all(engine)
        with engine.begin() as connection:
            connection.execute(table.insert(), [{
                'PrimaryKey': 1, 'FullRevisionID': 1, 'RevisionCounter': 1,
                'RevisionID': 1001, 'ArticleID': 42, 'Timestamp': None,
            }])

        source = DatabaseRevisionSource(engine, 'loose', page_size=10)

        assert source.has_next()
        with pytest.raises(SourceReadError) as exc_info:
            source.next()
        assert 'Timestamp' in str(exc_info.value)

    def test_bad_row_mid_page_fails_on_that_row(self, engine, config):
        table = revision_table(new_metadata(), 'loose')
        table.c.ArticleID.nullable = True
        table.metadata.create_all(engine)
        rows = [
            {
                'PrimaryKey': r.primary_key, 'FullRevisionID': r.full_revision_pk,
                'RevisionCounter': r.revision_counter, 'RevisionID': r.revision_id,
                'ArticleID': None if r.primary_key == 4 else r.article_id,
                'Timestamp': r.timestamp,
            }
            for r in make_revisions(7)
        ]
        with engine.begin() as connection:
            connection.execute(table.insert(), rows)
        sink = RecordingSink.open(config)
        generator = IndexGenerator(
            config,
            source_factory=lambda cfg: DatabaseRevisionSource(engine, 'loose', page_size=100),
            sink_factory=lambda cfg: sink,
            memory_probe=None,
        )

        with pytest.raises(IndexGenerationError) as exc_info:
            generator.generate()

        assert exc_info.value.kind == ErrorKind.SOURCE_READ
        assert 'ArticleID' in str(exc_info.value)
        assert [e.locator.primary_key for e in sink.entries] == [1, 2, 3]
        assert sink.release_calls == 1

    def test_timestamps_round_trip(self, engine):
        stamp = datetime(2008, 1, 2, 3, 4, 5)
        seed_revision_store(engine, 'revisions', [make_revision(timestamp=stamp)])

        (revision,) = list(DatabaseRevisionSource(engine, 'revisions', page_size=1))

        assert revision.timestamp == stamp


class TestOpenRevisionSource:
    """Tests for opening the source from configuration."""

    def test_open_from_config(self, revision_store, sample_revisions):
        config = IndexerConfig(url=revision_store, buffer_size=5)

        with open_revision_source(config) as source:
            assert list(source) == sample_revisions

    def test_custom_source_table(self, sqlite_url):
        engine = create_db_engine(sqlite_url)
        seed_revision_store(engine, 'rev_store', make_revisions(2))
        engine.dispose()

        config = IndexerConfig(url=sqlite_url, source_table='rev_store')
        with open_revision_source(config) as source:
            assert len(list(source)) == 2

    def test_unconfigured_database_is_config_error(self):
        with pytest.raises(ConfigError):
            open_revision_source(IndexerConfig())
