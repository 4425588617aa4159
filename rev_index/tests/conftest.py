# Path: rev_index/tests/conftest.py
"""
Pytest Configuration and Shared Fixtures for rev_index

Provides common test fixtures used across all test modules.
"""

from pathlib import Path

import pytest

from rev_index.config_loader import IndexerConfig
from rev_index.constants import OutputKind
from rev_index.database.models import create_db_engine
from rev_index.output.sinks import SinkRegistry

from fixtures.sample_data import make_revisions, seed_revision_store


# ==============================================================================
# CONFIGURATION FIXTURES
# ==============================================================================

@pytest.fixture
def output_dir(tmp_path) -> Path:
    """Directory receiving file sink output."""
    path = tmp_path / 'output'
    path.mkdir()
    return path


@pytest.fixture
def make_config(output_dir):
    """
    Factory for IndexerConfig with test defaults.

    Example:
        config = make_config(buffer_size=3, output_kind=OutputKind.DATAFILE)
    """
    def _make(**overrides) -> IndexerConfig:
        values = {
            'output_path': output_dir,
            'output_kind': OutputKind.SQL,
            'buffer_size': 3,
        }
        values.update(overrides)
        return IndexerConfig(**values)

    return _make


@pytest.fixture
def config(make_config) -> IndexerConfig:
    """Default test configuration (SQL dump, buffer 3)."""
    return make_config()


# ==============================================================================
# DATABASE FIXTURES
# ==============================================================================

@pytest.fixture
def sqlite_url(tmp_path) -> str:
    """URL of a temporary SQLite file database."""
    return f"sqlite:///{tmp_path / 'revisions.db'}"


@pytest.fixture
def sample_revisions():
    """Twelve revisions of one article, a full revision every fifth."""
    return make_revisions(12)


@pytest.fixture
def revision_store(sqlite_url, sample_revisions):
    """
    SQLite revision store seeded with sample_revisions.

    Yields:
        URL of the seeded database
    """
    engine = create_db_engine(sqlite_url)
    seed_revision_store(engine, 'revisions', sample_revisions)
    engine.dispose()
    yield sqlite_url


# ==============================================================================
# REGISTRY FIXTURES
# ==============================================================================

@pytest.fixture
def reset_sink_registry():
    """Restore the sink registry after a test changes it."""
    saved = dict(SinkRegistry._sinks)
    yield SinkRegistry
    SinkRegistry.clear()
    SinkRegistry._sinks.update(saved)


@pytest.fixture
def fixed_memory():
    """Memory probe returning a constant."""
    return lambda: 64.0
