# Path: rev_index/output/sink_factory.py
"""
Sink Factory

Opens the output sink selected by configuration.

Architecture:
    IndexerConfig.output_kind  ->  SinkRegistry  ->  OutputSink.open(config)

The selection is made once per run; the index generator only sees the
OutputSink contract.

Usage:
    from rev_index.output import open_sink

    with open_sink(config) as sink:
        sink.write(entry)
"""

from rev_index.config_loader import IndexerConfig
from rev_index.core.errors import SinkInitError
from rev_index.core.logger import get_output_logger

from .sinks import (
    OutputSink,
    SinkRegistry,
    SqlDumpSink,
    DataFileSink,
    DatabaseSink,
)


logger = get_output_logger('sink_factory')


def _register_defaults() -> None:
    """Register built-in sinks."""
    SinkRegistry.register(SqlDumpSink)
    SinkRegistry.register(DataFileSink)
    SinkRegistry.register(DatabaseSink)


# Auto-register on module import
_register_defaults()


def open_sink(config: IndexerConfig) -> OutputSink:
    """
    Open the sink for the configured output kind.

    Args:
        config: Run configuration

    Returns:
        Opened sink; the caller must close it

    Raises:
        SinkInitError: If no sink is registered for the kind, or the
                       sink cannot be opened
    """
    sink_class = SinkRegistry.get(config.output_kind)
    if sink_class is None:
        raise SinkInitError(f"No sink registered for output kind {config.output_kind}")
    logger.info(f"Output kind {config.output_kind}: {sink_class.__name__}")
    return sink_class.open(config)


__all__ = ['open_sink']
