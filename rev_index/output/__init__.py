# Path: rev_index/output/__init__.py
"""
Output Module for rev_index

Persists generated index entries.

Architecture:
    open_sink     - Opens the sink selected by configuration
    SinkRegistry  - Register new output kinds
    OutputSink    - open / write / close contract

Output kinds:
    SQL       - SqlDumpSink, INSERT script in the configured charset
    DATAFILE  - DataFileSink, self-describing fixed-width binary records
    DATABASE  - DatabaseSink, batched inserts into the index table

Usage:
    from rev_index.output import open_sink

    with open_sink(config) as sink:
        for entry in entries:
            sink.write(entry)
"""

from .sinks import (
    OutputSink,
    SinkRegistry,
    SqlDumpSink,
    DataFileSink,
    DatabaseSink,
    read_data_file,
)
from .sink_factory import open_sink


__all__ = [
    'OutputSink',
    'SinkRegistry',
    'SqlDumpSink',
    'DataFileSink',
    'DatabaseSink',
    'read_data_file',
    'open_sink',
]
