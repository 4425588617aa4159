# Path: rev_index/output/sinks/__init__.py
"""
Index Sinks

Each sink persists IndexEntry objects in one external representation.
Sinks know nothing about where entries come from; new representations
add new sinks without changing the index generator.
"""

from .base_sink import OutputSink, SinkRegistry
from .sql_dump_sink import SqlDumpSink
from .data_file_sink import DataFileSink, read_data_file
from .database_sink import DatabaseSink

__all__ = [
    'OutputSink',
    'SinkRegistry',
    'SqlDumpSink',
    'DataFileSink',
    'DatabaseSink',
    'read_data_file',
]
