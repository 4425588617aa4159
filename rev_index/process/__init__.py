# Path: rev_index/process/__init__.py
"""
Process Layer for rev_index (Revision Index Generator)

The PROCESS layer turns revisions into index entries:
- entry_builder - Revision -> IndexEntry
- progress - Counters, clock formatting and progress reports
- index_generator - The pull/build/emit loop and its lifecycle

All components follow the IPO pattern:
- Read from INPUT layer (loaders)
- Process data (entry building, progress)
- Hand over to OUTPUT layer (sinks)

index_generator depends on the output layer, which in turn uses
entry_builder; import it from its module:

    from rev_index.process.index_generator import IndexGenerator
"""

from .entry_builder import IndexEntry, IndexEntryBuilder, Locator
from .progress import ProgressReport, ProgressTracker, to_clock

__all__ = [
    'IndexEntry',
    'IndexEntryBuilder',
    'Locator',
    'ProgressReport',
    'ProgressTracker',
    'to_clock',
]
