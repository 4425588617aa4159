# Path: rev_index/__init__.py
"""
rev_index - Revision Index Generator

Builds a lookup index over a revision store: for every stored revision,
where its content lives and which full revision its diff chain starts
from. The index is written as a SQL dump, a binary data file, or
directly into an index table.
"""

__version__ = '0.1.0'
