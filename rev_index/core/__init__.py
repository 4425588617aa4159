# Path: rev_index/core/__init__.py
"""
rev_index Core Package

Core utilities for the Revision Index Generator.

Submodules:
    - logger: IPO-aware logging system
    - errors: Error kinds and the domain error hierarchy
"""

from .errors import (
    ErrorKind,
    RevisionIndexError,
    SourceReadError,
    ExhaustedSourceError,
    SinkInitError,
    SinkWriteError,
    ConfigError,
    IndexGenerationError,
)

__all__ = [
    'ErrorKind',
    'RevisionIndexError',
    'SourceReadError',
    'ExhaustedSourceError',
    'SinkInitError',
    'SinkWriteError',
    'ConfigError',
    'IndexGenerationError',
]
