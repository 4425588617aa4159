# Path: rev_index/core/errors.py
"""
Error Handling for rev_index

One error kind enumeration and one exception hierarchy for the whole
index-generation pipeline.

Every component raises a RevisionIndexError subclass tagged with an
ErrorKind. The IndexGenerator wraps whatever ends a run into a single
IndexGenerationError that keeps the original error as __cause__, so the
process boundary only has to handle one type.

None of these errors are retried: a partially written sink cannot be
resumed safely.
"""

from enum import Enum
from typing import Optional


# ==============================================================================
# ERROR KINDS
# ==============================================================================

class ErrorKind(Enum):
    """
    Error kind classification.

    Kinds:
        SOURCE_READ: Revision data could not be read or decoded
        SOURCE_EXHAUSTED: next() called on an exhausted revision source
        SINK_INIT: Output target could not be opened
        SINK_WRITE: An entry could not be persisted
        CONFIG: Configuration missing, unreadable or invalid
        UNKNOWN: Anything not raised by rev_index itself
    """
    SOURCE_READ = "SOURCE_READ"
    SOURCE_EXHAUSTED = "SOURCE_EXHAUSTED"
    SINK_INIT = "SINK_INIT"
    SINK_WRITE = "SINK_WRITE"
    CONFIG = "CONFIG"
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value


# ==============================================================================
# EXCEPTIONS
# ==============================================================================

class RevisionIndexError(Exception):
    """Base class for all rev_index errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind

    def __str__(self) -> str:
        return f"[{self.kind}] {super().__str__()}"


class SourceReadError(RevisionIndexError):
    """Malformed or unreachable revision data."""
    kind = ErrorKind.SOURCE_READ


class ExhaustedSourceError(RevisionIndexError):
    """next() was called after has_next() returned False."""
    kind = ErrorKind.SOURCE_EXHAUSTED


class SinkInitError(RevisionIndexError):
    """Output target could not be opened."""
    kind = ErrorKind.SINK_INIT


class SinkWriteError(RevisionIndexError):
    """Failure persisting an entry or flushing a batch."""
    kind = ErrorKind.SINK_WRITE


class ConfigError(RevisionIndexError):
    """Missing, unreadable or invalid configuration."""
    kind = ErrorKind.CONFIG


class IndexGenerationError(RevisionIndexError):
    """
    The single error surfaced by a failed index generation run.

    Carries the kind of the error that ended the run. The original
    exception is available as __cause__.
    """

    @classmethod
    def wrap(cls, error: BaseException) -> 'IndexGenerationError':
        """
        Wrap an arbitrary exception into an IndexGenerationError.

        Args:
            error: Exception that ended the run

        Returns:
            IndexGenerationError with the same kind and error as cause
        """
        if isinstance(error, IndexGenerationError):
            return error
        kind = getattr(error, 'kind', ErrorKind.UNKNOWN)
        if not isinstance(kind, ErrorKind):
            kind = ErrorKind.UNKNOWN
        if isinstance(error, RevisionIndexError) and error.args:
            message = error.args[0]
        else:
            message = f"{type(error).__name__}: {error}"
        wrapped = cls(f"Index generation failed: {message}", kind=kind)
        wrapped.__cause__ = error
        return wrapped


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
