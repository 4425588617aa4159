# Path: rev_index/output/sinks/base_sink.py
"""
Base Sink and Sink Registry

Abstract base class for index output sinks and a registry to look
them up by output kind.

Lifecycle of every sink: open -> write* -> close. close() flushes
buffered entries and releases the resource; it runs once, and later
calls are no-ops, so it is safe on every exit path.

To add a new output kind:
1. Add it to OutputKind
2. Subclass OutputSink and implement _open/_write/_flush/_release
3. Register via SinkRegistry.register()
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Dict, Optional, Type

from rev_index.config_loader import IndexerConfig
from rev_index.constants import OutputKind
from rev_index.core.errors import ConfigError, SinkInitError, SinkWriteError
from rev_index.core.logger import get_output_logger
from rev_index.process.entry_builder import IndexEntry


logger = get_output_logger('sink')


class OutputSink(ABC):
    """
    Abstract base for index output sinks.

    Subclasses persist IndexEntry objects in one external
    representation. Arrival order is preserved by every sink.

    Example:
        with SqlDumpSink.open(config) as sink:
            for entry in entries:
                sink.write(entry)
    """

    # Output kind implemented by the subclass
    kind: ClassVar[OutputKind]

    def __init__(self, config: IndexerConfig):
        self.config = config
        self.entries_written = 0
        self._opened = False
        self._closed = False

    @classmethod
    def open(cls, config: IndexerConfig) -> 'OutputSink':
        """
        Create and open a sink.

        Args:
            config: Run configuration

        Returns:
            Opened sink

        Raises:
            SinkInitError: If the target cannot be opened, including
                           required configuration being absent
        """
        sink = cls(config)
        try:
            sink._open()
        except ConfigError as e:
            raise SinkInitError(
                f"{cls.__name__} not configured: {e.args[0]}"
            ) from e
        sink._opened = True
        logger.info(f"Opened {sink.kind} sink")
        return sink

    @abstractmethod
    def _open(self) -> None:
        """Acquire the target resource; raise SinkInitError on failure."""

    def write(self, entry: IndexEntry) -> None:
        """
        Append one entry.

        Raises:
            SinkWriteError: If the entry cannot be persisted, or the sink
                            is not open
        """
        if not self._opened or self._closed:
            raise SinkWriteError(
                f"Cannot write revision {entry.revision_id}: sink is not open"
            )
        self._write(entry)
        self.entries_written += 1

    @abstractmethod
    def _write(self, entry: IndexEntry) -> None:
        """Persist or buffer one entry; raise SinkWriteError on failure."""

    @abstractmethod
    def _flush(self) -> None:
        """Persist buffered entries; raise SinkWriteError on failure."""

    @abstractmethod
    def _release(self) -> None:
        """Release the target resource. Must not raise."""

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """
        Flush buffered entries and release the resource.

        The resource is released even when the flush fails; the flush
        error is raised afterwards.
        """
        if self._closed:
            return
        self._closed = True
        try:
            if self._opened:
                self._flush()
        finally:
            self._release()
            logger.info(
                f"Closed {self.kind} sink after {self.entries_written} entries"
            )

    def __enter__(self) -> 'OutputSink':
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is None:
            self.close()
            return False
        # Keep the error that ended the run; a close failure is only logged
        try:
            self.close()
        except SinkWriteError as close_error:
            logger.error(f"Close after failure also failed: {close_error}")
        return False


class SinkRegistry:
    """
    Registry of available sinks.

    Lookup by output kind. The index generator uses this to open the
    sink selected by configuration; only that sink class is ever
    instantiated.
    """

    _sinks: Dict[OutputKind, Type[OutputSink]] = {}

    @classmethod
    def register(cls, sink_class: Type[OutputSink]) -> None:
        """Register a sink class under its output kind."""
        cls._sinks[sink_class.kind] = sink_class

    @classmethod
    def get(cls, kind: OutputKind) -> Optional[Type[OutputSink]]:
        """Get the sink class registered for an output kind."""
        return cls._sinks.get(kind)

    @classmethod
    def get_available(cls) -> list[OutputKind]:
        """Return list of registered output kinds."""
        return list(cls._sinks.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations (for testing)."""
        cls._sinks.clear()


__all__ = ['OutputSink', 'SinkRegistry']
