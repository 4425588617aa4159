# Path: rev_index/process/index_generator.py
"""
Index Generator

Main orchestrator of a revision index run.

Architecture:
    RevisionSource  ->  IndexEntryBuilder  ->  OutputSink
                              |
                       ProgressTracker (report every buffer_size)

States:
    IDLE -> RUNNING -> COMPLETED | FAILED

The loop is single-threaded and single-pass: entries reach the sink in
the order revisions were read. Any error ends the run at once; the sink
and source are closed and the error is raised as one
IndexGenerationError with the original error as its cause. The output
of a failed run is incomplete and must be regenerated from scratch.

Usage:
    from rev_index.process.index_generator import IndexGenerator

    summary = IndexGenerator(config).generate()
    print(summary.format())
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from rev_index.config_loader import IndexerConfig
from rev_index.constants import MSG_ENDED, MSG_STARTED
from rev_index.core.errors import IndexGenerationError
from rev_index.core.logger import get_process_logger
from rev_index.loaders.revision_reader import RevisionSource, open_revision_source
from rev_index.output.sink_factory import open_sink
from rev_index.output.sinks import OutputSink
from .entry_builder import IndexEntryBuilder
from .progress import ProgressReport, ProgressTracker, current_memory_mb, to_clock


logger = get_process_logger('index_generator')

SourceFactory = Callable[[IndexerConfig], RevisionSource]
SinkFactory = Callable[[IndexerConfig], OutputSink]


class RunState(str, Enum):
    """Index generation run states."""
    IDLE = 'idle'
    RUNNING = 'running'
    COMPLETED = 'completed'
    FAILED = 'failed'


@dataclass(frozen=True)
class RunSummary:
    """
    Final summary of a completed run.

    Attributes:
        state: Final run state
        count: Revisions indexed
        elapsed_ms: Total run time in milliseconds
        reports: Number of progress reports emitted
    """
    state: RunState
    count: int
    elapsed_ms: int
    reports: int

    def format(self) -> str:
        """Render as the end-of-run line."""
        return MSG_ENDED.format(clock=to_clock(self.elapsed_ms))


class IndexGenerator:
    """
    Generates the revision index.

    Source and sink are built from configuration through factories, so
    callers may substitute either without touching configuration.

    Example:
        generator = IndexGenerator(config)
        summary = generator.generate()

        # Custom source, default sink
        generator = IndexGenerator(
            config,
            source_factory=lambda cfg: SequenceRevisionSource(revisions),
        )
    """

    def __init__(
        self,
        config: IndexerConfig,
        source_factory: Optional[SourceFactory] = None,
        sink_factory: Optional[SinkFactory] = None,
        builder: Optional[IndexEntryBuilder] = None,
        clock: Callable[[], float] = time.monotonic,
        memory_probe: Optional[Callable[[], float]] = current_memory_mb,
    ):
        """
        Initialize generator.

        Args:
            config: Run configuration
            source_factory: Builds the revision source (default: revision store)
            sink_factory: Opens the output sink (default: configured kind)
            builder: Entry builder (default: IndexEntryBuilder)
            clock: Seconds source used for progress timing
            memory_probe: Memory reading for progress reports (None disables)
        """
        self.config = config
        self._source_factory = source_factory or open_revision_source
        self._sink_factory = sink_factory or open_sink
        self._builder = builder or IndexEntryBuilder()
        self.progress = ProgressTracker(config.buffer_size, clock, memory_probe)
        self.state = RunState.IDLE
        self.reports: List[ProgressReport] = []

    def generate(self) -> RunSummary:
        """
        Run index generation to completion.

        Returns:
            RunSummary of the completed run

        Raises:
            IndexGenerationError: If the sink cannot be opened, or reading,
                                  building or writing fails
        """
        self.reports = []
        self.progress.start()

        try:
            sink = self._sink_factory(self.config)
        except Exception as e:
            self.state = RunState.FAILED
            logger.error(f"Cannot open output: {e}")
            raise IndexGenerationError.wrap(e) from e

        self.state = RunState.RUNNING
        logger.info(MSG_STARTED)

        try:
            with sink:
                with self._source_factory(self.config) as source:
                    self._index_all(source, sink)
        except Exception as e:
            self.state = RunState.FAILED
            logger.error(
                f"Index generation failed after {self.progress.count} revisions: {e}"
            )
            raise IndexGenerationError.wrap(e) from e

        self.state = RunState.COMPLETED
        summary = RunSummary(
            state=self.state,
            count=self.progress.count,
            elapsed_ms=self.progress.elapsed_ms(),
            reports=self.progress.reports_emitted,
        )
        logger.info(summary.format())
        logger.info(f"Indexed {summary.count} revisions")
        return summary

    def _index_all(self, source: RevisionSource, sink: OutputSink) -> None:
        """Pull, build and emit until the source is exhausted."""
        while source.has_next():
            revision = source.next()
            sink.write(self._builder.build(revision))
            report = self.progress.increment()
            if report is not None:
                self.reports.append(report)
                logger.info(report.format())


__all__ = ['IndexGenerator', 'RunState', 'RunSummary']
