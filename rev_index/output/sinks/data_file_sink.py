# Path: rev_index/output/sinks/data_file_sink.py
"""
Data File Sink

Writes the revision index as a flat binary file for bulk loading.

Layout (big-endian):

    header
        4s      magic b'RVIX'
        H       format version
        H + s   length-prefixed struct format of one record
        H + s   length-prefixed comma separated field names
    records
        >qqiqqqq  revision_id, article_id, revision_counter, primary_key,
                  full_revision_pk, timestamp_ms (UTC), size (-1 = unknown)

The header describes the record layout, so a loader can check it before
reading. read_data_file() is the reference reader.
"""

import struct
from datetime import datetime, timedelta
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

from rev_index.constants import (
    OutputKind,
    DATA_FILE_FILENAME,
    DATA_FILE_MAGIC,
    DATA_FILE_VERSION,
    DATA_FILE_HEADER_PREFIX,
    DATA_FILE_LENGTH_FORMAT,
    DATA_FILE_RECORD_FORMAT,
    DATA_FILE_FIELDS,
    DATA_FILE_NO_SIZE,
)
from rev_index.core.errors import SinkInitError, SinkWriteError, SourceReadError
from rev_index.core.logger import get_output_logger
from rev_index.process.entry_builder import IndexEntry, Locator, utc_naive
from .base_sink import OutputSink


logger = get_output_logger('data_file_sink')

_PREFIX = struct.Struct(DATA_FILE_HEADER_PREFIX)
_LENGTH = struct.Struct(DATA_FILE_LENGTH_FORMAT)
EPOCH = datetime(1970, 1, 1)


def to_epoch_ms(timestamp: datetime) -> int:
    """Milliseconds since epoch; naive timestamps are taken as UTC."""
    delta = utc_naive(timestamp) - EPOCH
    return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000


def from_epoch_ms(millis: int) -> datetime:
    """Inverse of to_epoch_ms, returning a naive UTC datetime."""
    return EPOCH + timedelta(milliseconds=millis)


def build_header() -> bytes:
    """Encode the self-describing data file header."""
    record_format = DATA_FILE_RECORD_FORMAT.encode('ascii')
    field_names = ','.join(DATA_FILE_FIELDS).encode('ascii')
    return b''.join((
        _PREFIX.pack(DATA_FILE_MAGIC, DATA_FILE_VERSION),
        _LENGTH.pack(len(record_format)),
        record_format,
        _LENGTH.pack(len(field_names)),
        field_names,
    ))


class DataFileSink(OutputSink):
    """
    Packs index entries into fixed-width binary records.

    Example:
        with DataFileSink.open(config) as sink:
            sink.write(entry)
        entries = list(read_data_file(sink.path))
    """

    kind = OutputKind.DATAFILE

    def __init__(self, config):
        super().__init__(config)
        self.path: Optional[Path] = None
        self._file: Optional[BinaryIO] = None
        self._record = struct.Struct(DATA_FILE_RECORD_FORMAT)

    def _open(self) -> None:
        output_dir = self.config.require_output_dir()
        self.path = output_dir / DATA_FILE_FILENAME
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, 'wb')
            self._file.write(build_header())
        except OSError as e:
            self._release()
            raise SinkInitError(f"Cannot create data file {self.path}: {e}") from e
        logger.info(f"Writing data file to {self.path}")

    def _write(self, entry: IndexEntry) -> None:
        try:
            record = self._record.pack(
                entry.revision_id,
                entry.article_id,
                entry.revision_counter,
                entry.locator.primary_key,
                entry.locator.full_revision_pk,
                to_epoch_ms(entry.timestamp),
                DATA_FILE_NO_SIZE if entry.size is None else entry.size,
            )
        except struct.error as e:
            raise SinkWriteError(
                f"Revision {entry.revision_id} cannot be packed: {e}"
            ) from e
        try:
            self._file.write(record)
        except OSError as e:
            raise SinkWriteError(f"Cannot write data file {self.path}: {e}") from e

    def _flush(self) -> None:
        try:
            self._file.flush()
        except OSError as e:
            raise SinkWriteError(f"Cannot flush data file {self.path}: {e}") from e

    def _release(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            except OSError as e:
                logger.error(f"Error closing data file {self.path}: {e}")
            self._file = None


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise SourceReadError(f"Truncated data file while reading {what}")
    return data


def read_data_file(path: Path) -> Iterator[IndexEntry]:
    """
    Read index entries back from a data file.

    Args:
        path: Data file written by DataFileSink

    Yields:
        IndexEntry objects in file order

    Raises:
        SourceReadError: If the header or a record is invalid
    """
    with open(path, 'rb') as stream:
        magic, version = _PREFIX.unpack(_read_exact(stream, _PREFIX.size, 'header'))
        if magic != DATA_FILE_MAGIC:
            raise SourceReadError(f"Not a revision index data file: {path}")
        if version != DATA_FILE_VERSION:
            raise SourceReadError(f"Unsupported data file version {version}")

        (format_length,) = _LENGTH.unpack(_read_exact(stream, _LENGTH.size, 'header'))
        record_format = _read_exact(stream, format_length, 'header').decode('ascii')
        (fields_length,) = _LENGTH.unpack(_read_exact(stream, _LENGTH.size, 'header'))
        fields = tuple(
            _read_exact(stream, fields_length, 'header').decode('ascii').split(',')
        )
        if record_format != DATA_FILE_RECORD_FORMAT or fields != DATA_FILE_FIELDS:
            raise SourceReadError(
                f"Unexpected record layout {record_format} {fields}"
            )

        record = struct.Struct(record_format)
        while True:
            chunk = stream.read(record.size)
            if not chunk:
                return
            if len(chunk) != record.size:
                raise SourceReadError("Truncated data file record")
            values = dict(zip(fields, record.unpack(chunk)))
            yield IndexEntry(
                revision_id=values['revision_id'],
                article_id=values['article_id'],
                revision_counter=values['revision_counter'],
                locator=Locator(
                    primary_key=values['primary_key'],
                    full_revision_pk=values['full_revision_pk'],
                ),
                timestamp=from_epoch_ms(values['timestamp_ms']),
                size=None if values['size'] == DATA_FILE_NO_SIZE else values['size'],
            )


__all__ = ['DataFileSink', 'read_data_file', 'build_header', 'to_epoch_ms', 'from_epoch_ms']
