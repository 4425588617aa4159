# Path: rev_index/constants.py
"""
System-Wide Constants for rev_index (Revision Index Generator)

Central repository for constant values used across the system.
NO HARDCODED VALUES in module code - all constants defined here.

Constants are organized by category:
- Output Kinds
- Configuration Keys and Defaults
- Table and File Names
- Data File Layout
- Progress Messages
- Exit Codes
"""

from enum import Enum
from typing import Final


# ==============================================================================
# OUTPUT KINDS
# ==============================================================================

class OutputKind(str, Enum):
    """
    Output representations of the revision index.

    Exactly one kind is active per run.
    """
    SQL = 'SQL'
    DATABASE = 'DATABASE'
    DATAFILE = 'DATAFILE'

    def __str__(self) -> str:
        return self.value


# ==============================================================================
# CONFIGURATION KEYS (properties file)
# ==============================================================================

KEY_HOST: Final[str] = 'host'
KEY_DATABASE: Final[str] = 'db'
KEY_USER: Final[str] = 'user'
KEY_PASSWORD: Final[str] = 'password'
KEY_DRIVER: Final[str] = 'driver'
KEY_URL: Final[str] = 'url'
KEY_OUTPUT: Final[str] = 'output'
KEY_OUTPUT_DATABASE: Final[str] = 'outputDatabase'
KEY_OUTPUT_DATAFILE: Final[str] = 'outputDatafile'
KEY_CHARSET: Final[str] = 'charset'
KEY_BUFFER: Final[str] = 'buffer'
KEY_MAX_ALLOWED_PACKETS: Final[str] = 'maxAllowedPackets'
KEY_SOURCE_TABLE: Final[str] = 'sourceTable'
KEY_INDEX_TABLE: Final[str] = 'indexTable'


# ==============================================================================
# CONFIGURATION DEFAULTS
# ==============================================================================

DEFAULT_DRIVER: Final[str] = 'postgresql+psycopg2'
DEFAULT_CHARSET: Final[str] = 'UTF-8'
DEFAULT_BUFFER_SIZE: Final[int] = 15000
DEFAULT_MAX_ALLOWED_PACKET: Final[int] = 16 * 1024 * 1023
DEFAULT_OUTPUT_KIND: Final[OutputKind] = OutputKind.SQL

TRUE_VALUES: Final[tuple] = ('true', '1', 'yes', 'on')


# ==============================================================================
# TABLE AND FILE NAMES
# ==============================================================================

DEFAULT_SOURCE_TABLE: Final[str] = 'revisions'
DEFAULT_INDEX_TABLE: Final[str] = 'index_revisions'

SQL_DUMP_FILENAME: Final[str] = 'revision_index.sql'
DATA_FILE_FILENAME: Final[str] = 'revision_index.dat'


# ==============================================================================
# DATA FILE LAYOUT
# ==============================================================================
# Header: magic, uint16 version, uint16 len + record format,
#         uint16 len + comma separated field names.
# Records: fixed width, RECORD_FORMAT.

DATA_FILE_MAGIC: Final[bytes] = b'RVIX'
DATA_FILE_VERSION: Final[int] = 1
DATA_FILE_HEADER_PREFIX: Final[str] = '>4sH'
DATA_FILE_LENGTH_FORMAT: Final[str] = '>H'
DATA_FILE_RECORD_FORMAT: Final[str] = '>qqiqqqq'
DATA_FILE_FIELDS: Final[tuple] = (
    'revision_id',
    'article_id',
    'revision_counter',
    'primary_key',
    'full_revision_pk',
    'timestamp_ms',
    'size',
)
DATA_FILE_NO_SIZE: Final[int] = -1


# ==============================================================================
# PROGRESS MESSAGES
# ==============================================================================

MSG_STARTED: Final[str] = 'GENERATING INDEX STARTED'
MSG_ENDED: Final[str] = 'GENERATING INDEX ENDED + ({clock})'
MSG_PROGRESS: Final[str] = '{clock}\t{delta}\tINDEXING {count}'
MSG_TERMINATED: Final[str] = 'TERMINATED'

BYTES_TO_MB: Final[int] = 1024 * 1024


# ==============================================================================
# EXIT CODES
# ==============================================================================

EXIT_OK: Final[int] = 0
EXIT_FAILED: Final[int] = 1
EXIT_USAGE: Final[int] = 2
EXIT_INTERRUPTED: Final[int] = 130

# Console status prefixes
STATUS_OK: Final[str] = '[OK]'
STATUS_FAIL: Final[str] = '[FAIL]'


__all__ = [
    'OutputKind',
    'KEY_HOST', 'KEY_DATABASE', 'KEY_USER', 'KEY_PASSWORD', 'KEY_DRIVER',
    'KEY_URL', 'KEY_OUTPUT', 'KEY_OUTPUT_DATABASE', 'KEY_OUTPUT_DATAFILE',
    'KEY_CHARSET', 'KEY_BUFFER', 'KEY_MAX_ALLOWED_PACKETS',
    'KEY_SOURCE_TABLE', 'KEY_INDEX_TABLE',
    'DEFAULT_DRIVER', 'DEFAULT_CHARSET', 'DEFAULT_BUFFER_SIZE',
    'DEFAULT_MAX_ALLOWED_PACKET', 'DEFAULT_OUTPUT_KIND', 'TRUE_VALUES',
    'DEFAULT_SOURCE_TABLE', 'DEFAULT_INDEX_TABLE',
    'SQL_DUMP_FILENAME', 'DATA_FILE_FILENAME',
    'DATA_FILE_MAGIC', 'DATA_FILE_VERSION', 'DATA_FILE_HEADER_PREFIX',
    'DATA_FILE_LENGTH_FORMAT', 'DATA_FILE_RECORD_FORMAT', 'DATA_FILE_FIELDS',
    'DATA_FILE_NO_SIZE',
    'MSG_STARTED', 'MSG_ENDED', 'MSG_PROGRESS', 'MSG_TERMINATED',
    'BYTES_TO_MB',
    'EXIT_OK', 'EXIT_FAILED', 'EXIT_USAGE', 'EXIT_INTERRUPTED',
    'STATUS_OK', 'STATUS_FAIL',
]
