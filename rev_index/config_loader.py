# Path: rev_index/config_loader.py
"""
Configuration Loader for rev_index (Revision Index Generator)

Loads the properties-style configuration file given on the command line
and turns it into an immutable IndexerConfig.

The file uses plain key=value lines, for example:

    host=dbhost
    db=revisiondb
    user=username
    password=pwd
    output=/data/index/
    outputDatabase=false
    outputDatafile=false
    charset=UTF8
    buffer=15000
    maxAllowedPackets=16760832

An unreadable configuration file is fatal. Required fields are only
checked by the component that needs them (database access needs
host/db/user or url, file sinks need output).
"""

import codecs
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import dotenv_values
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from rev_index.constants import (
    OutputKind,
    KEY_HOST, KEY_DATABASE, KEY_USER, KEY_PASSWORD, KEY_DRIVER, KEY_URL,
    KEY_OUTPUT, KEY_OUTPUT_DATABASE, KEY_OUTPUT_DATAFILE, KEY_CHARSET,
    KEY_BUFFER, KEY_MAX_ALLOWED_PACKETS, KEY_SOURCE_TABLE, KEY_INDEX_TABLE,
    DEFAULT_DRIVER, DEFAULT_CHARSET, DEFAULT_BUFFER_SIZE,
    DEFAULT_MAX_ALLOWED_PACKET, DEFAULT_OUTPUT_KIND, TRUE_VALUES,
    DEFAULT_SOURCE_TABLE, DEFAULT_INDEX_TABLE,
)
from rev_index.core.errors import ConfigError
from rev_index.core.logger import get_input_logger


logger = get_input_logger('config_loader')


@dataclass(frozen=True)
class IndexerConfig:
    """
    Read-only configuration shared by every component of a run.

    Attributes:
        host: Database host of the revision store
        database: Database name
        user: Database user
        password: Database password
        driver: SQLAlchemy driver name used with host/database/user
        url: Full SQLAlchemy URL, overrides the connection fields
        output_path: Directory receiving SQL dump or data file output
        output_kind: Active sink variant
        charset: Character encoding of text output
        buffer_size: Entries per progress report and per database batch
        max_allowed_packet: Upper bound in bytes of one bulk statement
        source_table: Revision store table
        index_table: Target index table
    """
    host: Optional[str] = None
    database: Optional[str] = None
    user: Optional[str] = None
    password: str = field(default='', repr=False)
    driver: str = DEFAULT_DRIVER
    url: Optional[str] = None
    output_path: Optional[Path] = None
    output_kind: OutputKind = DEFAULT_OUTPUT_KIND
    charset: str = DEFAULT_CHARSET
    buffer_size: int = DEFAULT_BUFFER_SIZE
    max_allowed_packet: int = DEFAULT_MAX_ALLOWED_PACKET
    source_table: str = DEFAULT_SOURCE_TABLE
    index_table: str = DEFAULT_INDEX_TABLE

    def __post_init__(self):
        if self.buffer_size <= 0:
            raise ConfigError(f"buffer must be positive, got {self.buffer_size}")
        if self.max_allowed_packet <= 0:
            raise ConfigError(
                f"maxAllowedPackets must be positive, got {self.max_allowed_packet}"
            )
        try:
            codecs.lookup(self.charset)
        except LookupError as e:
            raise ConfigError(f"Unknown charset: {self.charset}") from e

    def database_url(self) -> URL:
        """
        Build the SQLAlchemy URL of the revision database.

        Returns:
            URL built from url, or from driver/host/db/user/password

        Raises:
            ConfigError: If neither url nor host/db/user are configured
        """
        if self.url:
            try:
                return make_url(self.url)
            except ArgumentError as e:
                raise ConfigError(f"Invalid database url: {e}") from e

        missing = [
            key for key, value in (
                (KEY_HOST, self.host),
                (KEY_DATABASE, self.database),
                (KEY_USER, self.user),
            )
            if not value
        ]
        if missing:
            raise ConfigError(
                f"Database access not configured, missing: {', '.join(missing)}"
            )

        return URL.create(
            self.driver,
            username=self.user,
            password=self.password or None,
            host=self.host,
            database=self.database,
        )

    def require_output_dir(self) -> Path:
        """
        Get the output directory for file based sinks.

        Raises:
            ConfigError: If output is not configured
        """
        if self.output_path is None:
            raise ConfigError(f"Required field not configured: {KEY_OUTPUT}")
        return self.output_path


class ConfigLoader:
    """
    Loads an IndexerConfig from a properties-style file.

    Not a singleton: every run builds its own loader from the path it
    was given.

    Example:
        config = ConfigLoader(Path('index.properties')).load()
        print(config.output_kind)
    """

    def __init__(self, config_path: Path):
        """
        Read the configuration file.

        Args:
            config_path: Path to the properties file

        Raises:
            ConfigError: If the file does not exist or cannot be read
        """
        self.config_path = Path(config_path)
        self._values = self._read_properties()

    def _read_properties(self) -> dict[str, Optional[str]]:
        """Parse key=value lines of the configuration file."""
        if not self.config_path.is_file():
            raise ConfigError(
                f"Could not load configuration file {self.config_path}"
            )
        try:
            values = dotenv_values(
                dotenv_path=self.config_path,
                interpolate=False,
                encoding='utf-8',
            )
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(
                f"Could not load configuration file {self.config_path}: {e}"
            ) from e

        logger.info(f"Loaded {len(values)} keys from {self.config_path}")
        return dict(values)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get raw configuration value by key.

        Empty values count as missing.
        """
        value = self._values.get(key)
        if value is None or value.strip() == '':
            return default
        return value.strip()

    def _get_int(self, key: str, default: int) -> int:
        """Get integer value; malformed numbers are a ConfigError."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError as e:
            raise ConfigError(f"{key} must be an integer, got '{value}'") from e

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Get boolean value."""
        value = self.get(key)
        if value is None:
            return default
        return value.lower() in TRUE_VALUES

    def _get_output_kind(self) -> OutputKind:
        """DATABASE wins over DATAFILE; SQL dump otherwise."""
        if self._get_bool(KEY_OUTPUT_DATABASE):
            return OutputKind.DATABASE
        if self._get_bool(KEY_OUTPUT_DATAFILE):
            return OutputKind.DATAFILE
        return DEFAULT_OUTPUT_KIND

    def _get_output_dir(self) -> Optional[Path]:
        """An existing directory is used as-is, otherwise its parent."""
        value = self.get(KEY_OUTPUT)
        if value is None:
            return None
        output = Path(value)
        if output.is_dir():
            return output
        return output.parent

    def load(self) -> IndexerConfig:
        """
        Build the immutable run configuration.

        Returns:
            IndexerConfig with defaults applied

        Raises:
            ConfigError: If a value is malformed
        """
        config = IndexerConfig(
            host=self.get(KEY_HOST),
            database=self.get(KEY_DATABASE),
            user=self.get(KEY_USER),
            password=self.get(KEY_PASSWORD, ''),
            driver=self.get(KEY_DRIVER, DEFAULT_DRIVER),
            url=self.get(KEY_URL),
            output_path=self._get_output_dir(),
            output_kind=self._get_output_kind(),
            charset=self.get(KEY_CHARSET, DEFAULT_CHARSET),
            buffer_size=self._get_int(KEY_BUFFER, DEFAULT_BUFFER_SIZE),
            max_allowed_packet=self._get_int(
                KEY_MAX_ALLOWED_PACKETS, DEFAULT_MAX_ALLOWED_PACKET
            ),
            source_table=self.get(KEY_SOURCE_TABLE, DEFAULT_SOURCE_TABLE),
            index_table=self.get(KEY_INDEX_TABLE, DEFAULT_INDEX_TABLE),
        )
        logger.info(f"Configuration loaded: {self!r}")
        return config

    def __repr__(self) -> str:
        """String representation without credentials."""
        return (
            f"ConfigLoader("
            f"path={self.config_path}, "
            f"host={self.get(KEY_HOST)}, "
            f"db={self.get(KEY_DATABASE)})"
        )


__all__ = ['ConfigLoader', 'IndexerConfig']
