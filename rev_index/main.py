#!/usr/bin/env python3
# Path: rev_index/main.py
"""
Revision Index Generator (rev_index) - Main Entry Point

Builds the revision index of a revision store in one pass.

Data Flow:
    INPUT:   revision store (table of stored revisions)
    PROCESS: Revision -> IndexEntry, progress every `buffer` revisions
    OUTPUT:  SQL dump, binary data file or index table

Usage:
    rev-index index.properties
    python -m rev_index.main index.properties --log-dir logs/
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from rev_index.config_loader import ConfigLoader
from rev_index.constants import (
    EXIT_FAILED,
    EXIT_INTERRUPTED,
    EXIT_OK,
    KEY_BUFFER,
    KEY_CHARSET,
    KEY_DATABASE,
    KEY_DRIVER,
    KEY_HOST,
    KEY_INDEX_TABLE,
    KEY_MAX_ALLOWED_PACKETS,
    KEY_OUTPUT,
    KEY_OUTPUT_DATABASE,
    KEY_OUTPUT_DATAFILE,
    KEY_PASSWORD,
    KEY_SOURCE_TABLE,
    KEY_URL,
    KEY_USER,
    MSG_TERMINATED,
    STATUS_FAIL,
    STATUS_OK,
)
from rev_index.core.errors import IndexGenerationError, RevisionIndexError
from rev_index.core.logger import get_process_logger, setup_ipo_logging
from rev_index.process.index_generator import IndexGenerator


EPILOG = f"""
Configuration file (key=value):
  {KEY_HOST}               Host of the revision store
  {KEY_DATABASE}                 Database name
  {KEY_USER}               Database user
  {KEY_PASSWORD}           Database password
  {KEY_DRIVER}             SQLAlchemy driver (default postgresql+psycopg2)
  {KEY_URL}                Full database URL, overrides the fields above
  {KEY_OUTPUT}             Output directory, or a file inside it
  {KEY_OUTPUT_DATABASE}     true: write into the index table
  {KEY_OUTPUT_DATAFILE}     true: write a binary data file
  {KEY_CHARSET}            Charset of the SQL dump
  {KEY_BUFFER}             Revisions per progress report / insert batch
  {KEY_MAX_ALLOWED_PACKETS}  Maximum bytes per statement
  {KEY_SOURCE_TABLE}        Revision table (default revisions)
  {KEY_INDEX_TABLE}         Index table (default index_revisions)
"""


def build_parser() -> argparse.ArgumentParser:
    """Command line parser: one configuration file, optional logging flags."""
    parser = argparse.ArgumentParser(
        prog='rev-index',
        description='rev_index - Revision Index Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )

    parser.add_argument(
        'config',
        type=Path,
        help='Path to the configuration file'
    )

    parser.add_argument(
        '--log-dir',
        type=Path,
        default=None,
        help='Also write per-layer log files to this directory'
    )

    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (default INFO)'
    )

    return parser


def run(config_path: Path) -> int:
    """
    Load configuration and generate the index.

    Args:
        config_path: Path to the configuration file

    Returns:
        Exit code (0 for success)

    Raises:
        IndexGenerationError: If configuration or generation fails
    """
    try:
        config = ConfigLoader(config_path).load()
    except RevisionIndexError as e:
        raise IndexGenerationError.wrap(e) from e

    summary = IndexGenerator(config).generate()
    print(f"{STATUS_OK} Indexed {summary.count} revisions")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for rev_index.

    Argument errors exit with status 2 through argparse, before any work.

    Returns:
        Exit code (0 success, 1 generation failed, 130 interrupted)
    """
    args = build_parser().parse_args(argv)

    setup_ipo_logging(log_dir=args.log_dir, log_level=args.log_level)
    logger = get_process_logger('main')

    try:
        return run(args.config)

    except IndexGenerationError as e:
        print(f"\n{STATUS_FAIL} {e}")
        if e.__cause__ is not None:
            print(f"  Caused by: {type(e.__cause__).__name__}: {e.__cause__}")
        logger.error(f"Run failed: {e}")
        return EXIT_FAILED

    except KeyboardInterrupt:
        print("\n[Interrupted]")
        return EXIT_INTERRUPTED

    finally:
        print(MSG_TERMINATED)


if __name__ == '__main__':
    sys.exit(main())
