# Path: rev_index/core/logger/ipo_logging.py
"""
IPO-Aware Logging for rev_index (Revision Index Generator)

Input-Process-Output separated logging for index generation.

This module sets up logging with separate files for:
- INPUT layer (configuration loader, revision sources)
- PROCESS layer (index generator, entry builder, progress reports)
- OUTPUT layer (SQL dump, data file and database sinks)
- Full activity (everything combined)
"""

import logging
import sys
from pathlib import Path
from typing import Optional


LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Progress lines are the user-visible output of a run; keep them bare
CONSOLE_FORMAT = '%(message)s'


class IPOFilter(logging.Filter):
    """Filter logs by IPO layer prefix."""

    def __init__(self, layer: str):
        """
        Initialize filter for specific IPO layer.

        Args:
            layer: 'input', 'process', or 'output'
        """
        super().__init__()
        self.layer = layer

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter records by logger name prefix."""
        return record.name.startswith(self.layer)


def setup_ipo_logging(
    log_dir: Optional[Path] = None,
    log_level: str = 'INFO',
    console_output: bool = True
) -> None:
    """
    Set up IPO-aware logging for rev_index.

    When log_dir is given, creates separate log files for:
    - input_activity.log (INPUT layer)
    - process_activity.log (PROCESS layer)
    - output_activity.log (OUTPUT layer)
    - full_activity.log (all activities combined)

    Args:
        log_dir: Directory for log files (None for console only)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_output: Whether to also output to stdout

    Example:
        setup_ipo_logging(
            log_dir=Path('/var/log/rev_index'),
            log_level='INFO',
            console_output=True
        )
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    # Clear any existing handlers
    root_logger.handlers.clear()

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        full_handler = logging.FileHandler(log_dir / 'full_activity.log')
        full_handler.setLevel(logging.DEBUG)
        full_handler.setFormatter(formatter)
        root_logger.addHandler(full_handler)

        for layer in ('input', 'process', 'output'):
            handler = logging.FileHandler(log_dir / f'{layer}_activity.log')
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(formatter)
            handler.addFilter(IPOFilter(layer))
            root_logger.addHandler(handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, log_level.upper()))
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)


def get_input_logger(name: str) -> logging.Logger:
    """
    Get logger for INPUT layer.

    Args:
        name: Logger name (e.g., 'config_loader', 'revision_reader')

    Returns:
        Logger configured for INPUT layer
    """
    return logging.getLogger(f'input.{name}')


def get_process_logger(name: str) -> logging.Logger:
    """
    Get logger for PROCESS layer.

    Args:
        name: Logger name (e.g., 'index_generator')

    Returns:
        Logger configured for PROCESS layer
    """
    return logging.getLogger(f'process.{name}')


def get_output_logger(name: str) -> logging.Logger:
    """
    Get logger for OUTPUT layer.

    Args:
        name: Logger name (e.g., 'sql_dump_sink', 'database_sink')

    Returns:
        Logger configured for OUTPUT layer
    """
    return logging.getLogger(f'output.{name}')


__all__ = [
    'IPOFilter',
    'setup_ipo_logging',
    'get_input_logger',
    'get_process_logger',
    'get_output_logger',
]
