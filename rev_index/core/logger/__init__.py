# Path: rev_index/core/logger/__init__.py
"""
rev_index Logger Package

IPO-aware logging for the Revision Index Generator.

Provides separate log streams for:
- INPUT layer (configuration, revision sources)
- PROCESS layer (index generation, progress)
- OUTPUT layer (sinks)
"""

from .ipo_logging import (
    setup_ipo_logging,
    get_input_logger,
    get_process_logger,
    get_output_logger,
)

__all__ = [
    'setup_ipo_logging',
    'get_input_logger',
    'get_process_logger',
    'get_output_logger',
]
