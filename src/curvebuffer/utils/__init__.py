"""Utility functions for curvebuffer.

This module provides utility functions including:

- Logging setup and configuration
- Progress and statistics tracking for buffering runs
"""

from curvebuffer.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
