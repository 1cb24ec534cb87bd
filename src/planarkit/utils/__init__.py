"""Utility functions for planarkit.

This module provides:

- Structured logging setup and configuration
- Processing statistics and progress logging
"""

from planarkit.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
