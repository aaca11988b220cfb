"""Utility functions for gwtmux.

This package provides utility modules:
- logging: Logging configuration and logger creation
- console: Shared Rich console for user-facing errors and warnings
"""

from .logging import setup_logging, get_logger
from .console import console, print_error, print_warning

__all__ = [
    "setup_logging",
    "get_logger",
    "console",
    "print_error",
    "print_warning",
]
