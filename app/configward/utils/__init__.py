"""Utility modules for configward.

This module exports commonly used utility functions.
"""

from configward.utils.formatting import (
    console,
    err_console,
    format_cli_command,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "err_console",
    "format_cli_command",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
