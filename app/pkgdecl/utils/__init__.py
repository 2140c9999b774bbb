"""Utility modules for pkgdecl.

This module exports commonly used utility functions.
"""

from pkgdecl.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from pkgdecl.utils.shell import CommandResult, run_command, run_interactive

__all__ = [
    "CommandResult",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "run_interactive",
]
