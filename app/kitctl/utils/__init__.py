"""Utility modules for kitctl.

This module exports commonly used utility functions.
"""

from kitctl.utils.formatting import (
    console,
    create_merged_table,
    create_package_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from kitctl.utils.shell import CommandResult, CommandRunner, command_exists, run_command

__all__ = [
    "CommandResult",
    "CommandRunner",
    "command_exists",
    "console",
    "create_merged_table",
    "create_package_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
