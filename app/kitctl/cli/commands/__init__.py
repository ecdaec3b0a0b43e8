"""CLI commands for kitctl.

This package contains all subcommand implementations.
"""

from kitctl.cli.commands import (
    backup,
    config,
    detect,
    diff,
    files,
    packages,
    restore,
    settings,
    status,
)

__all__ = [
    "backup",
    "config",
    "detect",
    "diff",
    "files",
    "packages",
    "restore",
    "settings",
    "status",
]
