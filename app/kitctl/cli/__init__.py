"""CLI package for kitctl.

This package contains the Typer application and all subcommands.
"""

from kitctl.cli.main import app

__all__ = ["app"]
