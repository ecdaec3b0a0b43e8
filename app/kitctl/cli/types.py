"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum

import typer

from kitctl.core.config import AppConfig, load_config
from kitctl.core.inventory import Inventory
from kitctl.core.namecache import ProgressCallback
from kitctl.errors import ConfigurationError
from kitctl.models.sources import SourceId, parse_source_id
from kitctl.utils.formatting import print_error


class SourceChoice(str, Enum):
    """Package managers and host apps accepted by CLI commands."""

    WINGET = "winget"
    MSSTORE = "msstore"
    SCOOP = "scoop"
    CHOCOLATEY = "chocolatey"
    HOMEBREW = "homebrew"
    APT = "apt"
    YUM = "yum"
    DNF = "dnf"
    PACMAN = "pacman"
    ZYPPER = "zypper"
    SNAP = "snap"
    FLATPAK = "flatpak"
    VSCODE = "vscode"
    CURSOR = "cursor"
    ANTIGRAVITY = "antigravity"
    VOIDEDITOR = "voideditor"

    def to_source_id(self) -> SourceId:
        """Convert to the model-level source id."""
        return parse_source_id(self.value)


class HostChoice(str, Enum):
    """Editor host apps accepted by settings commands."""

    VSCODE = "vscode"
    CURSOR = "cursor"
    ANTIGRAVITY = "antigravity"
    VOIDEDITOR = "voideditor"


class ConfigAppChoice(str, Enum):
    """Config apps accepted by the files commands."""

    GIT = "git"
    SSH = "ssh"
    BASH = "bash"
    ZSH = "zsh"
    POWERSHELL = "powershell"
    WINDOWS_TERMINAL = "windows-terminal"


def load_config_or_exit() -> AppConfig:
    """Load the application config, exiting with an error if it is invalid.

    Raises:
        typer.Exit: If the config file cannot be loaded.
    """
    try:
        return load_config()
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def get_inventory(on_name_progress: ProgressCallback | None = None) -> Inventory:
    """Build the Inventory from the user's config.

    Args:
        on_name_progress: Observer for winget name resolution.

    Raises:
        typer.Exit: If the config file cannot be loaded.
    """
    return Inventory.from_config(load_config_or_exit(), on_name_progress=on_name_progress)


def parse_version_pins(values: list[str] | None) -> dict[str, str]:
    """Parse ``ID=VERSION`` pairs given with ``--version``.

    Raises:
        typer.BadParameter: If a value has no ``=`` or an empty side.
    """
    pins: dict[str, str] = {}
    for value in values or []:
        ident, sep, version = value.partition("=")
        if not sep or not ident.strip() or not version.strip():
            msg = f"Expected ID=VERSION, got '{value}'"
            raise typer.BadParameter(msg, param_hint="--version")
        pins[ident.strip()] = version.strip()
    return pins
