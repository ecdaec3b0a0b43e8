"""Source adapters for package managers and editor host apps.

This module exports the adapter classes that list installed items and
build install commands for each supported source.
"""

from kitctl.adapters.apt import AptAdapter
from kitctl.adapters.base import Adapter
from kitctl.adapters.chocolatey import ChocolateyAdapter
from kitctl.adapters.extensions import ExtensionAdapter
from kitctl.adapters.flatpak import FlatpakAdapter
from kitctl.adapters.homebrew import HomebrewAdapter
from kitctl.adapters.pacman import PacmanAdapter
from kitctl.adapters.registry import AdapterRegistry
from kitctl.adapters.rpm import RpmAdapter
from kitctl.adapters.scoop import ScoopAdapter
from kitctl.adapters.snap import SnapAdapter
from kitctl.adapters.winget import WingetAdapter
from kitctl.adapters.zypper import ZypperAdapter

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "AptAdapter",
    "ChocolateyAdapter",
    "ExtensionAdapter",
    "FlatpakAdapter",
    "HomebrewAdapter",
    "PacmanAdapter",
    "RpmAdapter",
    "ScoopAdapter",
    "SnapAdapter",
    "WingetAdapter",
    "ZypperAdapter",
]
