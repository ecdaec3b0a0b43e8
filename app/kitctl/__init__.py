"""kitctl - back up and restore installed software across package managers."""

__version__ = "0.1.0"
