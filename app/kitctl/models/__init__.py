"""Data models for kitctl.

This module exports the core data structures used throughout the application.
"""

from kitctl.models.action import BackupReport, InstallCommand, InstallOutcome, RestoreRequest
from kitctl.models.cache import DisplayNameCacheEntry
from kitctl.models.merge import MergedItem, Provenance
from kitctl.models.package import (
    AptItem,
    ChocolateyItem,
    ExtensionRecord,
    FlatpakItem,
    HomebrewItem,
    PackageRecord,
    PacmanItem,
    ScoopItem,
    SnapItem,
    WingetItem,
    YumItem,
    record_type_for,
)
from kitctl.models.sources import (
    BackupTarget,
    ConfigAppDef,
    ConfigAppId,
    HostAppDef,
    HostAppId,
    ManagerId,
    Platform,
    SourceId,
    parse_backup_target,
    parse_config_app_id,
    parse_source_id,
)

__all__ = [
    "AptItem",
    "BackupReport",
    "BackupTarget",
    "ChocolateyItem",
    "ConfigAppDef",
    "ConfigAppId",
    "DisplayNameCacheEntry",
    "ExtensionRecord",
    "FlatpakItem",
    "HomebrewItem",
    "HostAppDef",
    "HostAppId",
    "InstallCommand",
    "InstallOutcome",
    "ManagerId",
    "MergedItem",
    "PackageRecord",
    "PacmanItem",
    "Platform",
    "Provenance",
    "RestoreRequest",
    "ScoopItem",
    "SnapItem",
    "SourceId",
    "WingetItem",
    "YumItem",
    "parse_backup_target",
    "parse_config_app_id",
    "parse_source_id",
    "record_type_for",
]
