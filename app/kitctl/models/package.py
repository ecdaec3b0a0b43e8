"""Package and extension record models.

Each package manager reports installed software in its own shape. Every
shape is a separate frozen model that names its identity, display name and
version explicitly, so the reconciliation engine never has to guess which
field identifies an item. Records are persisted to snapshot files using the
manager's native field names (``PackageId``, ``Name``, ``Version``, ...).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from kitctl.models.sources import HostAppId, ManagerId, SourceId


class PackageRecord(BaseModel):
    """Base class for all installed-item records.

    Subclasses must provide ``identity``, ``display_name`` and
    ``version``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @property
    def identity(self) -> str:
        """Value used for equality and merging."""
        raise NotImplementedError

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        raise NotImplementedError

    @property
    def install_target(self) -> str:
        """Value handed to the manager's install command."""
        return self.identity

    def to_snapshot(self) -> dict[str, Any]:
        """Serialize using the manager's native field names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class WingetItem(PackageRecord):
    """Package from ``winget export`` (winget and msstore sources)."""

    package_id: str = Field(alias="PackageId", min_length=1)
    name: str = Field(alias="Name")
    version: str = Field(alias="Version", default="latest")

    @property
    def identity(self) -> str:
        return self.package_id

    @property
    def display_name(self) -> str:
        return self.name or self.package_id


class ScoopItem(PackageRecord):
    """App from ``scoop export``."""

    name: str = Field(alias="Name", min_length=1)
    version: str = Field(alias="Version", default="latest")
    source: str | None = Field(alias="Source", default=None)

    @property
    def identity(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name


class ChocolateyItem(PackageRecord):
    """Package from ``choco export``."""

    package_id: str = Field(alias="PackageId", min_length=1)
    title: str = Field(alias="Title")
    version: str = Field(alias="Version", default="latest")

    @property
    def identity(self) -> str:
        return self.package_id

    @property
    def display_name(self) -> str:
        return self.title or self.package_id


class HomebrewItem(PackageRecord):
    """Formula from ``brew list --versions``."""

    name: str = Field(alias="Name", min_length=1)
    version: str = Field(alias="Version")
    installed_on_request: bool | None = Field(alias="InstalledOnRequest", default=None)

    @property
    def identity(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name


class AptItem(PackageRecord):
    """Package row from ``dpkg -l``."""

    package: str = Field(alias="Package", min_length=1)
    version: str = Field(alias="Version")
    architecture: str | None = Field(alias="Architecture", default=None)

    @property
    def identity(self) -> str:
        return self.package

    @property
    def display_name(self) -> str:
        return self.package


class YumItem(PackageRecord):
    """RPM package as listed by yum, dnf or zypper."""

    name: str = Field(alias="Name", min_length=1)
    version: str = Field(alias="Version")
    release: str | None = Field(alias="Release", default=None)
    architecture: str | None = Field(alias="Architecture", default=None)

    @property
    def identity(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name


class PacmanItem(PackageRecord):
    """Package from ``pacman -Q``."""

    name: str = Field(alias="Name", min_length=1)
    version: str = Field(alias="Version")
    repository: str | None = Field(alias="Repository", default=None)

    @property
    def identity(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name


class SnapItem(PackageRecord):
    """Snap from ``snap list``."""

    name: str = Field(alias="Name", min_length=1)
    version: str = Field(alias="Version")
    revision: str | None = Field(alias="Revision", default=None)
    tracking: str | None = Field(alias="Tracking", default=None)

    @property
    def identity(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name


class FlatpakItem(PackageRecord):
    """Application from ``flatpak list --app``."""

    name: str = Field(alias="Name", min_length=1)
    application: str = Field(alias="Application")
    version: str = Field(alias="Version", default="")
    branch: str | None = Field(alias="Branch", default=None)
    origin: str | None = Field(alias="Origin", default=None)

    @property
    def identity(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def install_target(self) -> str:
        return self.application


class ExtensionRecord(PackageRecord):
    """Extension installed in an editor host app."""

    id: str = Field(min_length=1)
    version: str | None = None

    @property
    def identity(self) -> str:
        return self.id

    @property
    def display_name(self) -> str:
        return self.id


RECORD_TYPES: dict[ManagerId, type[PackageRecord]] = {
    ManagerId.WINGET: WingetItem,
    ManagerId.MSSTORE: WingetItem,
    ManagerId.SCOOP: ScoopItem,
    ManagerId.CHOCOLATEY: ChocolateyItem,
    ManagerId.HOMEBREW: HomebrewItem,
    ManagerId.APT: AptItem,
    ManagerId.YUM: YumItem,
    ManagerId.DNF: YumItem,
    ManagerId.PACMAN: PacmanItem,
    ManagerId.ZYPPER: YumItem,
    ManagerId.SNAP: SnapItem,
    ManagerId.FLATPAK: FlatpakItem,
}


def record_type_for(source: SourceId) -> type[PackageRecord]:
    """Return the record model used by a manager or host app."""
    if isinstance(source, HostAppId):
        return ExtensionRecord
    return RECORD_TYPES[source]
