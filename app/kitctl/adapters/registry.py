"""Adapter registry.

Builds the adapter for any manager or host app with shared collaborators
(command runner, elevation prefix, name resolver, platform).
"""

from collections.abc import Callable

from kitctl.adapters.apt import AptAdapter
from kitctl.adapters.base import Adapter
from kitctl.adapters.chocolatey import ChocolateyAdapter
from kitctl.adapters.extensions import ExtensionAdapter
from kitctl.adapters.flatpak import FlatpakAdapter
from kitctl.adapters.homebrew import HomebrewAdapter
from kitctl.adapters.pacman import PacmanAdapter
from kitctl.adapters.rpm import RpmAdapter
from kitctl.adapters.scoop import ScoopAdapter
from kitctl.adapters.snap import SnapAdapter
from kitctl.adapters.winget import WingetAdapter
from kitctl.adapters.zypper import ZypperAdapter
from kitctl.core.namecache import DisplayNameResolver, ProgressCallback
from kitctl.errors import ConfigurationError
from kitctl.models.sources import (
    HostAppId,
    ManagerId,
    Platform,
    SourceId,
    parse_source_id,
    sources_for_platform,
)
from kitctl.utils.shell import CommandRunner


class AdapterRegistry:
    """Creates and caches one adapter per source.

    Example:
        >>> registry = AdapterRegistry(elevation="doas")
        >>> registry.get(ManagerId.APT).build_install_command("curl").line
        'doas apt install -y curl'
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        elevation: str | None = "sudo",
        platform: Platform | None = None,
        resolver: DisplayNameResolver | None = None,
        on_name_progress: ProgressCallback | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            runner: Command runner shared by all adapters.
            elevation: Prefix for managers that install system-wide.
            platform: Host platform. Defaults to the current one.
            resolver: Display-name resolver for the winget sources.
            on_name_progress: Observer for winget name resolution.
        """
        self.runner = runner or CommandRunner()
        self.elevation = elevation
        self.platform = platform or Platform.current()
        self._resolver = resolver
        self._on_name_progress = on_name_progress
        self._adapters: dict[SourceId, Adapter] = {}
        self._factories: dict[ManagerId, Callable[[], Adapter]] = {
            ManagerId.WINGET: lambda: self._winget(ManagerId.WINGET),
            ManagerId.MSSTORE: lambda: self._winget(ManagerId.MSSTORE),
            ManagerId.SCOOP: lambda: ScoopAdapter(self.runner, platform=self.platform),
            ManagerId.CHOCOLATEY: lambda: ChocolateyAdapter(self.runner),
            ManagerId.HOMEBREW: lambda: HomebrewAdapter(self.runner),
            ManagerId.APT: lambda: AptAdapter(self.runner, elevation=self.elevation),
            ManagerId.YUM: lambda: RpmAdapter(ManagerId.YUM, self.runner, self.elevation),
            ManagerId.DNF: lambda: RpmAdapter(ManagerId.DNF, self.runner, self.elevation),
            ManagerId.PACMAN: lambda: PacmanAdapter(self.runner, elevation=self.elevation),
            ManagerId.ZYPPER: lambda: ZypperAdapter(self.runner, elevation=self.elevation),
            ManagerId.SNAP: lambda: SnapAdapter(self.runner, elevation=self.elevation),
            ManagerId.FLATPAK: lambda: FlatpakAdapter(self.runner),
        }

    def _winget(self, manager: ManagerId) -> WingetAdapter:
        return WingetAdapter(
            manager,
            self.runner,
            resolver=self._resolver,
            on_progress=self._on_name_progress,
        )

    def get(self, source: SourceId | str) -> Adapter:
        """Return the adapter for a source.

        Args:
            source: Source id, or its string value.

        Returns:
            The adapter, created on first use.

        Raises:
            ConfigurationError: If the source is unknown.
        """
        if isinstance(source, str):
            source = parse_source_id(source)

        adapter = self._adapters.get(source)
        if adapter is None:
            adapter = self._create(source)
            self._adapters[source] = adapter
        return adapter

    def extension_adapter(self, host: HostAppId) -> ExtensionAdapter:
        """Return the adapter for a host app with its extension-specific API."""
        adapter = self.get(host)
        if not isinstance(adapter, ExtensionAdapter):
            msg = f"{host!r} is not a host app"
            raise ConfigurationError(msg)
        return adapter

    def _create(self, source: SourceId) -> Adapter:
        if isinstance(source, HostAppId):
            return ExtensionAdapter(source, self.runner, platform=self.platform)
        factory = self._factories.get(source) if isinstance(source, ManagerId) else None
        if factory is None:
            msg = f"No adapter for source {source!r}"
            raise ConfigurationError(msg)
        return factory()

    def platform_sources(self) -> list[SourceId]:
        """Sources meaningful on this registry's platform, managers first."""
        return sources_for_platform(self.platform)

    def detect(self) -> dict[SourceId, bool]:
        """Availability of every source meaningful on this platform."""
        return {source: self.get(source).is_available() for source in self.platform_sources()}
