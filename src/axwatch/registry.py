"""Platform registry for notification providers and snapshot sources."""

import logging
import sys
from dataclasses import dataclass
from typing import Callable

from axwatch.config import Config
from axwatch.errors import UnsupportedPlatformError
from axwatch.notifications.providers import (
    LinuxNotificationProvider,
    macos_provider,
    powershell_command,
    windows_provider,
)
from axwatch.notifications.types import NotificationProvider
from axwatch.snapshot.capture import (
    CommandSnapshotSource,
    SnapshotSource,
    UnavailableSnapshotSource,
)

logger = logging.getLogger(__name__)

NotificationFactory = Callable[[], NotificationProvider]
SnapshotFactory = Callable[[], SnapshotSource]


@dataclass(frozen=True)
class PlatformEntry:
    """Factories registered for one platform identifier."""

    notification_factory: NotificationFactory
    snapshot_factory: SnapshotFactory


class ProviderRegistry:
    """Maps platform identifiers to provider and snapshot source factories.

    Each lookup builds a fresh instance; callers own what they get back.
    """

    def __init__(self) -> None:
        self._entries: dict[str, PlatformEntry] = {}

    def register(
        self,
        platform: str,
        notification_factory: NotificationFactory,
        snapshot_factory: SnapshotFactory,
    ) -> None:
        """Register (or replace) the factories for a platform."""
        self._entries[platform] = PlatformEntry(
            notification_factory=notification_factory,
            snapshot_factory=snapshot_factory,
        )
        logger.debug("Registered platform: %s", platform)

    def platforms(self) -> list[str]:
        """Registered platform identifiers."""
        return sorted(self._entries)

    def _entry(self, platform: str) -> PlatformEntry:
        try:
            return self._entries[platform]
        except KeyError:
            raise UnsupportedPlatformError(
                f"Unsupported platform: {platform}"
            ) from None

    def notification_provider(self, platform: str) -> NotificationProvider:
        """Build the notification provider for a platform.

        Raises:
            UnsupportedPlatformError: If nothing is registered for it.
        """
        return self._entry(platform).notification_factory()

    def snapshot_source(self, platform: str) -> SnapshotSource:
        """Build the snapshot source for a platform.

        Raises:
            UnsupportedPlatformError: If nothing is registered for it.
        """
        return self._entry(platform).snapshot_factory()


def current_platform() -> str:
    """Platform identifier of the running interpreter."""
    if sys.platform == "darwin":
        return "darwin"
    if sys.platform == "win32":
        return "win32"
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


def default_registry(config: Config) -> ProviderRegistry:
    """Registry with the built-in darwin, win32 and linux implementations."""
    native_dir = config.native_path
    snapshot = config.snapshot

    def darwin_snapshot() -> SnapshotSource:
        binary = native_dir / "macos" / "notif-watch"
        return CommandSnapshotSource(
            binary, [str(binary), "--snapshot"], timeout=snapshot.darwin_timeout
        )

    def win32_snapshot() -> SnapshotSource:
        script = native_dir / "windows" / "ax-snapshot.ps1"
        return CommandSnapshotSource(
            script, powershell_command(script), timeout=snapshot.win32_timeout
        )

    registry = ProviderRegistry()
    registry.register("darwin", lambda: macos_provider(native_dir), darwin_snapshot)
    registry.register("win32", lambda: windows_provider(native_dir), win32_snapshot)
    registry.register(
        "linux",
        LinuxNotificationProvider,
        lambda: UnavailableSnapshotSource("linux"),
    )
    return registry
