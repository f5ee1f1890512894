"""Notification event, config and provider types."""

from dataclasses import dataclass
from typing import Callable, Literal, Optional, Protocol

Platform = Literal["darwin", "win32", "linux"]


@dataclass(frozen=True)
class NotificationEvent:
    """A single OS notification as reported by a provider."""

    id: str
    app_name: str
    title: str
    body: str
    timestamp: float  # seconds since epoch
    bundle_id: Optional[str] = None


@dataclass(frozen=True)
class NotificationConfig:
    """Filtering configuration for the notification pipeline.

    Empty lists mean "no restriction".
    """

    enabled: bool = True
    app_whitelist: tuple[str, ...] = ()
    app_blacklist: tuple[str, ...] = ()
    # Apps whose screen snapshots are diffed (empty = all apps)
    diff_apps: tuple[str, ...] = ()


NotificationCallback = Callable[[NotificationEvent], None]


class NotificationProvider(Protocol):
    """Capability set of a per-platform notification source."""

    platform: Platform

    async def is_available(self) -> bool:
        """True if the provider can run on this system."""
        ...

    async def start(self, on_notification: NotificationCallback) -> None:
        """Begin delivering notifications to the callback."""
        ...

    async def stop(self) -> None:
        """Stop delivering notifications and release resources."""
        ...
