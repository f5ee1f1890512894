"""Notification capture, filtering and forwarding."""

from .types import (
    NotificationConfig,
    NotificationEvent,
    NotificationProvider,
    Platform,
)
from .providers import (
    LinuxNotificationProvider,
    StreamingNotificationProvider,
    macos_provider,
    windows_provider,
)
from .pipeline import (
    NotificationPipeline,
    PipelineState,
    format_notification,
    passes_filter,
)

__all__ = [
    "NotificationConfig",
    "NotificationEvent",
    "NotificationProvider",
    "Platform",
    "LinuxNotificationProvider",
    "StreamingNotificationProvider",
    "macos_provider",
    "windows_provider",
    "NotificationPipeline",
    "PipelineState",
    "format_notification",
    "passes_filter",
]
