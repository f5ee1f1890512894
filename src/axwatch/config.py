"""Configuration management for axwatch."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml

from axwatch.notifications.types import NotificationConfig


DEFAULT_NATIVE_DIR = "~/.config/axwatch/native"


@dataclass
class SnapshotConfig:
    """Accessibility snapshot polling configuration."""

    enabled: bool = True
    poll_interval: float = 1.0  # seconds
    darwin_timeout: float = 5.0  # seconds
    win32_timeout: float = 15.0  # seconds


@dataclass
class Config:
    """axwatch configuration."""

    log_level: str = "INFO"
    log_file: str | None = None
    native_dir: str = DEFAULT_NATIVE_DIR
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    snapshot: SnapshotConfig = field(default_factory=SnapshotConfig)

    @property
    def native_path(self) -> Path:
        """Directory holding the native capture binaries and scripts."""
        return Path(self.native_dir).expanduser()


def get_config_path(custom_path: Path | None = None) -> Path:
    """Get the configuration file path.

    Args:
        custom_path: Override path. If None, returns default.

    Returns:
        Path to config file.
    """
    if custom_path is not None:
        return custom_path
    return Path.home() / ".config" / "axwatch" / "config.yaml"


def _default_file_reader(path: Path) -> dict[str, Any] | None:
    """Default file reader that loads YAML from disk."""
    if not path.exists():
        return None
    try:
        content = path.read_text()
        if not content.strip():
            return None
        return yaml.safe_load(content)
    except yaml.YAMLError:
        return None


def _app_list(data: dict[str, Any], snake: str, camel: str) -> tuple[str, ...]:
    """Read an app list under either its snake_case or camelCase key."""
    value = data.get(snake, data.get(camel))
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)


def load_config(
    path: Path | None = None,
    file_reader: Callable[[Path], dict[str, Any] | None] | None = None,
) -> Config:
    """Load configuration from file.

    Args:
        path: Path to config file. If None, uses default path.
        file_reader: Injectable file reader for testing.

    Returns:
        Config object with values from file or defaults.
    """
    config_path = get_config_path(path)
    reader = file_reader or _default_file_reader

    data = reader(config_path)

    if not isinstance(data, dict):
        return Config()

    # Parse notifications config section
    notifications_data = data.get("notifications") or {}
    notifications_config = NotificationConfig(
        enabled=bool(notifications_data.get("enabled", NotificationConfig.enabled)),
        app_whitelist=_app_list(notifications_data, "app_whitelist", "appWhitelist"),
        app_blacklist=_app_list(notifications_data, "app_blacklist", "appBlacklist"),
        diff_apps=_app_list(notifications_data, "diff_apps", "diffApps"),
    )

    # Parse snapshot config section
    snapshot_data = data.get("snapshot") or {}
    snapshot_config = SnapshotConfig(
        enabled=bool(snapshot_data.get("enabled", SnapshotConfig.enabled)),
        poll_interval=float(
            snapshot_data.get("poll_interval", SnapshotConfig.poll_interval)
        ),
        darwin_timeout=float(
            snapshot_data.get("darwin_timeout", SnapshotConfig.darwin_timeout)
        ),
        win32_timeout=float(
            snapshot_data.get("win32_timeout", SnapshotConfig.win32_timeout)
        ),
    )

    return Config(
        log_level=data.get("log_level", Config.log_level),
        log_file=data.get("log_file", Config.log_file),
        native_dir=data.get("native_dir", Config.native_dir),
        notifications=notifications_config,
        snapshot=snapshot_config,
    )
