"""Tests for the platform registry."""

import sys
from unittest.mock import MagicMock, patch

import pytest

from axwatch.config import Config, SnapshotConfig
from axwatch.errors import UnsupportedPlatformError
from axwatch.notifications.providers import (
    LinuxNotificationProvider,
    StreamingNotificationProvider,
)
from axwatch.registry import ProviderRegistry, current_platform, default_registry
from axwatch.snapshot.capture import CommandSnapshotSource, UnavailableSnapshotSource


class TestProviderRegistry:
    """Tests for ProviderRegistry."""

    def test_register_and_lookup(self):
        registry = ProviderRegistry()
        provider, source = MagicMock(), MagicMock()
        registry.register("darwin", lambda: provider, lambda: source)

        assert registry.notification_provider("darwin") is provider
        assert registry.snapshot_source("darwin") is source
        assert registry.platforms() == ["darwin"]

    def test_unknown_platform_raises(self):
        registry = ProviderRegistry()

        with pytest.raises(UnsupportedPlatformError):
            registry.notification_provider("sunos")
        with pytest.raises(UnsupportedPlatformError):
            registry.snapshot_source("sunos")

    def test_register_replaces(self):
        registry = ProviderRegistry()
        registry.register("linux", lambda: "old", lambda: None)
        registry.register("linux", lambda: "new", lambda: None)

        assert registry.notification_provider("linux") == "new"

    def test_lookups_build_fresh_instances(self):
        registry = default_registry(Config())
        assert registry.notification_provider("darwin") is not registry.notification_provider("darwin")

    def test_registries_are_independent(self):
        """No state is shared between registry instances."""
        first = ProviderRegistry()
        first.register("darwin", MagicMock, MagicMock)

        assert ProviderRegistry().platforms() == []


class TestDefaultRegistry:
    """Tests for the built-in platform wiring."""

    def test_all_platforms_registered(self):
        assert default_registry(Config()).platforms() == ["darwin", "linux", "win32"]

    def test_darwin(self, tmp_path):
        registry = default_registry(Config(native_dir=str(tmp_path)))

        provider = registry.notification_provider("darwin")
        source = registry.snapshot_source("darwin")

        assert isinstance(provider, StreamingNotificationProvider)
        assert isinstance(source, CommandSnapshotSource)
        assert source.timeout == 5.0
        assert source._command == [str(tmp_path / "macos" / "notif-watch"), "--snapshot"]

    def test_win32_uses_configured_timeout(self, tmp_path):
        config = Config(
            native_dir=str(tmp_path), snapshot=SnapshotConfig(win32_timeout=30.0)
        )
        source = default_registry(config).snapshot_source("win32")

        assert isinstance(source, CommandSnapshotSource)
        assert source.timeout == 30.0
        assert source._command[0] == "powershell.exe"
        assert source._command[-1] == str(tmp_path / "windows" / "ax-snapshot.ps1")

    def test_linux_is_unavailable_stub(self):
        registry = default_registry(Config())

        assert isinstance(registry.notification_provider("linux"), LinuxNotificationProvider)
        assert isinstance(registry.snapshot_source("linux"), UnavailableSnapshotSource)


class TestCurrentPlatform:
    @pytest.mark.parametrize(
        "value,expected",
        [("darwin", "darwin"), ("win32", "win32"), ("linux", "linux"), ("freebsd14", "freebsd14")],
    )
    def test_maps_sys_platform(self, value, expected):
        with patch.object(sys, "platform", value):
            assert current_platform() == expected
