"""Per-platform notification providers.

macOS and Windows run a native watcher process that prints one JSON object
per line on stdout. Linux has no provider yet and always reports itself as
unavailable.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

from .types import NotificationCallback, NotificationEvent, Platform

logger = logging.getLogger(__name__)

RESTART_DELAY = 5.0  # seconds

LineParser = Callable[[dict[str, Any]], Optional[NotificationEvent]]


def parse_darwin_event(data: dict[str, Any]) -> Optional[NotificationEvent]:
    """Build an event from a macOS notif-watch line."""
    bundle_id = data.get("bundleId")
    return NotificationEvent(
        id=str(data.get("id", "")),
        app_name=str(data.get("appName") or ""),
        bundle_id=str(bundle_id) if bundle_id is not None else None,
        title=str(data.get("title", "")),
        body=str(data.get("body", "")),
        timestamp=float(data.get("timestamp", 0)),
    )


def parse_win32_event(data: dict[str, Any]) -> Optional[NotificationEvent]:
    """Build an event from a Windows notif-watch line."""
    if data.get("type") != "notification":
        return None
    return NotificationEvent(
        id=str(data.get("id", "")),
        app_name=data.get("appName") or "",
        title=data.get("title") or "",
        body=data.get("body") or "",
        timestamp=float(data.get("timestamp", 0)),
    )


class StreamingNotificationProvider:
    """Notification provider backed by a long-running watcher process.

    The process is respawned after RESTART_DELAY if it exits while the
    provider is started.

    Usage:
        provider = StreamingNotificationProvider(
            "darwin", binary, [str(binary)], parse_darwin_event
        )
        if await provider.is_available():
            await provider.start(on_notification)
    """

    def __init__(
        self,
        platform: Platform,
        helper_path: Path,
        command: list[str],
        parse_event: LineParser,
        restart_delay: float = RESTART_DELAY,
    ):
        """Initialize StreamingNotificationProvider.

        Args:
            platform: Platform identifier, used in log messages.
            helper_path: Binary or script that must exist.
            command: Full command line to spawn the watcher.
            parse_event: Turns a decoded JSON line into an event.
            restart_delay: Seconds to wait before respawning.
        """
        self.platform = platform
        self._helper_path = helper_path
        self._command = command
        self._parse_event = parse_event
        self._restart_delay = restart_delay
        self._process: Optional[asyncio.subprocess.Process] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._on_notification: Optional[NotificationCallback] = None
        self._stopped = True

    @property
    def is_running(self) -> bool:
        """True while the watcher process is alive."""
        return self._process is not None and self._process.returncode is None

    async def is_available(self) -> bool:
        """True if the watcher binary or script exists."""
        return self._helper_path.exists()

    async def start(self, on_notification: NotificationCallback) -> None:
        """Spawn the watcher and begin delivering events."""
        self._on_notification = on_notification
        self._stopped = False
        self._reader_task = asyncio.create_task(self._run_loop())

    async def stop(self) -> None:
        """Kill the watcher and stop delivering events."""
        self._stopped = True
        self._on_notification = None

        if self._process and self._process.returncode is None:
            try:
                self._process.kill()
            except ProcessLookupError:
                pass

        if self._reader_task:
            self._reader_task.cancel()
            try:
                await self._reader_task
            except asyncio.CancelledError:
                pass
            self._reader_task = None

        if self._process:
            await self._process.wait()
            self._process = None

    async def _run_loop(self) -> None:
        """Spawn, read until exit, respawn while not stopped."""
        while not self._stopped:
            if not self._helper_path.exists():
                logger.error(
                    "[%s] notification watcher not found: %s",
                    self.platform,
                    self._helper_path,
                )
                return

            try:
                self._process = await asyncio.create_subprocess_exec(
                    *self._command,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as e:
                logger.error("[%s] failed to spawn watcher: %s", self.platform, e)
                return

            logger.info("[%s] notification watcher started", self.platform)
            stderr_task = asyncio.create_task(self._log_stderr(self._process))
            try:
                await self._read_stdout(self._process)
                code = await self._process.wait()
            finally:
                stderr_task.cancel()

            logger.info(
                "[%s] notification watcher exited with code %s", self.platform, code
            )
            self._process = None

            if self._stopped:
                break
            logger.info(
                "[%s] restarting in %.1fs...", self.platform, self._restart_delay
            )
            await asyncio.sleep(self._restart_delay)

    async def _read_stdout(self, process: asyncio.subprocess.Process) -> None:
        """Dispatch each stdout line until EOF."""
        if process.stdout is None:
            return
        while True:
            raw = await process.stdout.readline()
            if not raw:
                break
            self.handle_line(raw.decode("utf-8", errors="replace"))

    async def _log_stderr(self, process: asyncio.subprocess.Process) -> None:
        """Forward watcher stderr to the log."""
        if process.stderr is None:
            return
        while True:
            raw = await process.stderr.readline()
            if not raw:
                break
            message = raw.decode("utf-8", errors="replace").strip()
            if message:
                logger.warning("[%s] stderr: %s", self.platform, message)

    def handle_line(self, line: str) -> None:
        """Parse one watcher output line and deliver it if it is an event."""
        line = line.strip()
        if not line:
            return

        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            logger.error("[%s] failed to parse: %s", self.platform, line[:200])
            return

        if not isinstance(data, dict):
            logger.error("[%s] unexpected line: %s", self.platform, line[:200])
            return

        if data.get("error"):
            logger.error("[%s] error: %s", self.platform, data["error"])
            return

        if data.get("status"):
            logger.info(
                "[%s] %s (pid: %s)", self.platform, data["status"], data.get("pid")
            )
            return

        try:
            event = self._parse_event(data)
        except (TypeError, ValueError) as e:
            logger.error("[%s] malformed event: %s", self.platform, e)
            return

        if event is not None and self._on_notification is not None:
            self._on_notification(event)


class LinuxNotificationProvider:
    """Placeholder provider; Linux notification capture is not implemented."""

    platform: Platform = "linux"

    async def is_available(self) -> bool:
        return False

    async def start(self, on_notification: NotificationCallback) -> None:
        logger.info("[linux] notification provider not implemented")

    async def stop(self) -> None:
        pass


def macos_provider(native_dir: Path) -> StreamingNotificationProvider:
    """Provider running the macOS notif-watch binary."""
    binary = native_dir / "macos" / "notif-watch"
    return StreamingNotificationProvider(
        "darwin", binary, [str(binary)], parse_darwin_event
    )


def windows_provider(native_dir: Path) -> StreamingNotificationProvider:
    """Provider running the Windows notif-watch PowerShell script."""
    script = native_dir / "windows" / "notif-watch.ps1"
    return StreamingNotificationProvider(
        "win32", script, powershell_command(script), parse_win32_event
    )


def powershell_command(script: Path) -> list[str]:
    """Command line running a PowerShell script non-interactively."""
    return [
        "powershell.exe",
        "-NoProfile",
        "-NonInteractive",
        "-ExecutionPolicy",
        "Bypass",
        "-File",
        str(script),
    ]
