"""Snapshot capture via per-platform native helpers.

The native helper prints one JSON object on stdout:
``{"appName": ..., "bundleId": ..., "lines": [...]}`` or ``{"error": ...}``.
Every failure is reported to the caller as ``None``.
"""

import asyncio
import json
import logging
import os
import signal
import sys
from pathlib import Path
from typing import Optional, Protocol

from axwatch.errors import CaptureError, CaptureTimeoutError

from .types import AXSnapshot

logger = logging.getLogger(__name__)


class SnapshotSource(Protocol):
    """Produces an accessibility snapshot of the foreground application."""

    async def is_available(self) -> bool:
        """True if captures can succeed on this system."""
        ...

    async def capture(self) -> Optional[AXSnapshot]:
        """Capture a snapshot, or None if unavailable."""
        ...


class ProcessRunnerProtocol(Protocol):
    """Protocol for running a helper process with a hard timeout."""

    async def run(
        self, *args: str, timeout: float
    ) -> tuple[bytes, bytes, int]:
        """Run command and return (stdout, stderr, returncode)."""
        ...


class AsyncProcessRunner:
    """Run helper processes asynchronously with a hard timeout.

    The child gets its own process group on POSIX so a timeout can kill the
    helper together with anything it spawned.
    """

    async def run(
        self, *args: str, timeout: float
    ) -> tuple[bytes, bytes, int]:
        """Run command and return (stdout, stderr, returncode).

        Args:
            *args: Command and arguments to run.
            timeout: Seconds before the process is killed.

        Returns:
            Tuple of (stdout, stderr, returncode).

        Raises:
            CaptureError: If the process cannot be started.
            CaptureTimeoutError: If the process does not exit in time.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=sys.platform != "win32",
            )
        except OSError as e:
            raise CaptureError(f"Failed to start {args[0]}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=timeout
            )
        except asyncio.TimeoutError:
            self._kill(proc)
            await proc.wait()
            raise CaptureTimeoutError(
                f"{args[0]} did not finish within {timeout}s"
            )

        return stdout, stderr, proc.returncode or 0

    @staticmethod
    def _kill(proc: asyncio.subprocess.Process) -> None:
        """Kill the process and, on POSIX, its whole process group."""
        if proc.returncode is not None:
            return
        if sys.platform != "win32":
            try:
                os.killpg(proc.pid, signal.SIGKILL)
                return
            except (ProcessLookupError, PermissionError):
                pass
        try:
            proc.kill()
        except ProcessLookupError:
            pass


def parse_capture_output(stdout: bytes) -> Optional[AXSnapshot]:
    """Parse the helper's JSON response.

    Args:
        stdout: Raw stdout of the helper.

    Returns:
        AXSnapshot, or None if the output is malformed or reports an error.
    """
    try:
        data = json.loads(stdout.decode("utf-8", errors="replace").strip())
    except json.JSONDecodeError:
        logger.debug("Snapshot output is not valid JSON")
        return None

    if not isinstance(data, dict):
        return None

    if "error" in data:
        logger.debug("Snapshot helper reported error: %s", data["error"])
        return None

    lines = data.get("lines")
    if not isinstance(lines, list):
        return None

    return AXSnapshot(
        app_name=str(data.get("appName") or ""),
        bundle_id=str(data.get("bundleId") or ""),
        lines=tuple(str(line) for line in lines),
    )


class CommandSnapshotSource:
    """Snapshot source backed by a native helper executable or script.

    Usage:
        source = CommandSnapshotSource(
            helper_path, [str(helper_path), "--snapshot"], timeout=5.0
        )
        snapshot = await source.capture()
    """

    def __init__(
        self,
        helper_path: Path,
        command: list[str],
        timeout: float,
        runner: Optional[ProcessRunnerProtocol] = None,
    ):
        """Initialize CommandSnapshotSource.

        Args:
            helper_path: File that must exist for captures to be possible.
            command: Full command line to run for one capture.
            timeout: Seconds before a capture is abandoned.
            runner: Process runner (defaults to AsyncProcessRunner).
        """
        self._helper_path = helper_path
        self._command = command
        self._timeout = timeout
        self._runner = runner or AsyncProcessRunner()

    @property
    def timeout(self) -> float:
        """Capture timeout in seconds."""
        return self._timeout

    async def is_available(self) -> bool:
        """True if the helper exists on disk."""
        return self._helper_path.exists()

    async def capture(self) -> Optional[AXSnapshot]:
        """Capture a snapshot of the foreground application.

        Returns:
            AXSnapshot, or None on any failure.
        """
        if not await self.is_available():
            logger.debug("Snapshot helper not found: %s", self._helper_path)
            return None

        try:
            stdout, stderr, returncode = await self._runner.run(
                *self._command, timeout=self._timeout
            )
        except CaptureTimeoutError as e:
            logger.warning("Snapshot capture timed out: %s", e)
            return None
        except CaptureError as e:
            logger.warning("Snapshot capture failed: %s", e)
            return None

        if returncode != 0:
            logger.debug(
                "Snapshot helper exited with code %d: %s",
                returncode,
                stderr.decode("utf-8", errors="replace").strip()[:200],
            )
            return None

        return parse_capture_output(stdout)


class UnavailableSnapshotSource:
    """Snapshot source for platforms without a capture mechanism."""

    def __init__(self, platform: str):
        self._platform = platform

    async def is_available(self) -> bool:
        return False

    async def capture(self) -> Optional[AXSnapshot]:
        logger.debug("Snapshot capture not supported on %s", self._platform)
        return None
