"""Periodic snapshot diffing of the foreground application."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from axwatch.sink import MessageSink, SCREEN_CATEGORY

from .capture import SnapshotSource
from .diff import compute_diff
from .noise import filter_genuine
from .types import AXDiff, AXSnapshot

logger = logging.getLogger(__name__)


@dataclass
class WatchResult:
    """Outcome of one diffed tick."""

    snapshot: AXSnapshot
    diff: AXDiff
    genuine: list[str]


def format_screen_update(app_name: str, lines: Sequence[str]) -> str:
    """Format genuinely new lines as a single message block."""
    return f"[App: {app_name}] [Screen update]\n" + "\n".join(lines)


class SnapshotWatcher:
    """Polls a snapshot source and reports genuinely new screen content.

    Only the latest snapshot is kept. A change of foreground application
    resets the baseline instead of producing a diff.

    Usage:
        watcher = SnapshotWatcher(source, sink, interval=1.0)
        await watcher.start()
        ...
        await watcher.stop()
    """

    def __init__(
        self,
        source: SnapshotSource,
        sink: MessageSink,
        interval: float = 1.0,
        diff_apps: Sequence[str] = (),
    ):
        """Initialize SnapshotWatcher.

        Args:
            source: Snapshot source for the current platform.
            sink: Destination for screen updates.
            interval: Seconds between captures.
            diff_apps: App names or bundle ids to diff (empty = all).
        """
        self._source = source
        self._sink = sink
        self._interval = interval
        self._diff_apps = {name.lower() for name in diff_apps}
        self._previous: Optional[AXSnapshot] = None
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def previous(self) -> Optional[AXSnapshot]:
        """Baseline snapshot for the next diff."""
        return self._previous

    @property
    def is_running(self) -> bool:
        """Whether the polling loop is active."""
        return self._running

    def is_tracked(self, snapshot: AXSnapshot) -> bool:
        """True if the snapshot's app is subject to diffing."""
        if not self._diff_apps:
            return True
        return (
            snapshot.app_name.lower() in self._diff_apps
            or snapshot.bundle_id.lower() in self._diff_apps
        )

    async def tick(self) -> Optional[WatchResult]:
        """Capture once and report genuinely new lines.

        Returns:
            WatchResult when a diff was computed, None otherwise.
        """
        current = await self._source.capture()
        if current is None:
            return None

        previous = self._previous
        self._previous = current

        if previous is None:
            logger.debug(
                "Baseline snapshot: %s (%d lines)",
                current.app_name,
                len(current.lines),
            )
            return None

        if previous.bundle_id != current.bundle_id:
            logger.info(
                "Foreground app switched: %s -> %s",
                previous.app_name,
                current.app_name,
            )
            return None

        if not self.is_tracked(current):
            return None

        diff = compute_diff(previous.lines, current.lines)
        if diff.is_empty:
            return WatchResult(snapshot=current, diff=diff, genuine=[])

        genuine = filter_genuine(diff)
        logger.debug(
            "Change in %s: +%d -%d, %d genuine",
            current.app_name,
            len(diff.added),
            len(diff.removed),
            len(genuine),
        )

        if genuine:
            try:
                self._sink.push(
                    SCREEN_CATEGORY, format_screen_update(current.app_name, genuine)
                )
            except Exception as e:
                logger.error("Failed to push screen update: %s", e)

        return WatchResult(snapshot=current, diff=diff, genuine=genuine)

    async def start(self) -> None:
        """Start the polling loop."""
        if self._running:
            return

        if not await self._source.is_available():
            logger.info("Snapshot capture not available on this platform")
            return

        self._running = True
        self._task = asyncio.create_task(self._watch_loop())
        logger.info("Snapshot watcher started (interval=%.1fs)", self._interval)

    async def stop(self) -> None:
        """Stop the polling loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Snapshot watcher stopped")

    async def _watch_loop(self) -> None:
        """Capture, diff, sleep; one capture outstanding at a time."""
        while self._running:
            try:
                await self.tick()
            except Exception as e:
                logger.warning("Snapshot tick failed: %s", e)
            await asyncio.sleep(self._interval)
