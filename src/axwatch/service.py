"""Watch service - runs the snapshot watcher and notification pipeline."""

import asyncio
import logging
import signal
from typing import Optional

from axwatch.config import Config
from axwatch.notifications.pipeline import NotificationPipeline
from axwatch.registry import ProviderRegistry, current_platform, default_registry
from axwatch.sink import MessageSink
from axwatch.snapshot.watcher import SnapshotWatcher

logger = logging.getLogger(__name__)


class WatchService:
    """Orchestrates screen diffing and notification forwarding.

    Responsibilities:
    - Resolve platform implementations through the registry
    - Start the notification pipeline and snapshot watcher
    - Run until stopped or signalled
    - Shut both components down
    """

    def __init__(
        self,
        config: Config,
        sink: MessageSink,
        registry: Optional[ProviderRegistry] = None,
        platform: Optional[str] = None,
    ):
        """Initialize WatchService.

        Args:
            config: axwatch configuration.
            sink: Destination for screen and notification messages.
            registry: Platform registry (defaults to the built-in one).
            platform: Platform identifier (defaults to the running platform).
        """
        self._config = config
        self._sink = sink
        self._registry = registry or default_registry(config)
        self._platform = platform or current_platform()
        self._running = False

        self._pipeline = NotificationPipeline(
            config.notifications, self._registry, sink, self._platform
        )
        self._watcher: Optional[SnapshotWatcher] = None

    @property
    def pipeline(self) -> NotificationPipeline:
        return self._pipeline

    @property
    def watcher(self) -> Optional[SnapshotWatcher]:
        return self._watcher

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start both components. Unavailable components stay inactive."""
        logger.info("Starting watch service on %s...", self._platform)

        await self._pipeline.start()

        if self._config.snapshot.enabled:
            try:
                source = self._registry.snapshot_source(self._platform)
            except Exception as e:
                logger.warning("No snapshot source: %s", e)
            else:
                self._watcher = SnapshotWatcher(
                    source,
                    self._sink,
                    interval=self._config.snapshot.poll_interval,
                    diff_apps=self._config.notifications.diff_apps,
                )
                await self._watcher.start()

        self._running = True
        logger.info("Watch service started")

    async def run_forever(self) -> None:
        """Run until stop() is called or a shutdown signal arrives."""
        if not self._running:
            await self.start()

        self._setup_signals()
        try:
            while self._running:
                await asyncio.sleep(1)
        except asyncio.CancelledError:
            pass
        finally:
            await self._shutdown()

    async def stop(self) -> None:
        """Request shutdown."""
        self._running = False

    def _setup_signals(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(
                    sig,
                    lambda: asyncio.create_task(self.stop()),
                )
            except (NotImplementedError, RuntimeError):
                # Windows event loops do not support signal handlers
                pass

    async def _shutdown(self) -> None:
        """Stop both components."""
        logger.info("Shutting down watch service...")
        self._running = False

        if self._watcher:
            await self._watcher.stop()

        await self._pipeline.stop()

        logger.info("Watch service shutdown complete")
