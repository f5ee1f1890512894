"""Notification filtering and forwarding pipeline."""

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Optional, Protocol

from axwatch.sink import MessageSink, NOTIFICATION_CATEGORY

from .types import NotificationConfig, NotificationEvent, NotificationProvider

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """Lifecycle state of a NotificationPipeline."""

    STOPPED = "stopped"
    STARTED = "started"


class ProviderLookup(Protocol):
    """Resolves the notification provider for a platform identifier."""

    def notification_provider(self, platform: str) -> NotificationProvider:
        ...


def _matches(event: NotificationEvent, names: tuple[str, ...]) -> bool:
    """True if the event's app name or bundle id equals any name, ignoring case."""
    app_name = event.app_name.lower()
    bundle_id = event.bundle_id.lower() if event.bundle_id else None
    for name in names:
        name = name.lower()
        if app_name == name or (bundle_id is not None and bundle_id == name):
            return True
    return False


def passes_filter(event: NotificationEvent, config: NotificationConfig) -> bool:
    """Apply the app deny list, then the app allow list.

    The deny list takes precedence: an app on both lists is rejected.
    """
    if config.app_blacklist and _matches(event, config.app_blacklist):
        return False
    if config.app_whitelist and not _matches(event, config.app_whitelist):
        return False
    return True


def format_notification(event: NotificationEvent) -> str:
    """Format an event as a single text block for the agent."""
    local_time = datetime.fromtimestamp(event.timestamp).strftime("%c")
    return (
        f"[App: {event.app_name}] [Time: {local_time}] [Title: {event.title}]\n"
        f"{event.body}"
    )


class NotificationPipeline:
    """Subscribes to a platform provider, filters and forwards notifications.

    Provider callbacks only enqueue; a single consumer task filters, formats
    and pushes, so delivery stays ordered even if the provider calls back
    concurrently.

    Usage:
        pipeline = NotificationPipeline(config, registry, sink, "darwin")
        await pipeline.start()
        ...
        await pipeline.stop()
    """

    def __init__(
        self,
        config: NotificationConfig,
        registry: ProviderLookup,
        sink: MessageSink,
        platform: str,
    ):
        """Initialize NotificationPipeline.

        Args:
            config: Filtering configuration, fixed for the pipeline's lifetime.
            registry: Resolves the provider for ``platform``.
            sink: Destination for accepted notifications.
            platform: Platform identifier ("darwin", "win32", "linux").
        """
        self._config = config
        self._registry = registry
        self._sink = sink
        self._platform = platform
        self._state = PipelineState.STOPPED
        self._provider: Optional[NotificationProvider] = None
        self._queue: asyncio.Queue[NotificationEvent] = asyncio.Queue()
        self._consumer_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> PipelineState:
        """Current lifecycle state."""
        return self._state

    @property
    def config(self) -> NotificationConfig:
        return self._config

    async def start(self) -> None:
        """Subscribe to the platform provider.

        Never raises; if the provider is unavailable the pipeline stays
        stopped.
        """
        if self._state == PipelineState.STARTED:
            return

        if not self._config.enabled:
            logger.info("Notification pipeline disabled by config")
            return

        try:
            provider = self._registry.notification_provider(self._platform)
            if not await provider.is_available():
                logger.info(
                    "Notification provider not available on %s", self._platform
                )
                return

            self._consumer_task = asyncio.create_task(self._consume_loop())
            await provider.start(self._enqueue)
        except Exception as e:
            logger.error("Notification pipeline failed to start: %s", e)
            await self._cancel_consumer()
            return

        self._provider = provider
        self._state = PipelineState.STARTED
        logger.info("Notification pipeline started on %s", self._platform)

    async def stop(self) -> None:
        """Unsubscribe from the provider. No-op if already stopped."""
        if self._state == PipelineState.STOPPED:
            return

        self._state = PipelineState.STOPPED
        provider, self._provider = self._provider, None
        if provider is not None:
            try:
                await provider.stop()
            except Exception as e:
                logger.warning("Notification provider stop failed: %s", e)

        await self._cancel_consumer()
        logger.info("Notification pipeline stopped")

    async def join(self) -> None:
        """Wait until every queued event has been handled."""
        await self._queue.join()

    def handle_notification(self, event: NotificationEvent) -> bool:
        """Filter, format and forward one event.

        Returns:
            True if the event was pushed to the sink.
        """
        if not passes_filter(event, self._config):
            logger.debug("Notification filtered out: app=%s", event.app_name)
            return False

        try:
            self._sink.push(NOTIFICATION_CATEGORY, format_notification(event))
        except Exception as e:
            logger.error("Failed to push notification: %s", e)
            return False

        logger.debug("Notification forwarded: app=%s", event.app_name)
        return True

    def _enqueue(self, event: NotificationEvent) -> None:
        """Provider callback."""
        if self._consumer_task is None:
            return
        self._queue.put_nowait(event)

    async def _consume_loop(self) -> None:
        """Handle queued events one at a time."""
        while True:
            event = await self._queue.get()
            try:
                self.handle_notification(event)
            except Exception as e:
                logger.error("Failed to handle notification: %s", e)
            finally:
                self._queue.task_done()

    async def _cancel_consumer(self) -> None:
        if self._consumer_task is None:
            return
        self._consumer_task.cancel()
        try:
            await self._consumer_task
        except asyncio.CancelledError:
            pass
        self._consumer_task = None

        # Drop events that were never handled
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
