"""Message sinks receiving formatted context for the agent."""

from typing import Protocol

import click

NOTIFICATION_CATEGORY = "notification"
SCREEN_CATEGORY = "screen"


class MessageSink(Protocol):
    """Destination for formatted messages. Fire-and-forget."""

    def push(self, category: str, text: str) -> None:
        """Deliver a message tagged with a category."""
        ...


class ConsoleSink:
    """Sink that echoes messages to stdout."""

    def push(self, category: str, text: str) -> None:
        click.echo(f"[{category}] {text}")
