"""Console notifier for short-form run alerts."""

from __future__ import annotations

import click
import structlog

from pio_checker.core.errors import NotificationDispatchError

logger = structlog.get_logger(__name__)


class ConsoleNotifier:
    """Prints alerts to the terminal running the checker."""

    def __init__(self, bell: bool = False) -> None:
        self.bell = bell

    def notify(self, title: str, message: str) -> None:
        try:
            click.echo(f"\n[{title}] {message}")
            if self.bell:
                click.echo("\a", nl=False)
        except (OSError, ValueError) as exc:
            raise NotificationDispatchError(f"Could not display notification: {exc}") from exc
        logger.info("notification_sent", title=title)
