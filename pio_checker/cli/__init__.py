"""CLI entry point for the PIO application status checker."""

from __future__ import annotations

import click

from pio_checker.cli.commands import (
    check,
    history,
    schedule,
    test_email,
    test_notification,
)


@click.group()
def cli() -> None:
    """PIO application status checker."""


cli.add_command(check)
cli.add_command(history)
cli.add_command(schedule)
cli.add_command(test_notification)
cli.add_command(test_email)
