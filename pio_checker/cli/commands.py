"""CLI command implementations for the PIO application status checker."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pio_checker.core.errors import AccountsFileError, MonitorError
from pio_checker.models.config import Config
from pio_checker.models.run_result import RunOutcome
from pio_checker.utils.logger import configure_logging

if TYPE_CHECKING:
    from pio_checker.domains.monitoring.services.batch_checker import MultiRecordChecker
    from pio_checker.domains.monitoring.services.status_checker import StatusChecker
    from pio_checker.models.record import RecordConfig
    from pio_checker.models.run_result import RecordRunResult
    from pio_checker.services.email_reporter import EmailReporter


def _get_config() -> Config:
    """Load configuration from environment and .env file."""
    return Config()


def _get_mailer(config: Config) -> EmailReporter | None:
    """Email reporter, or None when Gmail credentials are not configured."""
    if not config.email_enabled:
        click.echo(
            "[WARNING] Gmail credentials not found in environment variables. "
            "Email notifications will be disabled."
        )
        return None

    from pio_checker.services.email_reporter import EmailReporter

    return EmailReporter(
        sender=config.mail or "",
        password=config.mail_password or "",
        smtp_host=config.smtp_host,
        smtp_port=config.smtp_port,
    )


def _build_checker(config: Config, headless: bool | None = None) -> MultiRecordChecker:
    """Wire repositories, fetcher and notifiers into a multi-record checker."""
    from pio_checker.domains.monitoring.repositories.snapshot_repository import (
        SnapshotRepository,
    )
    from pio_checker.domains.monitoring.services.batch_checker import MultiRecordChecker
    from pio_checker.domains.monitoring.services.status_checker import StatusChecker
    from pio_checker.repositories.account_repository import AccountRepository
    from pio_checker.services.notifier import ConsoleNotifier
    from pio_checker.services.page_fetcher import PlaywrightPageFetcher

    records = AccountRepository(config.accounts_file, headless=headless).load_all()
    snapshot_repo = SnapshotRepository(config.data_dir)
    fetcher = PlaywrightPageFetcher.from_config(config)
    notifier = ConsoleNotifier(bell=True)
    mailer = _get_mailer(config)

    def make_checker(record: RecordConfig) -> StatusChecker:
        return StatusChecker(record, fetcher, snapshot_repo, notifier, mailer)

    return MultiRecordChecker(
        records,
        make_checker,
        delay_seconds=config.inter_record_delay_seconds,
    )


def _print_results(results: list[RecordRunResult]) -> None:
    """Print the per-record run summary."""
    click.echo("\n--- Summary ---")
    for result in results:
        tag = "[SUCCESS]" if result.outcome == RunOutcome.SUCCESS else "[ERROR]"
        click.echo(f"{tag} {result.record_id}: {result.outcome.value}")
        if result.error:
            click.echo(f"   Error: {result.error}")


@click.command()
@click.option("--record", "record_id", default=None, help="Check only this account login")
@click.option("--headed", is_flag=True, help="Show the browser window")
def check(record_id: str | None, headed: bool) -> None:
    """Check application status for all configured accounts."""
    config = _get_config()
    configure_logging(config.log_level)

    try:
        checker = _build_checker(config, headless=False if headed else config.headless)
        if record_id:
            click.echo(f"[INFO] Checking single account: {record_id}")
            results = [checker.run_single(record_id)]
        else:
            click.echo(f"[INFO] Starting checks for {len(checker.records)} account(s)...")
            results = checker.run_all()
    except MonitorError as exc:
        raise click.ClickException(str(exc)) from exc

    _print_results(results)
    if any(result.outcome != RunOutcome.SUCCESS for result in results):
        raise SystemExit(1)


@click.command()
@click.argument("record_id")
def history(record_id: str) -> None:
    """List stored snapshots for an account, oldest first."""
    config = _get_config()
    configure_logging(config.log_level)

    from pio_checker.domains.monitoring.repositories.snapshot_repository import (
        SnapshotRepository,
    )

    entries = SnapshotRepository(config.data_dir).history(record_id)
    if not entries:
        click.echo(f"[INFO] No snapshots stored for {record_id}")
        return

    click.echo(f"[INFO] {len(entries)} snapshot(s) for {record_id}:")
    for path in entries:
        click.echo(f"  {path}")


@click.command()
@click.option("--no-initial-run", is_flag=True, help="Wait for the first trigger")
def schedule(no_initial_run: bool) -> None:
    """Run checks periodically according to settings.json."""
    config = _get_config()
    configure_logging(config.log_level)

    from pio_checker.services.scheduler import (
        CheckScheduler,
        describe_schedule,
        load_schedule_settings,
    )

    try:
        settings = load_schedule_settings(config.settings_file)
        headless = config.headless if settings.headless is None else settings.headless
        checker = _build_checker(config, headless=headless)
    except (ValueError, AccountsFileError) as exc:
        raise click.ClickException(str(exc)) from exc

    if not settings.enabled:
        click.echo(f"[INFO] Scheduling is disabled in {config.settings_file}")
        return

    def job() -> None:
        _print_results(checker.run_all())

    click.echo(f"[INFO] Scheduler started: {describe_schedule(settings.schedule)}")
    click.echo("[INFO] Press Ctrl+C to exit")
    CheckScheduler(job, settings).start(run_immediately=not no_initial_run)


@click.command()
def test_notification() -> None:
    """Show a sample notification."""
    from pio_checker.services.notifier import ConsoleNotifier

    ConsoleNotifier(bell=True).notify(
        "PIO Checker - Test",
        "If you can see this, notifications are working.",
    )


@click.command()
def test_email() -> None:
    """Send a sample change report to the configured mailbox."""
    config = _get_config()
    configure_logging(config.log_level)

    mailer = _get_mailer(config)
    if mailer is None:
        raise click.ClickException("Set MAIL and PASS to send test emails")

    from datetime import UTC, datetime

    from pio_checker.domains.monitoring.core.change_detection import detect_changes
    from pio_checker.domains.monitoring.core.report_builder import detailed_report
    from pio_checker.models.snapshot import Snapshot

    now = datetime.now(UTC)
    previous = Snapshot(
        record_id="test",
        captured_at=now,
        source_url="https://pio-przybysz.duw.pl/szczegoly-wniosku",
        main_text="Status: W trakcie",
        tables=[[["Etap", "Data"], ["Złożenie wniosku", "01.02.2024"]]],
        numeric_tokens=["01.02.2024"],
        element_text="TEST/123",
    )
    current = previous.model_copy(
        update={
            "main_text": "Status: Zakończony",
            "tables": ((("Etap", "Data"), ("Decyzja", "15.03.2024")),),
            "numeric_tokens": ("15.03.2024",),
        }
    )
    report = detailed_report(detect_changes(previous, current), previous, current, "test")

    try:
        mailer.send_report(f"[TEST] {report.subject}", report.html_body)
    except MonitorError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"[SUCCESS] Test email sent to {config.mail}")
