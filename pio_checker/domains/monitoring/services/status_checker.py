"""Single-record check: fetch, store, diff and notify."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from pio_checker.domains.monitoring.core.change_detection import detect_changes
from pio_checker.domains.monitoring.core.report_builder import (
    APP_NAME,
    detailed_report,
    error_report,
    summary_message,
)
from pio_checker.domains.monitoring.core.snapshot_builder import build_snapshot
from pio_checker.models.run_result import RecordRunResult, RunOutcome, RunState

if TYPE_CHECKING:
    from collections.abc import Callable

    from pio_checker.domains.monitoring.repositories.snapshot_repository import (
        SnapshotRepository,
    )
    from pio_checker.models.diff_result import DiffResult
    from pio_checker.models.record import RecordConfig
    from pio_checker.models.report import Report
    from pio_checker.models.snapshot import Snapshot
    from pio_checker.services.protocols import (
        NotifierProtocol,
        PageFetcherProtocol,
        ReportMailerProtocol,
    )

logger = structlog.get_logger(__name__)

FIRST_RUN_TITLE = f"{APP_NAME} - First Run"
NO_CHANGES_TITLE = f"{APP_NAME} - No Changes"
CHANGES_TITLE = f"{APP_NAME} - Changes Detected!"
ERROR_TITLE = f"{APP_NAME} - Error"

FIRST_RUN_MESSAGE = "Baseline data has been saved. Future runs will detect changes."
NO_CHANGES_MESSAGE = "Your application status remains unchanged."


def _utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class StatusChecker:
    """Runs one check for one record and always ends with a notification.

    The checker tracks its own RunState. Calling ``run`` while a previous
    call is still active returns an ``already_running`` result.
    """

    def __init__(
        self,
        record: RecordConfig,
        fetcher: PageFetcherProtocol,
        snapshot_repo: SnapshotRepository,
        notifier: NotifierProtocol,
        mailer: ReportMailerProtocol | None = None,
        differ: Callable[[Snapshot, Snapshot], DiffResult] = detect_changes,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.record = record
        self.fetcher = fetcher
        self.snapshot_repo = snapshot_repo
        self.notifier = notifier
        self.mailer = mailer
        self.differ = differ
        self.clock = clock
        self.state = RunState.IDLE

    @property
    def record_id(self) -> str:
        return self.record.record_id

    def _transition(self, state: RunState) -> None:
        logger.debug("run_state", record_id=self.record_id, old=self.state, new=state)
        self.state = state

    def run(self) -> RecordRunResult:
        """Check the record once. Failures are reported, never raised."""
        if self.state.is_active:
            logger.warning("check_already_running", record_id=self.record_id, state=self.state)
            return RecordRunResult(
                record_id=self.record_id,
                outcome=RunOutcome.ALREADY_RUNNING,
                error="A check for this record is already running",
            )

        logger.info("check_starting", record_id=self.record_id)
        self._transition(RunState.FETCHING)
        try:
            self._check()
        except Exception as exc:
            self._transition(RunState.ERROR)
            message = str(exc) or type(exc).__name__
            logger.error(
                "record_check_failed",
                record_id=self.record_id,
                error_type=type(exc).__name__,
                error=message,
            )
            self._notify(ERROR_TITLE, f"An error occurred: {message}")
            self._send_report(error_report(self.record_id, message))
            return RecordRunResult(
                record_id=self.record_id,
                outcome=RunOutcome.ERROR,
                error=message,
            )

        self._transition(RunState.DONE)
        return RecordRunResult(record_id=self.record_id, outcome=RunOutcome.SUCCESS)

    def _check(self) -> None:
        previous = self.snapshot_repo.latest(self.record_id)

        raw = self.fetcher.fetch(self.record)
        current = build_snapshot(
            raw,
            record_id=self.record_id,
            captured_at=self.clock(),
            element_text=self.record.element_text,
        )
        self.snapshot_repo.append(current)

        if previous is None:
            self._transition(RunState.REPORTING)
            logger.info("baseline_saved", record_id=self.record_id)
            self._notify(FIRST_RUN_TITLE, FIRST_RUN_MESSAGE)
            return

        self._transition(RunState.COMPARING)
        diff = self.differ(previous, current)

        self._transition(RunState.REPORTING)
        if not diff.has_changes:
            logger.info("no_changes_detected", record_id=self.record_id)
            self._notify(NO_CHANGES_TITLE, NO_CHANGES_MESSAGE)
            return

        logger.info(
            "changes_detected",
            record_id=self.record_id,
            categories=[category.value for category in diff.categories],
        )
        self._notify(CHANGES_TITLE, summary_message(diff))
        self._send_report(detailed_report(diff, previous, current, self.record_id))

    def _notify(self, title: str, message: str) -> None:
        try:
            self.notifier.notify(f"{title} - {self.record_id}", message)
        except Exception as exc:
            logger.warning(
                "notification_failed",
                record_id=self.record_id,
                error_type=type(exc).__name__,
                error=str(exc),
            )

    def _send_report(self, report: Report) -> None:
        if self.mailer is None:
            logger.info("email_disabled", record_id=self.record_id)
            return
        try:
            self.mailer.send_report(report.subject, report.html_body)
        except Exception as exc:
            logger.warning(
                "email_failed",
                record_id=self.record_id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
