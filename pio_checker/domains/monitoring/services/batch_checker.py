"""Sequential multi-record checking."""

from __future__ import annotations

import threading
import time
from collections import Counter
from typing import TYPE_CHECKING

import structlog

from pio_checker.core.errors import RecordNotFoundError
from pio_checker.models.run_result import RecordRunResult, RunOutcome

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from pio_checker.domains.monitoring.services.status_checker import StatusChecker
    from pio_checker.models.record import RecordConfig

logger = structlog.get_logger(__name__)

DEFAULT_INTER_RECORD_DELAY = 3.0


class MultiRecordChecker:
    """Checks configured records one after another.

    A failure in one record never stops the others. Results come back in
    the order the records were configured. Consecutive records are separated
    by a fixed pause to keep load on the portal low.
    """

    def __init__(
        self,
        records: Sequence[RecordConfig],
        checker_factory: Callable[[RecordConfig], StatusChecker],
        delay_seconds: float = DEFAULT_INTER_RECORD_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.records = list(records)
        self.checker_factory = checker_factory
        self.delay_seconds = delay_seconds
        self.sleep = sleep
        self._checkers: dict[str, StatusChecker] = {}
        self._lock = threading.Lock()

    def _checker_for(self, record: RecordConfig) -> StatusChecker:
        checker = self._checkers.get(record.record_id)
        if checker is None:
            checker = self.checker_factory(record)
            self._checkers[record.record_id] = checker
        return checker

    def _check_record(self, record: RecordConfig) -> RecordRunResult:
        try:
            return self._checker_for(record).run()
        except Exception as exc:
            logger.error("record_check_crashed", record_id=record.record_id, error=str(exc))
            return RecordRunResult(
                record_id=record.record_id,
                outcome=RunOutcome.ERROR,
                error=str(exc) or type(exc).__name__,
            )

    def _run_sequence(self, records: Sequence[RecordConfig]) -> list[RecordRunResult]:
        if not self._lock.acquire(blocking=False):
            logger.warning("checks_already_running", requested=len(records))
            return [
                RecordRunResult(
                    record_id=record.record_id,
                    outcome=RunOutcome.ALREADY_RUNNING,
                    error="Another check run is in progress",
                )
                for record in records
            ]

        try:
            started = time.monotonic()
            counts: Counter[RunOutcome] = Counter()
            results: list[RecordRunResult] = []
            for index, record in enumerate(records):
                if index > 0 and self.delay_seconds > 0:
                    logger.info("waiting_before_next_record", seconds=self.delay_seconds)
                    self.sleep(self.delay_seconds)

                result = self._check_record(record)
                results.append(result)
                counts[result.outcome] += 1
                logger.info(
                    "record_checked",
                    record_id=record.record_id,
                    outcome=result.outcome,
                    processed=index + 1,
                    total=len(records),
                )

            logger.info(
                "checks_complete",
                successful=counts[RunOutcome.SUCCESS],
                failed=counts[RunOutcome.ERROR],
                skipped=counts[RunOutcome.ALREADY_RUNNING],
                duration_seconds=round(time.monotonic() - started, 2),
            )
            return results
        finally:
            self._lock.release()

    def run_all(self) -> list[RecordRunResult]:
        """Check every configured record."""
        logger.info("checks_starting", records=len(self.records))
        return self._run_sequence(self.records)

    def run_single(self, record_id: str) -> RecordRunResult:
        """Check one configured record by id.

        Raises:
            RecordNotFoundError: When no configured record has that id.
        """
        for record in self.records:
            if record.record_id == record_id:
                return self._run_sequence([record])[0]
        msg = f"Account with login '{record_id}' not found"
        raise RecordNotFoundError(msg)
