"""Periodic check scheduling using APScheduler."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from pydantic import ValidationError

from pio_checker.models.schedule import IntervalSchedule, ScheduleSettings, WeeklySchedule

if TYPE_CHECKING:
    from collections.abc import Callable

    from apscheduler.schedulers.base import BaseScheduler
    from apscheduler.triggers.base import BaseTrigger

logger = structlog.get_logger(__name__)


def load_schedule_settings(path: str | Path) -> ScheduleSettings:
    """Read settings.json; a missing file means scheduling is disabled."""
    settings_path = Path(path)
    if not settings_path.exists():
        logger.info("schedule_settings_missing", path=str(settings_path))
        return ScheduleSettings()

    try:
        raw = json.loads(settings_path.read_text(encoding="utf-8"))
        return ScheduleSettings.model_validate(raw)
    except (OSError, ValueError, ValidationError) as exc:
        msg = f"Invalid schedule settings in {settings_path}: {exc}"
        raise ValueError(msg) from exc


def build_triggers(schedule: IntervalSchedule | WeeklySchedule) -> list[BaseTrigger]:
    """Translate a schedule into APScheduler triggers, one per weekday for weekly schedules."""
    if isinstance(schedule, IntervalSchedule):
        return [IntervalTrigger(minutes=schedule.minutes)]

    return [
        CronTrigger(
            day_of_week=day.cron_abbreviation,
            hour=at.hour,
            minute=at.minute,
        )
        for day, at in schedule.days.items()
    ]


def describe_schedule(schedule: IntervalSchedule | WeeklySchedule) -> str:
    if isinstance(schedule, IntervalSchedule):
        return f"every {schedule.minutes} minutes"
    days = ", ".join(f"{day.value} at {at.strftime('%H:%M')}" for day, at in schedule.days.items())
    return f"weekly on {days}"


class CheckScheduler:
    """Runs a check job on the configured schedule.

    Jobs never overlap: each trigger runs with max_instances=1 and missed
    runs are coalesced.
    """

    def __init__(
        self,
        job: Callable[[], object],
        settings: ScheduleSettings,
        scheduler: BaseScheduler | None = None,
    ) -> None:
        self.job = job
        self.settings = settings
        self.scheduler = scheduler or BlockingScheduler()

    def _run_job(self) -> None:
        logger.info("scheduled_check_starting")
        try:
            self.job()
        except Exception as exc:
            logger.error("scheduled_check_failed", error=str(exc), exc_info=True)
        else:
            logger.info("scheduled_check_finished")

    def register_jobs(self) -> int:
        """Add one job per trigger. Returns the number of jobs added."""
        if not self.settings.enabled:
            logger.warning("schedule_disabled")
            return 0

        triggers = build_triggers(self.settings.schedule)
        for index, trigger in enumerate(triggers):
            self.scheduler.add_job(
                self._run_job,
                trigger,
                id=f"pio-check-{index}",
                max_instances=1,
                coalesce=True,
                replace_existing=True,
            )
        logger.info(
            "scheduler_configured",
            schedule=describe_schedule(self.settings.schedule),
            jobs=len(triggers),
        )
        return len(triggers)

    def start(self, run_immediately: bool = True) -> None:
        """Register jobs and block until interrupted."""
        if self.register_jobs() == 0:
            return
        if run_immediately:
            self._run_job()
        try:
            self.scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("scheduler_stopped")
            self.scheduler.shutdown(wait=False)
