"""Pydantic data models for the PIO application status checker."""

from pio_checker.models.config import Config
from pio_checker.models.diff_result import ChangeCategory, DiffResult
from pio_checker.models.record import RecordConfig
from pio_checker.models.report import Report
from pio_checker.models.run_result import RecordRunResult, RunOutcome, RunState
from pio_checker.models.schedule import (
    IntervalSchedule,
    ScheduleSettings,
    Weekday,
    WeeklySchedule,
)
from pio_checker.models.snapshot import RawExtractedData, Snapshot

__all__ = [
    "ChangeCategory",
    "Config",
    "DiffResult",
    "IntervalSchedule",
    "RawExtractedData",
    "RecordConfig",
    "RecordRunResult",
    "Report",
    "RunOutcome",
    "RunState",
    "ScheduleSettings",
    "Snapshot",
    "Weekday",
    "WeeklySchedule",
]
