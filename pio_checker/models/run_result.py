"""Run state and per-record run result models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class RunState(StrEnum):
    """Lifecycle of a single record check."""

    IDLE = "idle"
    FETCHING = "fetching"
    COMPARING = "comparing"
    REPORTING = "reporting"
    DONE = "done"
    ERROR = "error"

    @property
    def is_active(self) -> bool:
        return self in (RunState.FETCHING, RunState.COMPARING, RunState.REPORTING)


class RunOutcome(StrEnum):
    """Terminal outcome of a record check as reported to callers."""

    SUCCESS = "success"
    ERROR = "error"
    ALREADY_RUNNING = "already_running"


class RecordRunResult(BaseModel):
    """Result of checking one record."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    outcome: RunOutcome
    error: str | None = None
