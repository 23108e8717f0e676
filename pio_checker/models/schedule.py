"""Schedule settings for periodic checks."""

from __future__ import annotations

from datetime import time
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Weekday(StrEnum):
    """Day of week, spelled the way the settings file spells it."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def cron_abbreviation(self) -> str:
        return self.value[:3]


class IntervalSchedule(BaseModel):
    """Run every N minutes."""

    model_config = ConfigDict(frozen=True)

    type: Literal["interval"] = "interval"
    minutes: int

    @field_validator("minutes")
    @classmethod
    def validate_minutes(cls, value: int) -> int:
        """Interval must be at least one minute."""
        if value < 1:
            msg = "minutes must be greater than 0"
            raise ValueError(msg)
        return value


class WeeklySchedule(BaseModel):
    """Run once on each listed weekday at the given local time."""

    model_config = ConfigDict(frozen=True)

    type: Literal["weekly"] = "weekly"
    days: dict[Weekday, time]

    @field_validator("days")
    @classmethod
    def validate_days(cls, value: dict[Weekday, time]) -> dict[Weekday, time]:
        """At least one day must be enabled."""
        if not value:
            msg = "days must contain at least one weekday"
            raise ValueError(msg)
        return value


Schedule = Annotated[IntervalSchedule | WeeklySchedule, Field(discriminator="type")]


# Keys written by the desktop app's settings screen
_LEGACY_KEYS = frozenset(
    {
        "scheduleEnabled",
        "scheduleType",
        "scheduleInterval",
        "scheduleDays",
        "headlessMode",
        "lastCheck",
    }
)


class ScheduleSettings(BaseModel):
    """Contents of settings.json.

    Accepts either the native layout (``enabled``, ``schedule``, ``headless``)
    or the desktop app layout::

        {"scheduleEnabled": true, "scheduleType": "days", "scheduleInterval": 30,
         "scheduleDays": {"monday": {"enabled": true, "time": "09:00"}},
         "headlessMode": true}

    Unknown keys are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    schedule: Schedule = IntervalSchedule(minutes=30)
    headless: bool | None = None

    @model_validator(mode="before")
    @classmethod
    def translate_legacy_layout(cls, data: Any) -> Any:
        """Map desktop app keys onto the native fields."""
        if not isinstance(data, dict) or not data.keys() & _LEGACY_KEYS:
            return data

        native = {key: value for key, value in data.items() if key not in _LEGACY_KEYS}
        enabled = bool(data.get("scheduleEnabled", False))

        if data.get("scheduleType", "days") == "interval":
            native["schedule"] = {
                "type": "interval",
                "minutes": data.get("scheduleInterval", 30),
            }
        else:
            days = {
                day: entry.get("time")
                for day, entry in (data.get("scheduleDays") or {}).items()
                if isinstance(entry, dict) and entry.get("enabled")
            }
            if days:
                native["schedule"] = {"type": "weekly", "days": days}
            else:
                # No enabled days means nothing is scheduled
                enabled = False

        native.setdefault("enabled", enabled)
        if "headlessMode" in data:
            native.setdefault("headless", data["headlessMode"])
        return native
