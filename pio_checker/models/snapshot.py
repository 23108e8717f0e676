"""Snapshot model for captured status page content."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, field_validator

Table = tuple[tuple[str, ...], ...]


class RawExtractedData(BaseModel):
    """Raw content returned by a page fetcher before normalization."""

    main_text: str
    tables: list[list[list[str]]] = []
    numeric_tokens: list[str] = []
    source_url: str


class Snapshot(BaseModel):
    """One immutable capture of a monitored record's page state."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    captured_at: datetime
    source_url: str
    main_text: str
    tables: tuple[Table, ...] = ()
    numeric_tokens: tuple[str, ...] = ()
    element_text: str | None = None

    @field_validator("record_id")
    @classmethod
    def validate_record_id(cls, value: str) -> str:
        """Record ID must be non-empty."""
        if not value.strip():
            msg = "record_id must not be empty"
            raise ValueError(msg)
        return value

    @field_validator("captured_at")
    @classmethod
    def validate_captured_at(cls, value: datetime) -> datetime:
        """Capture time must be timezone-aware; it is stored in UTC."""
        if value.tzinfo is None:
            msg = "captured_at must be timezone-aware"
            raise ValueError(msg)
        return value.astimezone(UTC)

    @field_validator("main_text")
    @classmethod
    def strip_main_text(cls, value: str) -> str:
        return value.strip()
