"""Shared test fixtures for the PIO application status checker."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import pytest

from pio_checker.core.errors import FetchError
from pio_checker.domains.monitoring.repositories.snapshot_repository import SnapshotRepository
from pio_checker.models.record import RecordConfig
from pio_checker.models.snapshot import RawExtractedData, Snapshot

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

BASE_TIME = datetime(2024, 3, 1, 9, 30, 0, tzinfo=UTC)

SAMPLE_TABLES = [
    [["Etap", "Data"], ["Złożenie wniosku", "01.02.2024"]],
    [["Dokument", "Status"], ["Paszport", "Przyjęty"]],
]


class FakeFetcher:
    """Page fetcher returning queued responses; exceptions in the queue are raised."""

    def __init__(self, responses: list[RawExtractedData | Exception] | None = None) -> None:
        self.responses = list(responses or [])
        self.calls: list[str] = []

    def fetch(self, record: RecordConfig) -> RawExtractedData:
        self.calls.append(record.record_id)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class RecordingNotifier:
    """Notifier that remembers every (title, message) pair."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    def notify(self, title: str, message: str) -> None:
        self.sent.append((title, message))


class RecordingMailer:
    """Report mailer that remembers every (subject, html_body) pair."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    def send_report(self, subject: str, html_body: str) -> None:
        self.sent.append((subject, html_body))


def make_raw(
    main_text: str = "Wniosek 123/2024\nStatus: W trakcie\n",
    tables: list[list[list[str]]] | None = None,
    numeric_tokens: list[str] | None = None,
    source_url: str = "https://pio-przybysz.duw.pl/szczegoly-wniosku/42",
) -> RawExtractedData:
    """Build fetcher output with sensible defaults."""
    return RawExtractedData(
        main_text=main_text,
        tables=SAMPLE_TABLES if tables is None else tables,
        numeric_tokens=["123", "2024", "01.02.2024"] if numeric_tokens is None else numeric_tokens,
        source_url=source_url,
    )


@pytest.fixture
def make_snapshot() -> Callable[..., Snapshot]:
    """Factory for snapshots; keyword arguments override defaults."""

    def _make(**overrides: Any) -> Snapshot:
        data: dict[str, Any] = {
            "record_id": "jan.kowalski@example.com",
            "captured_at": BASE_TIME,
            "source_url": "https://pio-przybysz.duw.pl/szczegoly-wniosku/42",
            "main_text": "Wniosek 123/2024\nStatus: W trakcie",
            "tables": SAMPLE_TABLES,
            "numeric_tokens": ["123", "2024", "01.02.2024"],
            "element_text": "WSC-II-S.6151.12345.2024",
        }
        data.update(overrides)
        return Snapshot(**data)

    return _make


@pytest.fixture
def record() -> RecordConfig:
    """A valid monitored record."""
    return RecordConfig(
        login="jan.kowalski@example.com",
        password="secret",
        element_text="WSC-II-S.6151.12345.2024",
    )


@pytest.fixture
def snapshot_repo(tmp_path: Path) -> SnapshotRepository:
    """Snapshot repository rooted in a temporary directory."""
    return SnapshotRepository(tmp_path / "data")


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock advancing one minute per call, starting at BASE_TIME."""
    ticks = iter(BASE_TIME + timedelta(minutes=n) for n in range(10_000))
    return lambda: next(ticks)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def fetch_failure() -> FetchError:
    return FetchError("Failed to scrape data after 3 attempts: Could not find submit button")
