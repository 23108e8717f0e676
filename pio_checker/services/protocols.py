"""Service protocols defining interfaces for dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pio_checker.models.record import RecordConfig
    from pio_checker.models.snapshot import RawExtractedData


class PageFetcherProtocol(Protocol):
    """Fetches a record's status page; retries internally and raises FetchError."""

    def fetch(self, record: RecordConfig) -> RawExtractedData: ...


class NotifierProtocol(Protocol):
    """Short-form alerts. Raises NotificationDispatchError on failure."""

    def notify(self, title: str, message: str) -> None: ...


class ReportMailerProtocol(Protocol):
    """Long-form HTML reports. Raises NotificationDispatchError on failure."""

    def send_report(self, subject: str, html_body: str) -> None: ...
