"""Contract tests for adapters that talk to external systems.

Mock the transports (SMTP, browser); verify the error contract each adapter
exposes to the checker.
"""

from __future__ import annotations

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from pio_checker.core.errors import FetchError, NotificationDispatchError
from pio_checker.models.config import Config
from pio_checker.models.record import RecordConfig
from pio_checker.models.snapshot import RawExtractedData
from pio_checker.services.email_reporter import EmailReporter
from pio_checker.services.notifier import ConsoleNotifier
from pio_checker.services.page_fetcher import PageNavigationError, PlaywrightPageFetcher

# ---------------------------------------------------------------------------
# EmailReporter
# ---------------------------------------------------------------------------


class TestEmailReporter:
    def _reporter(self) -> EmailReporter:
        return EmailReporter(sender="me@gmail.com", password="app-pass")

    def test_message_headers_and_parts(self) -> None:
        msg = self._reporter().build_message("Subject line", "<h2>Hi</h2>")
        assert msg["From"] == "me@gmail.com"
        assert msg["To"] == "me@gmail.com"
        assert msg["Subject"] == "Subject line"
        parts = msg.get_payload()
        assert [p.get_content_type() for p in parts] == ["text/plain", "text/html"]

    def test_explicit_recipients(self) -> None:
        reporter = EmailReporter("me@gmail.com", "pw", recipients=["a@x.pl", "b@x.pl"])
        assert reporter.build_message("s", "b")["To"] == "a@x.pl, b@x.pl"

    def test_send_uses_starttls_and_login(self) -> None:
        with patch("pio_checker.services.email_reporter.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            self._reporter().send_report("Subject", "<p>body</p>")

        smtp_cls.assert_called_once_with("smtp.gmail.com", 587, timeout=30.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("me@gmail.com", "app-pass")
        server.send_message.assert_called_once()

    def test_smtp_error_becomes_dispatch_error(self) -> None:
        with patch("pio_checker.services.email_reporter.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad creds")
            with pytest.raises(NotificationDispatchError, match="Error sending email"):
                self._reporter().send_report("Subject", "<p>body</p>")

    def test_connection_error_becomes_dispatch_error(self) -> None:
        with patch(
            "pio_checker.services.email_reporter.smtplib.SMTP",
            side_effect=ConnectionRefusedError("refused"),
        ):
            with pytest.raises(NotificationDispatchError):
                self._reporter().send_report("Subject", "<p>body</p>")


# ---------------------------------------------------------------------------
# ConsoleNotifier
# ---------------------------------------------------------------------------


class TestConsoleNotifier:
    def test_prints_title_and_message(self, capsys: pytest.CaptureFixture[str]) -> None:
        ConsoleNotifier().notify("PIO Checker - No Changes - jan", "Unchanged.")
        out = capsys.readouterr().out
        assert "[PIO Checker - No Changes - jan] Unchanged." in out

    def test_output_failure_becomes_dispatch_error(self) -> None:
        with patch("pio_checker.services.notifier.click.echo", side_effect=OSError("closed")):
            with pytest.raises(NotificationDispatchError):
                ConsoleNotifier().notify("t", "m")

    def test_unencodable_output_becomes_dispatch_error(self) -> None:
        error = UnicodeEncodeError("cp1252", "Złożenie", 1, 2, "character maps to <undefined>")
        with patch("pio_checker.services.notifier.click.echo", side_effect=error):
            with pytest.raises(NotificationDispatchError, match="Could not display"):
                ConsoleNotifier().notify("t", "Złożenie wniosku")


# ---------------------------------------------------------------------------
# PlaywrightPageFetcher (browser session replaced)
# ---------------------------------------------------------------------------


RAW = RawExtractedData(
    main_text="Status",
    tables=[],
    numeric_tokens=[],
    source_url="https://pio-przybysz.duw.pl/szczegoly-wniosku/1",
)


def _record() -> RecordConfig:
    return RecordConfig(login="jan", password="pw", element_text="APP-1")


def _fetcher(max_attempts: int = 3) -> PlaywrightPageFetcher:
    return PlaywrightPageFetcher(
        login_url="https://pio-przybysz.duw.pl/login",
        applications_url="https://pio-przybysz.duw.pl/wnioski-przyjete",
        details_url_prefix="https://pio-przybysz.duw.pl/szczegoly-wniosku",
        max_attempts=max_attempts,
        retry_wait_seconds=0,
    )


class TestPlaywrightPageFetcher:
    def test_from_config(self) -> None:
        config = Config(fetch_max_attempts=4, fetch_retry_wait_seconds=1.5, page_timeout_ms=1000)
        fetcher = PlaywrightPageFetcher.from_config(config)
        assert fetcher.max_attempts == 4
        assert fetcher.retry_wait_seconds == 1.5
        assert fetcher.page_timeout_ms == 1000
        assert fetcher.login_url == config.login_url

    def test_first_attempt_success(self) -> None:
        fetcher = _fetcher()
        fetcher._scrape_once = MagicMock(return_value=RAW)  # type: ignore[method-assign]
        assert fetcher.fetch(_record()) == RAW
        fetcher._scrape_once.assert_called_once()

    def test_retries_navigation_failures(self) -> None:
        fetcher = _fetcher()
        fetcher._scrape_once = MagicMock(  # type: ignore[method-assign]
            side_effect=[PageNavigationError("timeout"), PageNavigationError("timeout"), RAW]
        )
        assert fetcher.fetch(_record()) == RAW
        assert fetcher._scrape_once.call_count == 3

    def test_exhausted_retries_raise_fetch_error(self) -> None:
        fetcher = _fetcher(max_attempts=2)
        fetcher._scrape_once = MagicMock(  # type: ignore[method-assign]
            side_effect=PageNavigationError("Could not find link containing text: APP-1")
        )
        with pytest.raises(FetchError, match="after 2 attempts: Could not find link"):
            fetcher.fetch(_record())
        assert fetcher._scrape_once.call_count == 2

    def test_extract_builds_raw_data(self) -> None:
        page = MagicMock()
        page.url = "https://pio-przybysz.duw.pl/szczegoly-wniosku/7"
        page.evaluate.side_effect = [
            "Wniosek 12 z 01.02.2024",
            [[["Etap"], ["Decyzja"]]],
        ]
        raw = _fetcher()._extract(page)
        assert raw.main_text == "Wniosek 12 z 01.02.2024"
        assert raw.tables == [[["Etap"], ["Decyzja"]]]
        assert raw.numeric_tokens == ["12", "01.02.2024"]
        assert raw.source_url == page.url

    def test_open_record_link_missing(self) -> None:
        page = MagicMock()
        page.evaluate.side_effect = [False, [{"text": "Other", "href": "/x"}]]
        with pytest.raises(PageNavigationError, match="Could not find link containing text"):
            _fetcher()._open_record(page, _record())

    def test_open_record_waits_for_details_url(self) -> None:
        page = MagicMock()
        page.evaluate.return_value = True
        page.url = "https://pio-przybysz.duw.pl/szczegoly-wniosku/7"
        _fetcher()._open_record(page, _record())
        page.goto.assert_called_once()

    def test_open_record_details_never_load(self) -> None:
        page = MagicMock()
        page.evaluate.return_value = True
        page.url = "https://pio-przybysz.duw.pl/wnioski-przyjete"
        with pytest.raises(PageNavigationError, match="did not load"):
            _fetcher()._open_record(page, _record())

    def test_login_without_submit_button(self) -> None:
        page = MagicMock()
        page.query_selector.return_value = None
        with pytest.raises(PageNavigationError, match="submit button"):
            _fetcher()._login(page, _record())
        page.fill.assert_any_call('input[formcontrolname="username"]', "jan")
