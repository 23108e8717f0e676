"""Playwright browser service that logs in and scrapes an application's details page."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from pio_checker.core.errors import FetchError
from pio_checker.domains.monitoring.core.snapshot_builder import extract_numeric_tokens
from pio_checker.models.snapshot import RawExtractedData
from pio_checker.utils.retry import retry_with_logging

if TYPE_CHECKING:
    from pio_checker.models.config import Config
    from pio_checker.models.record import RecordConfig

logger = structlog.get_logger(__name__)

# Login form selectors
_USERNAME_SELECTOR = 'input[formcontrolname="username"]'
_PASSWORD_SELECTOR = 'input[formcontrolname="pass"]'
_SUBMIT_SELECTOR = "button.btn-primary"

_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
_BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]

_FORM_TIMEOUT_MS = 10_000
_SUBMIT_TIMEOUT_MS = 30_000
_POST_LOGIN_PAUSE_MS = 2_000
_LIST_RENDER_PAUSE_MS = 3_000

# Details page detection: poll once per second
_DETAILS_POLL_ATTEMPTS = 10
_DETAILS_POLL_INTERVAL_MS = 1_000

_CLICK_RECORD_LINK_JS = """
(elementText) => {
    const links = Array.from(document.querySelectorAll('a'));
    const target = links.find(link =>
        (link.textContent || '').includes(elementText) ||
        (link.getAttribute('href') || '').includes(elementText)
    );
    if (target) {
        target.click();
        return true;
    }
    return false;
}
"""

_LIST_LINKS_JS = """
() => Array.from(document.querySelectorAll('a'))
    .map(link => ({
        text: (link.textContent || '').trim(),
        href: link.getAttribute('href'),
    }))
    .filter(link => link.text || link.href)
"""

_BODY_TEXT_JS = "() => document.body ? document.body.innerText || '' : ''"

_TABLES_JS = """
() => {
    const results = [];
    document.querySelectorAll('table').forEach(table => {
        const rows = [];
        table.querySelectorAll('tr').forEach(row => {
            const cells = [];
            row.querySelectorAll('td, th').forEach(cell => {
                cells.push(cell.innerText.trim());
            });
            if (cells.length > 0) {
                rows.push(cells);
            }
        });
        if (rows.length > 0) {
            results.push(rows);
        }
    });
    return results;
}
"""


class PageNavigationError(Exception):
    """A single scrape attempt failed; the fetcher may retry."""


class PlaywrightPageFetcher:
    """Headless Chromium scraper for the PIO applications portal.

    Each attempt launches a fresh browser, logs in with the record's
    credentials, opens the application whose link contains the record's
    element text and extracts body text, tables and numeric tokens.
    """

    def __init__(
        self,
        login_url: str,
        applications_url: str,
        details_url_prefix: str,
        max_attempts: int = 3,
        retry_wait_seconds: float = 5.0,
        page_timeout_ms: int = 60_000,
    ) -> None:
        self.login_url = login_url
        self.applications_url = applications_url
        self.details_url_prefix = details_url_prefix
        self.max_attempts = max_attempts
        self.retry_wait_seconds = retry_wait_seconds
        self.page_timeout_ms = page_timeout_ms

    @classmethod
    def from_config(cls, config: Config) -> PlaywrightPageFetcher:
        return cls(
            login_url=config.login_url,
            applications_url=config.applications_url,
            details_url_prefix=config.details_url_prefix,
            max_attempts=config.fetch_max_attempts,
            retry_wait_seconds=config.fetch_retry_wait_seconds,
            page_timeout_ms=config.page_timeout_ms,
        )

    def fetch(self, record: RecordConfig) -> RawExtractedData:
        """Scrape the record's details page, retrying failed attempts.

        Raises:
            FetchError: When every attempt failed.
        """
        attempt = retry_with_logging(
            max_attempts=self.max_attempts,
            wait_seconds=self.retry_wait_seconds,
            retry_on=(PageNavigationError, TimeoutError, OSError),
        )(self._scrape_once)

        try:
            data = attempt(record)
        except (PageNavigationError, TimeoutError, OSError) as exc:
            msg = f"Failed to scrape data after {self.max_attempts} attempts: {exc}"
            raise FetchError(msg) from exc

        logger.info("data_scraped", record_id=record.record_id, url=data.source_url)
        return data

    def _scrape_once(self, record: RecordConfig) -> RawExtractedData:
        """One full browser session: login, open record, extract."""
        from playwright.sync_api import Error as PlaywrightError
        from playwright.sync_api import sync_playwright

        logger.info("browser_starting", record_id=record.record_id, headless=record.headless)

        try:
            with sync_playwright() as pw:
                browser = pw.chromium.launch(headless=record.headless, args=_BROWSER_ARGS)
                try:
                    page = browser.new_page(user_agent=_USER_AGENT)
                    page.set_default_timeout(self.page_timeout_ms)
                    page.set_default_navigation_timeout(self.page_timeout_ms)

                    self._login(page, record)
                    self._open_record(page, record)
                    return self._extract(page)
                finally:
                    try:
                        browser.close()
                    except PlaywrightError as exc:
                        logger.warning("browser_close_failed", error=str(exc))
        except PlaywrightError as exc:
            raise PageNavigationError(str(exc)) from exc

    def _login(self, page: Any, record: RecordConfig) -> None:
        """Fill and submit the login form."""
        page.goto(self.login_url, wait_until="domcontentloaded")

        page.wait_for_selector(_USERNAME_SELECTOR, timeout=_FORM_TIMEOUT_MS)
        page.fill(_USERNAME_SELECTOR, record.login)
        page.wait_for_selector(_PASSWORD_SELECTOR, timeout=_FORM_TIMEOUT_MS)
        page.fill(_PASSWORD_SELECTOR, record.password)

        submit = page.query_selector(_SUBMIT_SELECTOR)
        if submit is None:
            raise PageNavigationError("Could not find submit button")

        with page.expect_navigation(wait_until="domcontentloaded", timeout=_SUBMIT_TIMEOUT_MS):
            submit.click()

        page.wait_for_timeout(_POST_LOGIN_PAUSE_MS)
        logger.debug("login_submitted", record_id=record.record_id, url=page.url)

    def _open_record(self, page: Any, record: RecordConfig) -> None:
        """Click the application link and wait for the details page URL."""
        page.goto(self.applications_url, wait_until="domcontentloaded")
        page.wait_for_timeout(_LIST_RENDER_PAUSE_MS)

        if not page.evaluate(_CLICK_RECORD_LINK_JS, record.element_text):
            available = page.evaluate(_LIST_LINKS_JS)
            logger.debug("available_links", links=available[:10])
            msg = f"Could not find link containing text: {record.element_text}"
            raise PageNavigationError(msg)

        for _ in range(_DETAILS_POLL_ATTEMPTS):
            page.wait_for_timeout(_DETAILS_POLL_INTERVAL_MS)
            if page.url.startswith(self.details_url_prefix):
                return

        raise PageNavigationError("Target page did not load within expected time")

    def _extract(self, page: Any) -> RawExtractedData:
        """Read body text, tables and numeric tokens from the details page."""
        body_text: str = page.evaluate(_BODY_TEXT_JS)
        tables: list[list[list[str]]] = page.evaluate(_TABLES_JS)
        return RawExtractedData(
            main_text=body_text,
            tables=tables,
            numeric_tokens=extract_numeric_tokens(body_text),
            source_url=page.url,
        )
