"""Normalization of raw page content into snapshots."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pio_checker.models.snapshot import RawExtractedData, Snapshot

if TYPE_CHECKING:
    from datetime import datetime

# Application numbers, counters and dotted dates such as 12.03.2024
NUMERIC_TOKEN_PATTERN = re.compile(r"\d+[\.\d]*(?:\.\d+\.\d+)?")


def extract_numeric_tokens(text: str) -> list[str]:
    """Return every numeric or dotted-numeric token in text, in order.

    Duplicates are kept. Returns an empty list for text without digits.
    """
    return NUMERIC_TOKEN_PATTERN.findall(text)


def clean_table_rows(rows: list[list[str]]) -> list[list[str]]:
    """Trim every cell and drop rows without cells."""
    return [[cell.strip() for cell in row] for row in rows if row]


def build_snapshot(
    raw: RawExtractedData,
    record_id: str,
    captured_at: datetime,
    element_text: str | None = None,
) -> Snapshot:
    """Wrap fetcher output into an immutable snapshot.

    Main text is whitespace-trimmed; tables that end up with no rows are
    dropped. Numeric tokens are taken as extracted by the fetcher.
    """
    tables = [clean_table_rows(table) for table in raw.tables]
    return Snapshot(
        record_id=record_id,
        captured_at=captured_at,
        source_url=raw.source_url,
        main_text=raw.main_text.strip(),
        tables=[table for table in tables if table],
        numeric_tokens=list(raw.numeric_tokens),
        element_text=element_text,
    )
