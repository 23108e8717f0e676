"""Monitoring domain core -- pure functions for snapshot diffing and reporting."""

from __future__ import annotations

from pio_checker.domains.monitoring.core.change_detection import (
    detect_changes,
    serialize_sequence,
)
from pio_checker.domains.monitoring.core.report_builder import (
    detailed_report,
    error_report,
    format_numbers_html,
    format_tables_html,
    summary_message,
)
from pio_checker.domains.monitoring.core.snapshot_builder import (
    NUMERIC_TOKEN_PATTERN,
    build_snapshot,
    clean_table_rows,
    extract_numeric_tokens,
)

__all__ = [
    # change_detection
    "detect_changes",
    "serialize_sequence",
    # report_builder
    "detailed_report",
    "error_report",
    "format_numbers_html",
    "format_tables_html",
    "summary_message",
    # snapshot_builder
    "NUMERIC_TOKEN_PATTERN",
    "build_snapshot",
    "clean_table_rows",
    "extract_numeric_tokens",
]
