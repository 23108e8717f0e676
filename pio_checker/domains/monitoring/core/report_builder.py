"""Rendering of diff results into notification text and HTML reports."""

from __future__ import annotations

from datetime import datetime
from html import escape
from typing import TYPE_CHECKING

from pio_checker.models.diff_result import ChangeCategory
from pio_checker.models.report import Report

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pio_checker.models.diff_result import DiffResult
    from pio_checker.models.snapshot import Snapshot

APP_NAME = "PIO Checker"
CHANGES_SUBJECT = f"{APP_NAME} - Changes Detected!"
ERROR_SUBJECT = f"{APP_NAME} - Error Occurred"

NO_TABLE_DATA = "No table data available"
NO_NUMBER_DATA = "No numbers available"

_CELL_STYLE = "padding: 5px; border: 1px solid #ccc;"
_TABLE_STYLE = "border-collapse: collapse; margin-bottom: 10px;"


def _format_time(moment: datetime | None) -> str:
    moment = moment or datetime.now().astimezone()
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def summary_message(diff: DiffResult) -> str:
    """One-line description of which field groups changed."""
    names = ", ".join(category.display_name for category in diff.categories)
    return f"Changes found: {names}"


def format_tables_html(tables: Sequence[Sequence[Sequence[str]]]) -> str:
    """Render tables as numbered HTML tables with row 0 as the header row."""
    if not tables:
        return f"<p>{NO_TABLE_DATA}</p>"

    parts: list[str] = []
    for index, table in enumerate(tables, start=1):
        parts.append(f"<h5>Table {index}:</h5>")
        parts.append(f'<table border="1" style="{_TABLE_STYLE}">')
        for row_index, row in enumerate(table):
            tag = "th" if row_index == 0 else "td"
            cells = "".join(
                f'<{tag} style="{_CELL_STYLE}">{escape(cell)}</{tag}>' for cell in row
            )
            parts.append(f"<tr>{cells}</tr>")
        parts.append("</table>")
    return "".join(parts)


def format_numbers_html(tokens: Sequence[str]) -> str:
    """Join numeric tokens with commas, or a placeholder when there are none."""
    if not tokens:
        return NO_NUMBER_DATA
    return escape(", ".join(tokens))


def detailed_report(
    diff: DiffResult,
    previous: Snapshot,
    current: Snapshot,
    record_id: str,
    generated_at: datetime | None = None,
) -> Report:
    """Build the HTML change report sent by email.

    Table and number sections are only included when those categories changed.
    The current snapshot's URL is always linked at the bottom.
    """
    application_number = current.element_text or previous.element_text or "-"
    html = [
        "<h2>PIO Application Status Update</h2>",
        f"<p><strong>Account:</strong> {escape(record_id)}</p>",
        f"<p><strong>Time:</strong> {_format_time(generated_at)}</p>",
        f"<p><strong>Application Number:</strong> {escape(application_number)}</p>",
        "<p><strong>Changes Detected:</strong></p>",
        "<ul>",
    ]
    html.extend(f"<li>{escape(category.display_name)}</li>" for category in diff.categories)
    html.append("</ul>")

    if ChangeCategory.TABLE in diff:
        html.append("<h3>Table Changes:</h3>")
        html.append("<h4>Previous Data:</h4>")
        html.append(format_tables_html(previous.tables))
        html.append("<h4>Current Data:</h4>")
        html.append(format_tables_html(current.tables))

    if ChangeCategory.NUMERIC in diff:
        html.append("<h3>Number/Date Changes:</h3>")
        html.append(
            f"<p><strong>Previous:</strong> {format_numbers_html(previous.numeric_tokens)}</p>"
        )
        html.append(
            f"<p><strong>Current:</strong> {format_numbers_html(current.numeric_tokens)}</p>"
        )

    url = escape(current.source_url)
    html.append("<hr>")
    html.append(f'<p><strong>Application URL:</strong> <a href="{url}">{url}</a></p>')
    html.append(
        f"<p><em>This is an automated notification from {APP_NAME} "
        f"for account {escape(record_id)}.</em></p>"
    )

    return Report(subject=f"{CHANGES_SUBJECT} - Account: {record_id}", html_body="\n".join(html))


def error_report(record_id: str, message: str, generated_at: datetime | None = None) -> Report:
    """Build the HTML report sent when a check fails."""
    html = "\n".join(
        [
            f"<h2>{APP_NAME} - Error Report</h2>",
            f"<p><strong>Account:</strong> {escape(record_id)}</p>",
            f"<p><strong>Time:</strong> {_format_time(generated_at)}</p>",
            f"<p><strong>Error:</strong> {escape(message)}</p>",
            f"<p>The {APP_NAME} encountered an error while trying to check "
            "your application status.</p>",
            "<p>Please check the application manually or review the system logs.</p>",
            f"<p><em>This is an automated notification from {APP_NAME}.</em></p>",
        ]
    )
    return Report(subject=f"{ERROR_SUBJECT} - Account: {record_id}", html_body=html)
