"""Field-group change detection between two snapshots."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pio_checker.core.errors import InvalidComparisonError
from pio_checker.models.diff_result import ChangeCategory, DiffResult

if TYPE_CHECKING:
    from pio_checker.models.snapshot import Snapshot


def serialize_sequence(value: Any) -> str:
    """Serialize nested sequences so that element order is significant."""
    return json.dumps(value, ensure_ascii=False)


def detect_changes(previous: Snapshot, current: Snapshot) -> DiffResult:
    """Compare two snapshots of the same record.

    Every check runs; categories come back in content, table, numeric order.
    Raises InvalidComparisonError when the snapshots belong to different records.
    """
    if previous.record_id != current.record_id:
        msg = (
            f"Cannot compare snapshots of different records: "
            f"{previous.record_id!r} vs {current.record_id!r}"
        )
        raise InvalidComparisonError(msg)

    categories: list[ChangeCategory] = []

    if previous.main_text != current.main_text:
        categories.append(ChangeCategory.CONTENT)

    if serialize_sequence(previous.tables) != serialize_sequence(current.tables):
        categories.append(ChangeCategory.TABLE)

    if serialize_sequence(previous.numeric_tokens) != serialize_sequence(current.numeric_tokens):
        categories.append(ChangeCategory.NUMERIC)

    return DiffResult(categories=tuple(categories))
