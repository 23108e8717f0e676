"""File-backed snapshot history, one JSON document per capture."""

from __future__ import annotations

import hashlib
import json
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from pio_checker.core.errors import PersistenceError
from pio_checker.models.snapshot import Snapshot

logger = structlog.get_logger(__name__)

FILE_PREFIX = "szczegoly-wniosku_"
FILE_SUFFIX = ".json"

# Fixed width and UTC, so lexicographic order of names is chronological order
TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S-%fZ"

_UNSAFE_PATH_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_DIGEST_LENGTH = 8


def encode_timestamp(moment: datetime) -> str:
    """Encode a capture time as a sortable file-name fragment."""
    return moment.astimezone(UTC).strftime(TIMESTAMP_FORMAT)


def snapshot_filename(snapshot: Snapshot) -> str:
    return f"{FILE_PREFIX}{encode_timestamp(snapshot.captured_at)}{FILE_SUFFIX}"


def record_namespace(record_id: str) -> str:
    """Directory name for a record.

    Ids that are already safe path components are used as-is. Otherwise
    reserved characters are replaced and a short digest of the raw id is
    appended, so two different ids never share a directory.
    """
    safe = _UNSAFE_PATH_CHARS.sub("_", record_id).strip(". ")
    if safe and safe == record_id:
        return safe
    digest = hashlib.sha256(record_id.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]
    return f"{safe or '_'}_{digest}"


def snapshot_to_document(snapshot: Snapshot) -> dict[str, Any]:
    """Serialize a snapshot to the persisted document layout."""
    return {
        "recordId": snapshot.record_id,
        "mainText": snapshot.main_text,
        "fields": {
            "tables": [[list(row) for row in table] for table in snapshot.tables],
            "numbers": list(snapshot.numeric_tokens),
        },
        "url": snapshot.source_url,
        "timestamp": snapshot.captured_at.isoformat(),
        "elementText": snapshot.element_text,
    }


def snapshot_from_document(document: dict[str, Any], record_id: str) -> Snapshot:
    """Rebuild a snapshot from its persisted document.

    Documents without a recordId field are attributed to the record whose
    directory they were read from.
    """
    fields = document.get("fields") or {}
    captured_at = datetime.fromisoformat(document["timestamp"])
    if captured_at.tzinfo is None:
        captured_at = captured_at.replace(tzinfo=UTC)
    return Snapshot(
        record_id=document.get("recordId") or record_id,
        captured_at=captured_at,
        source_url=document.get("url", ""),
        main_text=document.get("mainText", ""),
        tables=fields.get("tables") or [],
        numeric_tokens=fields.get("numbers") or [],
        element_text=document.get("elementText"),
    )


class SnapshotRepository:
    """Append-only snapshot store rooted at a data directory.

    Layout: ``<data_dir>/<record namespace>/szczegoly-wniosku_<timestamp>.json``.
    Entries are never updated or deleted.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def record_dir(self, record_id: str) -> Path:
        return self.data_dir / record_namespace(record_id)

    def history(self, record_id: str) -> list[Path]:
        """All snapshot files for a record, oldest first."""
        directory = self.record_dir(record_id)
        if not directory.is_dir():
            return []
        return sorted(
            path
            for path in directory.iterdir()
            if path.name.startswith(FILE_PREFIX) and path.name.endswith(FILE_SUFFIX)
        )

    def load(self, path: Path, record_id: str) -> Snapshot:
        """Read a single snapshot file."""
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
            return snapshot_from_document(document, record_id)
        except (OSError, ValueError, KeyError, TypeError, ValidationError) as exc:
            msg = f"Could not read snapshot {path.name}: {exc}"
            raise PersistenceError(msg) from exc

    def latest(self, record_id: str) -> Snapshot | None:
        """Most recent snapshot for a record, or None before the first run."""
        try:
            entries = self.history(record_id)
        except OSError as exc:
            msg = f"Could not list snapshots for {record_id}: {exc}"
            raise PersistenceError(msg) from exc

        if not entries:
            logger.info("no_previous_snapshot", record_id=record_id)
            return None

        latest_path = entries[-1]
        logger.info("previous_snapshot_found", record_id=record_id, file=latest_path.name)
        return self.load(latest_path, record_id)

    def append(self, snapshot: Snapshot) -> Path:
        """Write a snapshot as a new entry. Returns the file path.

        Uses exclusive creation, so an existing entry is never overwritten;
        a name collision raises PersistenceError.
        """
        directory = self.record_dir(snapshot.record_id)
        path = directory / snapshot_filename(snapshot)
        payload = json.dumps(snapshot_to_document(snapshot), indent=2, ensure_ascii=False)

        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"Could not create snapshot directory {directory}: {exc}"
            raise PersistenceError(msg) from exc

        try:
            with path.open("x", encoding="utf-8") as fh:
                fh.write(payload)
        except FileExistsError as exc:
            msg = f"Snapshot {path.name} already exists for {snapshot.record_id}"
            raise PersistenceError(msg) from exc
        except OSError as exc:
            path.unlink(missing_ok=True)
            msg = f"Could not write snapshot {path.name}: {exc}"
            raise PersistenceError(msg) from exc

        logger.info("snapshot_saved", record_id=snapshot.record_id, file=path.name)
        return path
