"""Repository for monitored record configurations stored in accounts.json."""

from __future__ import annotations

import json
from pathlib import Path

import structlog
from pydantic import ValidationError

from pio_checker.core.errors import AccountsFileError, RecordNotFoundError
from pio_checker.models.record import RecordConfig

logger = structlog.get_logger(__name__)


class AccountRepository:
    """Loads record configurations from a JSON array file."""

    def __init__(self, accounts_file: str | Path, headless: bool | None = None) -> None:
        self.accounts_file = Path(accounts_file)
        self.headless = headless

    def load_all(self) -> list[RecordConfig]:
        """Load and validate every configured record, preserving file order.

        A ``headless`` override given to the repository replaces the value of
        every entry.
        """
        if not self.accounts_file.exists():
            msg = (
                f"{self.accounts_file} not found. "
                "Please create it with your account configurations."
            )
            raise AccountsFileError(msg)

        logger.info("loading_accounts", path=str(self.accounts_file))
        try:
            entries = json.loads(self.accounts_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            msg = f"Could not read {self.accounts_file}: {exc}"
            raise AccountsFileError(msg) from exc

        if not isinstance(entries, list) or not entries:
            msg = f"{self.accounts_file} must contain an array of account configurations."
            raise AccountsFileError(msg)

        records: list[RecordConfig] = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                msg = f"Account entry {index} must be an object"
                raise AccountsFileError(msg)
            if self.headless is not None:
                entry = {**entry, "headless": self.headless}
            try:
                records.append(RecordConfig.model_validate(entry))
            except ValidationError as exc:
                login = entry.get("login", f"#{index}")
                msg = (
                    f"Missing required configuration for account {login}: "
                    f"login, password, or elementText ({exc.error_count()} errors)"
                )
                raise AccountsFileError(msg) from exc

        return records

    def find(self, record_id: str) -> RecordConfig:
        """Return the configuration whose record id matches."""
        for record in self.load_all():
            if record.record_id == record_id:
                return record
        msg = f"Account with login '{record_id}' not found"
        raise RecordNotFoundError(msg)
