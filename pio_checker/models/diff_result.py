"""Diff result model for snapshot comparison."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator


class ChangeCategory(StrEnum):
    """Coarse groups of snapshot fields that can change between runs."""

    CONTENT = "content-change"
    TABLE = "table-change"
    NUMERIC = "numeric-change"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[ChangeCategory, str] = {
    ChangeCategory.CONTENT: "Main content has changed",
    ChangeCategory.TABLE: "Table data has changed",
    ChangeCategory.NUMERIC: "Numbers/dates have changed",
}


class DiffResult(BaseModel):
    """Changed categories between two snapshots of the same record."""

    model_config = ConfigDict(frozen=True)

    categories: tuple[ChangeCategory, ...] = ()

    @field_validator("categories")
    @classmethod
    def validate_unique(cls, value: tuple[ChangeCategory, ...]) -> tuple[ChangeCategory, ...]:
        """Each category may appear only once."""
        if len(set(value)) != len(value):
            msg = "categories must not contain duplicates"
            raise ValueError(msg)
        return value

    @property
    def has_changes(self) -> bool:
        return bool(self.categories)

    def __contains__(self, category: object) -> bool:
        return category in self.categories
