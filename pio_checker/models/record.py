"""Monitored record configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RecordConfig(BaseModel):
    """Login credentials and lookup text for one monitored application.

    Loaded from accounts.json, where keys use the camelCase spelling
    (``elementText``).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    login: str
    password: str = Field(repr=False)
    element_text: str = Field(alias="elementText")
    headless: bool = True

    @field_validator("login", "password", "element_text")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        """Login, password and element text are all required."""
        if not value.strip():
            msg = "must not be empty"
            raise ValueError(msg)
        return value

    @property
    def record_id(self) -> str:
        return self.login
