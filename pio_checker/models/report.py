"""Rendered long-form report."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Report(BaseModel):
    """Email-ready report: subject line plus HTML body."""

    model_config = ConfigDict(frozen=True)

    subject: str
    html_body: str
