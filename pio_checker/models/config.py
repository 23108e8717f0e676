"""Application configuration model using pydantic-settings."""

from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: str = "data"
    accounts_file: str = "accounts.json"
    settings_file: str = "settings.json"
    mail: str | None = None
    mail_password: str | None = Field(
        default=None,
        validation_alias=AliasChoices("mail_password", "pass"),
    )
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    log_level: str = "INFO"
    headless: bool = True
    inter_record_delay_seconds: float = 3.0
    fetch_max_attempts: int = 3
    fetch_retry_wait_seconds: float = 5.0
    page_timeout_ms: int = 60_000
    login_url: str = "https://pio-przybysz.duw.pl/login"
    applications_url: str = "https://pio-przybysz.duw.pl/wnioski-przyjete"
    details_url_prefix: str = "https://pio-przybysz.duw.pl/szczegoly-wniosku"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Log level must be a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            msg = f"log_level must be one of {', '.join(sorted(valid_levels))}"
            raise ValueError(msg)
        return upper_value

    @field_validator("inter_record_delay_seconds", "fetch_retry_wait_seconds")
    @classmethod
    def validate_non_negative(cls, value: float) -> float:
        """Delays cannot be negative."""
        if value < 0:
            msg = "delay must not be negative"
            raise ValueError(msg)
        return value

    @field_validator("fetch_max_attempts")
    @classmethod
    def validate_fetch_max_attempts(cls, value: int) -> int:
        """Fetch attempts must be between 1 and 10."""
        if value < 1 or value > 10:
            msg = "fetch_max_attempts must be between 1 and 10"
            raise ValueError(msg)
        return value

    @property
    def email_enabled(self) -> bool:
        return bool(self.mail and self.mail_password)
