"""Configuration and environment settings for the ledger metrics exporter."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for the ledger metrics exporter."""

    ledger_token: str | None = Field(default=None, validation_alias=AliasChoices("ledger_token", "gitea_token"))
    ledger_url: str | None = Field(default=None, validation_alias=AliasChoices("ledger_url", "gitea_journal_url"))
    ledger_path: str = "/tmp/main.journal"  # noqa: S108
    hledger_bin: str = "hledger"
    balance_depth: int = 5
    refresh_interval_seconds: float = 300.0
    refresh_on_startup: bool = True
    fetch_timeout_seconds: float = 10.0
    report_timeout_seconds: float = 60.0
    retain_on_failure: bool = True
    log_file: str = "logs/exporter.log"
    server_host: str = "127.0.0.1"
    server_port: int = 9000

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def get_settings() -> "Settings":
    """Return an instance of the application settings."""
    return Settings()
