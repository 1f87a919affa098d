from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Level names uvicorn accepts. configure_logging() takes the same names.
_LOG_LEVELS = ("critical", "error", "warning", "info", "debug", "trace")
_LOG_LEVEL_ALIASES = {"warn": "warning", "fatal": "critical"}


def normalize_log_level(value: str | None) -> str:
    level = (value or "").lower().strip()
    level = _LOG_LEVEL_ALIASES.get(level, level)
    return level if level in _LOG_LEVELS else "info"


class Settings(BaseSettings):
    # Local dev: load from .env automatically.
    # In production: you typically inject real env vars instead.
    model_config = SettingsConfigDict(
        env_prefix="", extra="ignore", env_file=".env", env_file_encoding="utf-8", populate_by_name=True
    )

    # Env vars:
    # - HOST / PORT: bind address (PORT may be overridden by the secret payload)
    # - SECRET_PROVIDER: "aws" (default), "env" (use SECRET_KEY) or "none"
    # - SECRET_NAME / AWS_REGION: where the secret lives in AWS Secrets Manager
    # - SECRET_KEY: only read by the "env" provider
    # - IDENTIFIER_FIELD: "email" (default) or "username"
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT")

    secret_provider: str = Field(default="aws", validation_alias="SECRET_PROVIDER")
    secret_name: str = Field(default="myapp-secret", validation_alias="SECRET_NAME")
    aws_region: str = Field(default="ap-south-1", validation_alias="AWS_REGION")
    secret_key: str = Field(default="", validation_alias="SECRET_KEY")

    identifier_field: str = Field(default="email", validation_alias="IDENTIFIER_FIELD")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def model_post_init(self, __context):  # type: ignore[override]
        self.secret_provider = (self.secret_provider or "aws").lower().strip()
        # Anything other than "username" falls back to the email-keyed registry.
        field = (self.identifier_field or "").lower().strip()
        self.identifier_field = "username" if field == "username" else "email"
        self.log_level = normalize_log_level(self.log_level)


def get_settings() -> Settings:
    """Load settings from environment.

    Keep this as the single canonical constructor for Settings(). FastAPI
    dependencies and tests can override/monkeypatch this function.
    """
    return Settings()
