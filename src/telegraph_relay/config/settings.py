"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


IGNORE_DOTENV_ENV_VAR = "TELEGRAPH_RELAY_IGNORE_DOTENV"
DEFAULT_TELEGRAM_API_BASE_URL = "https://api.telegram.org"


class AppSettings(BaseSettings):
    """Centralized configuration values for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    telegram_bot_token: Optional[str] = Field(default=None, alias="TG_BOT_TOKEN")
    telegram_chat_id: Optional[str] = Field(default=None, alias="TG_CHAT_ID")
    notification_chat_id: Optional[str] = Field(default=None, alias="NOTIFICATION_CHAT_ID")
    disable_notification: bool = Field(default=False, alias="DISABLE_NOTIFICATION")
    metadata_store_path: Optional[str] = Field(default=None, alias="METADATA_STORE_PATH")
    telegram_api_base_url: str = Field(
        default=DEFAULT_TELEGRAM_API_BASE_URL, alias="TELEGRAM_API_BASE_URL"
    )
    telegram_timeout: float = Field(default=60.0, alias="TELEGRAM_TIMEOUT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    def resolved_notification_chat_id(self) -> Optional[str]:
        """Return the chat that receives upload notifications."""

        return self.notification_chat_id or self.telegram_chat_id


@lru_cache
def get_settings(*, ignore_dotenv: Optional[bool] = None) -> AppSettings:
    """Return a cached instance of application settings.

    Parameters
    ----------
    ignore_dotenv:
        Explicitly control whether the `.env` file should be ignored. When ``None``
        (the default), the environment variable ``TELEGRAPH_RELAY_IGNORE_DOTENV``
        controls the behavior (case-insensitive truthy values disable the file).
    """

    if ignore_dotenv is None:
        env_override = os.getenv(IGNORE_DOTENV_ENV_VAR, "")
        ignore_dotenv = env_override.lower() in {"1", "true", "yes", "on"}

    if ignore_dotenv:
        return AppSettings(_env_file=None)  # type: ignore[call-arg]

    return AppSettings()
