"""Accessors for collaborators stored on the FastAPI application state."""

from typing import Optional

from fastapi import Request

from telegraph_relay.clients import TelegramClient
from telegraph_relay.config.settings import AppSettings, get_settings
from telegraph_relay.logger import get_logger
from telegraph_relay.storage import MetadataStore

logger = get_logger(__name__)


def get_telegram_client_from_request(request: Request) -> TelegramClient | None:
    """Return the configured Telegram client from the FastAPI application state."""

    telegram_client = getattr(request.app.state, "telegram_client", None)
    if telegram_client is None:
        return None
    if not isinstance(telegram_client, TelegramClient):
        type_name = type(telegram_client).__name__
        logger.warning("Unexpected telegram_client type on app state: %s", type_name)
        return None
    return telegram_client


def get_metadata_store_from_request(request: Request) -> Optional[MetadataStore]:
    return getattr(request.app.state, "metadata_store", None)


def get_settings_from_request(request: Request) -> AppSettings:
    """Return the settings loaded at startup, falling back to the cached ones."""

    settings = getattr(request.app.state, "settings", None)
    if isinstance(settings, AppSettings):
        return settings
    return get_settings()


def get_request_origin(request: Request) -> str:
    return f"{request.url.scheme}://{request.url.netloc}"
