from collections.abc import Iterator
from typing import Any

import pytest

from telegraph_relay.clients import TelegramClient
from telegraph_relay.config.settings import AppSettings
from telegraph_relay.main import app
from telegraph_relay.storage import InMemoryMetadataStore

_STATE_ATTRIBUTES = ("settings", "telegram_client", "metadata_store")


@pytest.fixture
def app_state() -> Iterator[Any]:
    """Install a configured client, settings and store on the app for one test."""

    original = {name: getattr(app.state, name, None) for name in _STATE_ATTRIBUTES}

    app.state.settings = AppSettings.model_validate(
        {"TG_BOT_TOKEN": "TOKEN", "TG_CHAT_ID": "CHAT"}
    )
    app.state.telegram_client = TelegramClient(
        bot_token="TOKEN", chat_id="CHAT", retry_delay=0
    )
    app.state.metadata_store = InMemoryMetadataStore()

    try:
        yield app.state
    finally:
        for name, value in original.items():
            setattr(app.state, name, value)
