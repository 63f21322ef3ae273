"""Client integrations for external services."""

from .telegram import (
    MAX_RETRIES,
    FileKind,
    SendFailure,
    SendSuccess,
    TelegramAPIError,
    TelegramClient,
    TelegramClientConfigError,
    TelegramSendResult,
    UploadedFile,
    build_telegram_client,
)

__all__ = [
    "MAX_RETRIES",
    "FileKind",
    "SendFailure",
    "SendSuccess",
    "TelegramAPIError",
    "TelegramClient",
    "TelegramClientConfigError",
    "TelegramSendResult",
    "UploadedFile",
    "build_telegram_client",
]
