"""Shared Pydantic models used across the application."""

from .telegram import (
    TelegramCallbackQuery,
    TelegramChat,
    TelegramMessage,
    TelegramMessageEntity,
    TelegramUpdate,
)

__all__ = [
    "TelegramCallbackQuery",
    "TelegramChat",
    "TelegramMessage",
    "TelegramMessageEntity",
    "TelegramUpdate",
]
