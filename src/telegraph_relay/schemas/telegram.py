"""Pydantic models representing Telegram webhook payloads."""

from typing import Optional

from pydantic import BaseModel


class TelegramChat(BaseModel):
    """Basic information about a Telegram chat or channel."""

    id: int
    title: Optional[str] = None
    username: Optional[str] = None
    type: Optional[str] = None


class TelegramMessageEntity(BaseModel):
    """Formatting span inside a message; offsets are UTF-16 code units."""

    type: str
    offset: int
    length: int


class TelegramMessage(BaseModel):
    """Subset of Telegram message fields needed for the project."""

    message_id: Optional[int] = None
    text: Optional[str] = None
    entities: list[TelegramMessageEntity] = []
    chat: Optional[TelegramChat] = None


class TelegramCallbackQuery(BaseModel):
    """Inline keyboard button press."""

    id: str
    data: Optional[str] = None
    message: Optional[TelegramMessage] = None


class TelegramUpdate(BaseModel):
    """Top-level Telegram update payload."""

    update_id: Optional[int] = None
    callback_query: Optional[TelegramCallbackQuery] = None
