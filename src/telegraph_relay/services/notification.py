"""Build and send the "file uploaded" notification message."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

import httpx

from telegraph_relay.clients.telegram import TelegramAPIError, TelegramClient
from telegraph_relay.logger import get_logger

logger = get_logger(__name__)

COPY_LINK_CALLBACK = "copy_link"
PARSE_MODE = "Markdown"

_KIB = 1024
_MIB = _KIB * 1024
_GIB = _MIB * 1024

_CODE_BLOCK_PATTERN = re.compile(r"```\n?(\S+?)\n?```")
_ARCHIVE_MARKERS = ("zip", "rar", "7z")


@dataclass(slots=True)
class FileNotificationInfo:
    file_name: str
    file_size: int
    file_url: str
    file_type: str
    file_id: str


@dataclass(slots=True)
class NotificationPayload:
    """Message text and inline keyboard posted after a successful upload."""

    text: str
    reply_markup: dict[str, Any] = field(default_factory=dict)
    parse_mode: str = PARSE_MODE
    disable_web_page_preview: bool = False


def format_file_size(size_bytes: int) -> str:
    """Render a byte count with binary multiples and one decimal place."""

    if size_bytes < _KIB:
        return f"{size_bytes} B"
    if size_bytes < _MIB:
        return f"{size_bytes / _KIB:.1f} KB"
    if size_bytes < _GIB:
        return f"{size_bytes / _MIB:.1f} MB"
    return f"{size_bytes / _GIB:.1f} GB"


def file_icon(mime_type: str | None) -> str:
    content_type = mime_type or ""
    if content_type.startswith("image/"):
        return "🖼️"
    if content_type.startswith("video/"):
        return "🎬"
    if content_type.startswith("audio/"):
        return "🎵"
    if "pdf" in content_type:
        return "📄"
    if any(marker in content_type for marker in _ARCHIVE_MARKERS):
        return "📦"
    return "📎"


def build_notification(info: FileNotificationInfo) -> NotificationPayload:
    """Compose the notification; the raw URL sits alone in a code block."""

    text = "\n".join(
        [
            "🎉 *File uploaded successfully!*",
            "",
            f"{file_icon(info.file_type)} *File name:* `{info.file_name}`",
            f"📏 *Size:* {format_file_size(info.file_size)}",
            f"🆔 *File ID:* `{info.file_id}`",
            f"🔗 *Link:* [Open file]({info.file_url})",
            "",
            "```",
            info.file_url,
            "```",
            "",
            "_Uploaded via Telegraph-Image_",
        ]
    )

    reply_markup = {
        "inline_keyboard": [
            [
                {"text": "🔗 Direct access", "url": info.file_url},
                # callback_data is capped at 64 bytes, so the link itself is
                # recovered from the message text when the button is pressed.
                {"text": "📋 Copy link", "callback_data": COPY_LINK_CALLBACK},
            ]
        ]
    }

    return NotificationPayload(text=text, reply_markup=reply_markup)


def extract_link(
    text: Optional[str],
    entities: Optional[Iterable[Mapping[str, Any]]] = None,
) -> Optional[str]:
    """Recover the file URL from a notification message as Telegram echoes it back.

    Telegram strips Markdown markers from ``message.text`` and reports the code
    block as a ``pre`` entity instead, with offsets counted in UTF-16 code
    units. The literal triple-backtick block is matched when no such entity is
    present.
    """

    if not text:
        return None

    for entity in entities or ():
        if entity.get("type") != "pre":
            continue
        snippet = _slice_utf16(text, int(entity.get("offset", 0)), int(entity.get("length", 0)))
        snippet = snippet.strip()
        if snippet and not any(char.isspace() for char in snippet):
            return snippet

    match = _CODE_BLOCK_PATTERN.search(text)
    if match:
        return match.group(1)
    return None


def _slice_utf16(text: str, offset: int, length: int) -> str:
    encoded = text.encode("utf-16-le")
    return encoded[offset * 2 : (offset + length) * 2].decode("utf-16-le", errors="ignore")


async def send_file_notification(
    client: TelegramClient,
    info: FileNotificationInfo,
    *,
    disabled: bool = False,
    chat_id: Optional[str] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> None:
    """Post the notification; failures are logged and never raised."""

    if disabled:
        logger.debug("Upload notifications disabled; skipping message for %s", info.file_id)
        return

    payload = build_notification(info)

    try:
        await client.send_message(
            payload.text,
            chat_id=chat_id,
            parse_mode=payload.parse_mode,
            reply_markup=payload.reply_markup,
            disable_web_page_preview=payload.disable_web_page_preview,
            http_client=http_client,
        )
    except (TelegramAPIError, httpx.HTTPError):
        logger.exception("Failed to send file notification for %s", info.file_id)
        return

    logger.info("File notification sent successfully for %s", info.file_id)
