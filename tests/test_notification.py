import logging
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from telegraph_relay.clients import TelegramAPIError, TelegramClient
from telegraph_relay.services import (
    COPY_LINK_CALLBACK,
    FileNotificationInfo,
    build_notification,
    extract_link,
    file_icon,
    format_file_size,
    send_file_notification,
)


def _info(file_url: str = "https://img.example.com/file/abc.png") -> FileNotificationInfo:
    return FileNotificationInfo(
        file_name="a.png",
        file_size=2048,
        file_url=file_url,
        file_type="image/png",
        file_id="abc",
    )


@pytest.mark.parametrize(
    ("size_bytes", "expected"),
    [
        (0, "0 B"),
        (1023, "1023 B"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (1048576, "1.0 MB"),
        (5 * 1048576 + 104858, "5.1 MB"),
        (1073741824, "1.0 GB"),
        (3 * 1073741824, "3.0 GB"),
    ],
)
def test_format_file_size(size_bytes: int, expected: str) -> None:
    assert format_file_size(size_bytes) == expected


@pytest.mark.parametrize(
    ("mime_type", "expected"),
    [
        ("image/gif", "🖼️"),
        ("video/webm", "🎬"),
        ("audio/ogg", "🎵"),
        ("application/pdf", "📄"),
        ("application/zip", "📦"),
        ("application/x-rar-compressed", "📦"),
        ("application/x-7z-compressed", "📦"),
        ("text/plain", "📎"),
        ("", "📎"),
    ],
)
def test_file_icon(mime_type: str, expected: str) -> None:
    assert file_icon(mime_type) == expected


def test_build_notification_contents() -> None:
    payload = build_notification(_info())

    assert "a.png" in payload.text
    assert "2.0 KB" in payload.text
    assert "`abc`" in payload.text
    assert "[Open file](https://img.example.com/file/abc.png)" in payload.text
    assert "```\nhttps://img.example.com/file/abc.png\n```" in payload.text
    assert payload.parse_mode == "Markdown"

    buttons = payload.reply_markup["inline_keyboard"][0]
    assert buttons[0] == {"text": "🔗 Direct access", "url": "https://img.example.com/file/abc.png"}
    assert buttons[1]["callback_data"] == COPY_LINK_CALLBACK
    assert len(buttons[1]["callback_data"].encode("utf-8")) <= 64


def test_link_round_trips_through_message_text() -> None:
    payload = build_notification(_info(file_url="/file/abc.png"))

    assert "```\n/file/abc.png\n```" in payload.text
    assert extract_link(payload.text) == "/file/abc.png"


def test_extract_link_uses_pre_entity_offsets() -> None:
    # Telegram removes the backticks and counts offsets in UTF-16 code units;
    # the emoji prefix takes two units each.
    url = "https://img.example.com/file/abc.png"
    text = f"🎉 File uploaded successfully!\n\n{url}\n\nUploaded via Telegraph-Image"
    prefix = "🎉 File uploaded successfully!\n\n"
    offset = len(prefix.encode("utf-16-le")) // 2
    entities = [
        {"type": "bold", "offset": 3, "length": 5},
        {"type": "pre", "offset": offset, "length": len(url)},
    ]

    assert extract_link(text, entities) == url


def test_extract_link_returns_none_without_block() -> None:
    assert extract_link("no link here") is None
    assert extract_link(None) is None
    assert extract_link("") is None


@pytest.mark.asyncio
async def test_send_file_notification_posts_message() -> None:
    client = TelegramClient(bot_token="TOKEN", chat_id="CHAT")

    with patch.object(TelegramClient, "send_message", new_callable=AsyncMock) as mock_send:
        mock_send.return_value = {"ok": True}
        await send_file_notification(client, _info(), chat_id="NOTIFY")

    mock_send.assert_awaited_once()
    assert mock_send.await_args is not None
    assert mock_send.await_args.kwargs["chat_id"] == "NOTIFY"
    assert mock_send.await_args.kwargs["parse_mode"] == "Markdown"
    assert "inline_keyboard" in mock_send.await_args.kwargs["reply_markup"]


@pytest.mark.asyncio
async def test_send_file_notification_skips_when_disabled() -> None:
    client = TelegramClient(bot_token="TOKEN", chat_id="CHAT")

    with patch.object(TelegramClient, "send_message", new_callable=AsyncMock) as mock_send:
        await send_file_notification(client, _info(), disabled=True)

    mock_send.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [TelegramAPIError("chat not found"), httpx.ConnectError("unreachable")],
)
async def test_send_file_notification_swallows_failures(
    error: Exception, caplog: pytest.LogCaptureFixture
) -> None:
    client = TelegramClient(bot_token="TOKEN", chat_id="CHAT")

    with patch.object(TelegramClient, "send_message", new_callable=AsyncMock) as mock_send:
        mock_send.side_effect = error
        with caplog.at_level(logging.ERROR):
            await send_file_notification(client, _info())

    assert "Failed to send file notification" in caplog.text
