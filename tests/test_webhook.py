from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from telegraph_relay.api.webhook import build_copy_link_alert
from telegraph_relay.clients import TelegramAPIError, TelegramClient
from telegraph_relay.main import app
from telegraph_relay.schemas import TelegramCallbackQuery
from telegraph_relay.services import FileNotificationInfo, build_notification

FILE_URL = "https://img.example.com/file/AgACAgQ.png"


def _notification_text() -> str:
    return build_notification(
        FileNotificationInfo(
            file_name="a.png",
            file_size=10,
            file_url=FILE_URL,
            file_type="image/png",
            file_id="AgACAgQ",
        )
    ).text


def _callback_update(data: str, text: str | None = None) -> dict[str, Any]:
    message: dict[str, Any] = {"message_id": 99, "chat": {"id": -100123, "type": "channel"}}
    if text is not None:
        message["text"] = text
    return {
        "update_id": 1,
        "callback_query": {
            "id": "cbq-1",
            "from": {"id": 5, "is_bot": False, "first_name": "Ann"},
            "data": data,
            "message": message,
        },
    }


async def _post(path: str, **kwargs: Any) -> Any:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post(path, **kwargs)


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/webhook/telegram", "/upload"])
async def test_copy_link_callback_is_answered_with_url(app_state: Any, path: str) -> None:
    with patch.object(
        TelegramClient, "answer_callback_query", new_callable=AsyncMock
    ) as mock_answer:
        mock_answer.return_value = {"ok": True, "result": True}
        response = await _post(path, json=_callback_update("copy_link", _notification_text()))

    assert response.status_code == 200
    assert response.text == "OK"
    mock_answer.assert_awaited_once()
    assert mock_answer.await_args is not None
    assert mock_answer.await_args.args == ("cbq-1",)
    assert mock_answer.await_args.kwargs["show_alert"] is True
    assert mock_answer.await_args.kwargs["text"].endswith(f"\n\n{FILE_URL}")


@pytest.mark.asyncio
async def test_copy_link_without_link_answers_fallback(app_state: Any) -> None:
    with patch.object(
        TelegramClient, "answer_callback_query", new_callable=AsyncMock
    ) as mock_answer:
        response = await _post(
            "/webhook/telegram", json=_callback_update("copy_link", "plain message")
        )

    assert response.status_code == 200
    assert mock_answer.await_args is not None
    assert mock_answer.await_args.kwargs["text"] == "Link not found."


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        _callback_update("copy:AgACAgQ", "text"),
        {"update_id": 2, "message": {"message_id": 1, "text": "hello"}},
        {"update_id": 3, "callback_query": {"data": "copy_link"}},
        [1, 2, 3],
    ],
)
async def test_other_updates_are_ignored(app_state: Any, payload: Any) -> None:
    with patch.object(
        TelegramClient, "answer_callback_query", new_callable=AsyncMock
    ) as mock_answer:
        response = await _post("/webhook/telegram", json=payload)

    assert response.status_code == 200
    assert response.text == "OK"
    mock_answer.assert_not_awaited()


@pytest.mark.asyncio
async def test_invalid_json_returns_plain_text_error(app_state: Any) -> None:
    response = await _post(
        "/webhook/telegram",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 500
    assert response.text == "Error handling webhook"
    assert response.headers["content-type"].startswith("text/plain")


@pytest.mark.asyncio
async def test_answer_failure_still_acknowledges_update(app_state: Any) -> None:
    with patch.object(
        TelegramClient, "answer_callback_query", new_callable=AsyncMock
    ) as mock_answer:
        mock_answer.side_effect = TelegramAPIError("query is too old")
        response = await _post(
            "/webhook/telegram", json=_callback_update("copy_link", _notification_text())
        )

    assert response.status_code == 200


def test_build_copy_link_alert_reads_pre_entity() -> None:
    text = f"File uploaded successfully!\n\n{FILE_URL}\n\nUploaded via Telegraph-Image"
    callback_query = TelegramCallbackQuery.model_validate(
        {
            "id": "cbq-2",
            "data": "copy_link",
            "message": {
                "message_id": 4,
                "text": text,
                "entities": [
                    {"type": "pre", "offset": text.index(FILE_URL), "length": len(FILE_URL)}
                ],
            },
        }
    )

    assert build_copy_link_alert(callback_query) == f"Link ready, paste it anywhere!\n\n{FILE_URL}"


def test_build_copy_link_alert_without_message() -> None:
    callback_query = TelegramCallbackQuery.model_validate({"id": "cbq-3", "data": "copy_link"})

    assert build_copy_link_alert(callback_query) == "Link not found."
