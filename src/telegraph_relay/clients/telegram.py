"""Async client for interacting with the Telegram Bot API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any, Optional, Union, cast

import httpx

from telegraph_relay.config.settings import AppSettings
from telegraph_relay.logger import get_logger

logger = get_logger(__name__)

MAX_RETRIES = 2
UPLOAD_FAILED_MESSAGE = "Upload to Telegram failed"
NETWORK_ERROR_MESSAGE = "Network error occurred"


class TelegramAPIError(RuntimeError):
    """Raised when a Telegram Bot API request fails."""


class TelegramClientConfigError(ValueError):
    """Raised when the bot token or storage chat id is missing."""


class FileKind(str, Enum):
    """Upload category chosen from the MIME type of a file."""

    PHOTO = "photo"
    AUDIO = "audio"
    VIDEO = "video"
    DOCUMENT = "document"

    @property
    def endpoint(self) -> str:
        return f"send{self.value.capitalize()}"

    @property
    def field_name(self) -> str:
        return self.value


@dataclass(slots=True)
class UploadedFile:
    """A file received from an uploader, held for the duration of one request."""

    name: str
    mime_type: str
    size_bytes: int
    content: bytes


@dataclass(slots=True)
class SendSuccess:
    payload: dict[str, Any]


@dataclass(slots=True)
class SendFailure:
    message: str
    network: bool = False


TelegramSendResult = Union[SendSuccess, SendFailure]


@dataclass(slots=True)
class TelegramClient:
    """Telegram client used as file storage and as a notification channel."""

    bot_token: str
    chat_id: str
    base_url: str = "https://api.telegram.org"
    upload_timeout: Optional[float] = 60.0
    retry_delay: float = 1.0
    max_retries: int = MAX_RETRIES

    def method_url(self, method: str) -> str:
        return f"{self.base_url}/bot{self.bot_token}/{method}"

    def file_url(self, file_path: str) -> str:
        return f"{self.base_url}/file/bot{self.bot_token}/{file_path.lstrip('/')}"

    async def send_file(
        self,
        kind: FileKind,
        upload: UploadedFile,
        *,
        chat_id: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> TelegramSendResult:
        """Upload ``upload`` to the chat and return the tagged outcome.

        A single retry budget of ``max_retries`` covers two failure modes. A
        non-2xx answer to a ``photo`` upload is retried once as a ``document``
        with the same bytes. A transport error (timeout, DNS, refused
        connection) is retried unchanged after ``retry_delay * attempt``
        seconds. A 2xx answer ends the loop immediately.
        """

        target_chat = chat_id or self.chat_id
        effective_timeout = timeout if timeout is not None else self.upload_timeout

        async def _send(client: httpx.AsyncClient) -> TelegramSendResult:
            current_kind = kind
            attempt = 0

            while True:
                try:
                    response = await client.post(
                        self.method_url(current_kind.endpoint),
                        data={"chat_id": target_chat},
                        files={
                            current_kind.field_name: (
                                upload.name,
                                upload.content,
                                upload.mime_type or "application/octet-stream",
                            )
                        },
                    )
                except httpx.TransportError as exc:
                    logger.error(
                        "Network error while calling %s (attempt %s): %s",
                        current_kind.endpoint,
                        attempt + 1,
                        exc,
                    )
                    if attempt < self.max_retries:
                        attempt += 1
                        await asyncio.sleep(self.retry_delay * attempt)
                        continue
                    return SendFailure(NETWORK_ERROR_MESSAGE, network=True)

                payload = _decode_json_object(response)

                if response.is_success:
                    return SendSuccess(payload)

                logger.warning(
                    "Telegram %s rejected upload: status=%s, body=%s",
                    current_kind.endpoint,
                    response.status_code,
                    response.text,
                )

                if attempt < self.max_retries and current_kind is FileKind.PHOTO:
                    logger.info("Retrying image as document...")
                    attempt += 1
                    current_kind = FileKind.DOCUMENT
                    continue

                description = payload.get("description")
                return SendFailure(str(description) if description else UPLOAD_FAILED_MESSAGE)

        if http_client is not None:
            return await _send(http_client)

        async with httpx.AsyncClient(timeout=effective_timeout) as client:
            return await _send(client)

    async def send_message(
        self,
        text: str,
        *,
        chat_id: Optional[str] = None,
        parse_mode: Optional[str] = None,
        reply_markup: Optional[dict[str, Any]] = None,
        disable_web_page_preview: bool = False,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = 10.0,
    ) -> dict[str, Any]:
        """Send a message to the configured chat and return the Telegram response.

        Parameters
        ----------
        text:
            Message body to post.
        chat_id:
            Override for the destination chat; defaults to the storage chat.
        parse_mode:
            Telegram formatting mode such as ``"Markdown"``.
        reply_markup:
            Inline keyboard description attached to the message.
        disable_web_page_preview:
            Whether to suppress link previews in Telegram.
        http_client:
            Optional existing :class:`httpx.AsyncClient` to reuse. When ``None``, a temporary
            client is created.
        timeout:
            Timeout, in seconds, for the Telegram HTTP request.
        """

        if not text.strip():
            raise ValueError("Telegram messages must contain non-empty text")

        payload: dict[str, Any] = {
            "chat_id": chat_id or self.chat_id,
            "text": text,
            "disable_web_page_preview": disable_web_page_preview,
        }
        if parse_mode:
            payload["parse_mode"] = parse_mode
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup

        return await self._call_json(
            "sendMessage", payload, http_client=http_client, timeout=timeout
        )

    async def answer_callback_query(
        self,
        callback_query_id: str,
        *,
        text: Optional[str] = None,
        show_alert: bool = False,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = 10.0,
    ) -> dict[str, Any]:
        """Acknowledge an inline button press, optionally with a pop-up alert."""

        if not callback_query_id:
            raise ValueError("A callback_query_id is required to answer a callback query")

        payload: dict[str, Any] = {
            "callback_query_id": callback_query_id,
            "show_alert": show_alert,
        }
        if text is not None:
            payload["text"] = text

        return await self._call_json(
            "answerCallbackQuery", payload, http_client=http_client, timeout=timeout
        )

    async def get_file(
        self,
        file_id: str,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = 10.0,
    ) -> dict[str, Any]:
        """Return the ``File`` object (including ``file_path``) for ``file_id``."""

        response = await self._call_json(
            "getFile", {"file_id": file_id}, http_client=http_client, timeout=timeout
        )
        result = response.get("result")
        if not isinstance(result, dict) or not result.get("file_path"):
            raise TelegramAPIError("Telegram getFile response did not include a file path")
        return cast(dict[str, Any], result)

    async def download_file(
        self,
        file_path: str,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """Fetch the raw bytes of a stored file."""

        url = self.file_url(file_path)
        effective_timeout = timeout if timeout is not None else self.upload_timeout

        async def _get(client: httpx.AsyncClient) -> httpx.Response:
            response = await client.get(url)
            if response.status_code != HTTPStatus.OK:
                raise TelegramAPIError(
                    f"Telegram file download failed: status={response.status_code}"
                )
            return response

        if http_client is not None:
            return await _get(http_client)

        async with httpx.AsyncClient(timeout=effective_timeout) as client:
            return await _get(client)

    async def _call_json(
        self,
        method: str,
        payload: dict[str, Any],
        *,
        http_client: Optional[httpx.AsyncClient],
        timeout: Optional[float],
    ) -> dict[str, Any]:
        url = self.method_url(method)

        async def _post(client: httpx.AsyncClient) -> dict[str, Any]:
            response = await client.post(url, json=payload)

            if response.status_code != HTTPStatus.OK:
                raise TelegramAPIError(
                    f"Telegram {method} request failed: "
                    f"status={response.status_code}, body={response.text}"
                )

            try:
                payload_raw = response.json()
            except ValueError as exc:  # pragma: no cover - defensive guard
                raise TelegramAPIError(f"Telegram {method} response was not valid JSON") from exc

            if not isinstance(payload_raw, dict):
                raise TelegramAPIError(f"Telegram {method} response had unexpected structure")

            payload_obj = cast(dict[str, Any], payload_raw)

            if not bool(payload_obj.get("ok", False)):
                description = str(payload_obj.get("description", "Unknown error"))
                raise TelegramAPIError(f"Telegram {method} failed: {description}")

            return payload_obj

        if http_client is not None:
            return await _post(http_client)

        async with httpx.AsyncClient(timeout=timeout) as client:
            return await _post(client)


def _decode_json_object(response: httpx.Response) -> dict[str, Any]:
    try:
        payload_raw = response.json()
    except ValueError:
        return {}
    if not isinstance(payload_raw, dict):
        return {}
    return cast(dict[str, Any], payload_raw)


def build_telegram_client(settings: AppSettings) -> TelegramClient:
    """Create a TelegramClient instance from application settings."""

    if not settings.telegram_bot_token or not settings.telegram_chat_id:
        raise TelegramClientConfigError(
            "TG_BOT_TOKEN and TG_CHAT_ID are required to instantiate TelegramClient"
        )

    return TelegramClient(
        bot_token=settings.telegram_bot_token,
        chat_id=settings.telegram_chat_id,
        base_url=settings.telegram_api_base_url.rstrip("/"),
        upload_timeout=settings.telegram_timeout,
    )
