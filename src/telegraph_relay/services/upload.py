"""Relay an uploaded file into Telegram and announce the resulting link."""

from __future__ import annotations

from typing import Optional

from telegraph_relay.clients.telegram import SendFailure, TelegramClient, UploadedFile
from telegraph_relay.logger import get_logger
from telegraph_relay.services.classify import classify_file_kind, file_extension
from telegraph_relay.services.file_id import extract_file_id
from telegraph_relay.services.notification import FileNotificationInfo, send_file_notification
from telegraph_relay.storage.metadata import FileRecord, MetadataStore, save_file_record

logger = get_logger(__name__)


class RelayError(RuntimeError):
    """Base class for failures surfaced to the uploader."""


class NoFileUploaded(RelayError):
    def __init__(self) -> None:
        super().__init__("No file uploaded")


class UploadFailed(RelayError):
    """Telegram rejected the upload after retries were exhausted."""


class NetworkError(RelayError):
    """Telegram could not be reached after retries were exhausted."""


class MissingFileId(RelayError):
    def __init__(self) -> None:
        super().__init__("Failed to get file ID")


async def relay_upload(
    upload: UploadedFile,
    *,
    client: TelegramClient,
    origin: str,
    metadata_store: Optional[MetadataStore] = None,
    disable_notification: bool = False,
    notification_chat_id: Optional[str] = None,
) -> str:
    """Store ``upload`` in Telegram and return its relative ``/file/...`` URL."""

    extension = file_extension(upload.name)
    kind = classify_file_kind(upload.mime_type)
    logger.info(
        "Relaying upload: name=%s, type=%s, size=%s, kind=%s",
        upload.name,
        upload.mime_type,
        upload.size_bytes,
        kind.value,
    )

    result = await client.send_file(kind, upload)
    if isinstance(result, SendFailure):
        if result.network:
            raise NetworkError(result.message)
        raise UploadFailed(result.message)

    file_id = extract_file_id(result.payload)
    if not file_id:
        raise MissingFileId()

    file_url = f"/file/{file_id}.{extension}"
    full_url = f"{origin.rstrip('/')}{file_url}"

    if metadata_store is not None:
        record = FileRecord(
            file_id=file_id,
            extension=extension,
            file_name=upload.name,
            file_size=upload.size_bytes,
            file_type=upload.mime_type,
        )
        try:
            await save_file_record(metadata_store, record)
        except Exception:
            logger.exception("Failed to record metadata for %s", record.key)

    await send_file_notification(
        client,
        FileNotificationInfo(
            file_name=upload.name,
            file_size=upload.size_bytes,
            file_url=full_url,
            file_type=upload.mime_type,
            file_id=file_id,
        ),
        disabled=disable_notification,
        chat_id=notification_chat_id,
    )

    logger.info("Upload stored as %s", file_url)
    return file_url
