"""Upload endpoint: relays multipart files into Telegram."""

from typing import Any

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.datastructures import UploadFile

from telegraph_relay.api.state import (
    get_metadata_store_from_request,
    get_request_origin,
    get_settings_from_request,
    get_telegram_client_from_request,
)
from telegraph_relay.api.webhook import process_webhook_request
from telegraph_relay.clients import UploadedFile
from telegraph_relay.logger import get_logger
from telegraph_relay.services import NoFileUploaded, RelayError, relay_upload

router = APIRouter(tags=["upload"])
logger = get_logger(__name__)

UNSUPPORTED_CONTENT_TYPE_TEXT = (
    "Unsupported request type. Please send either multipart/form-data for uploads "
    "or application/json for webhooks."
)


@router.post("/upload")
async def handle_upload(request: Request) -> Response:
    """Dispatch on content type: multipart uploads or Telegram webhook updates."""

    content_type = request.headers.get("content-type", "")

    if "multipart/form-data" in content_type:
        return await process_upload_request(request)
    if "application/json" in content_type:
        return await process_webhook_request(request)

    return PlainTextResponse(
        UNSUPPORTED_CONTENT_TYPE_TEXT, status_code=status.HTTP_400_BAD_REQUEST
    )


async def process_upload_request(request: Request) -> Response:
    try:
        form = await request.form()
        upload = await read_uploaded_file(form.get("file"))

        telegram_client = get_telegram_client_from_request(request)
        if telegram_client is None:
            raise RelayError("Telegram client is not configured")

        settings = get_settings_from_request(request)
        file_url = await relay_upload(
            upload,
            client=telegram_client,
            origin=get_request_origin(request),
            metadata_store=get_metadata_store_from_request(request),
            disable_notification=settings.disable_notification,
            notification_chat_id=settings.resolved_notification_chat_id(),
        )
    except Exception as exc:
        logger.exception("Upload error")
        return JSONResponse(
            content={"error": str(exc)},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return JSONResponse(content=[{"src": file_url}])


async def read_uploaded_file(field: Any) -> UploadedFile:
    """Read the multipart ``file`` field fully into memory."""

    if not isinstance(field, UploadFile):
        raise NoFileUploaded()

    try:
        content = await field.read()
    finally:
        await field.close()

    return UploadedFile(
        name=field.filename or "",
        mime_type=field.content_type or "",
        size_bytes=field.size if field.size is not None else len(content),
        content=content,
    )
