"""Serve stored files back by proxying them from Telegram."""

import mimetypes

import httpx
from fastapi import APIRouter, HTTPException, Request, Response, status

from telegraph_relay.api.state import get_telegram_client_from_request
from telegraph_relay.clients import TelegramAPIError
from telegraph_relay.logger import get_logger

router = APIRouter(prefix="/file", tags=["files"])
logger = get_logger(__name__)


@router.get("/{file_name}", summary="Download a stored file")
async def get_stored_file(file_name: str, request: Request) -> Response:
    telegram_client = get_telegram_client_from_request(request)
    if telegram_client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Telegram client is not configured",
        )

    file_id = file_name.rsplit(".", 1)[0]

    try:
        telegram_file = await telegram_client.get_file(file_id)
        upstream = await telegram_client.download_file(str(telegram_file["file_path"]))
    except (TelegramAPIError, httpx.HTTPError) as exc:
        logger.warning("Could not fetch stored file %s: %s", file_name, exc)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found") from exc

    media_type, _ = mimetypes.guess_type(file_name)
    if media_type is None:
        media_type = upstream.headers.get("content-type", "application/octet-stream")

    return Response(content=upstream.content, media_type=media_type)
