"""Telegram webhook endpoints."""

import httpx
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from telegraph_relay.api.state import get_telegram_client_from_request
from telegraph_relay.clients import TelegramAPIError, TelegramClient
from telegraph_relay.logger import get_logger
from telegraph_relay.schemas import TelegramCallbackQuery, TelegramUpdate
from telegraph_relay.services import COPY_LINK_CALLBACK, extract_link

router = APIRouter(prefix="/webhook", tags=["webhook"])
logger = get_logger(__name__)

LINK_READY_TEMPLATE = "Link ready, paste it anywhere!\n\n{url}"
LINK_NOT_FOUND_TEXT = "Link not found."
WEBHOOK_ERROR_TEXT = "Error handling webhook"


@router.post("/telegram")
async def handle_telegram_webhook(request: Request) -> Response:
    """Receive Telegram updates and answer "copy link" button presses."""

    return await process_webhook_request(request)


async def process_webhook_request(request: Request) -> Response:
    try:
        raw_update = await request.json()
    except ValueError:
        logger.exception("Webhook error: body is not valid JSON")
        return PlainTextResponse(
            WEBHOOK_ERROR_TEXT, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    try:
        update = TelegramUpdate.model_validate(raw_update)
    except ValidationError:
        logger.info("Ignoring Telegram update with unexpected structure")
        return PlainTextResponse("OK")

    callback_query = update.callback_query
    if callback_query is None:
        logger.debug("Update %s carries no callback query; ignoring", update.update_id)
        return PlainTextResponse("OK")

    if callback_query.data != COPY_LINK_CALLBACK:
        logger.info("Ignoring callback query with data=%r", callback_query.data)
        return PlainTextResponse("OK")

    telegram_client = get_telegram_client_from_request(request)
    if telegram_client is None:
        logger.warning("Telegram client unavailable; cannot answer callback query")
        return PlainTextResponse("OK")

    await answer_copy_link(telegram_client, callback_query)
    return PlainTextResponse("OK")


def build_copy_link_alert(callback_query: TelegramCallbackQuery) -> str:
    """Return the pop-up text for a "copy link" press."""

    message = callback_query.message
    if message is None:
        return LINK_NOT_FOUND_TEXT

    entities = [entity.model_dump() for entity in message.entities]
    url = extract_link(message.text, entities)
    if url is None:
        return LINK_NOT_FOUND_TEXT
    return LINK_READY_TEMPLATE.format(url=url)


async def answer_copy_link(
    telegram_client: TelegramClient, callback_query: TelegramCallbackQuery
) -> None:
    alert_text = build_copy_link_alert(callback_query)
    try:
        await telegram_client.answer_callback_query(
            callback_query.id,
            text=alert_text,
            show_alert=True,
        )
    except (TelegramAPIError, httpx.HTTPError):
        logger.exception("Failed to answer callback query %s", callback_query.id)
        return

    logger.info("Answered copy_link callback query %s", callback_query.id)
