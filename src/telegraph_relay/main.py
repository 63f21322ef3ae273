from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from telegraph_relay.api import files_router, upload_router, webhook_router
from telegraph_relay.clients import build_telegram_client
from telegraph_relay.config.settings import AppSettings, get_settings
from telegraph_relay.logger import configure_logging, get_logger
from telegraph_relay.storage import build_metadata_store

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""

    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Telegraph relay is starting up")
    validate_critical_settings(settings)
    app.state.settings = settings

    if settings.telegram_bot_token and settings.telegram_chat_id:
        app.state.telegram_client = build_telegram_client(settings)
        logger.info("Telegram client initialized successfully")
    else:
        app.state.telegram_client = None
        logger.info("Telegram client not initialized due to missing credentials")

    app.state.metadata_store = build_metadata_store(settings)
    if app.state.metadata_store is not None:
        logger.info("Metadata store enabled at %s", settings.metadata_store_path)

    try:
        yield
    finally:
        app.state.telegram_client = None
        app.state.metadata_store = None
        logger.info("Telegraph relay is shutting down")


app = FastAPI(title="Telegraph Relay", version="0.1.0", lifespan=lifespan)
app.include_router(upload_router)
app.include_router(webhook_router)
app.include_router(files_router)


@app.get("/health", summary="Health check")
async def health_check() -> JSONResponse:
    """Simple endpoint to verify the service is running."""

    return JSONResponse(content={"status": "ok"})


def validate_critical_settings(settings: AppSettings) -> None:
    """Ensure critical settings are present and non-empty."""

    missing: list[str] = []
    if not settings.telegram_bot_token:
        missing.append("TG_BOT_TOKEN")
    if not settings.telegram_chat_id:
        missing.append("TG_CHAT_ID")

    if missing:
        logger.warning(
            "Missing recommended environment variables: %s", ", ".join(missing)
        )
    else:
        logger.info("All critical environment variables are present")
