"""
FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance.
It handles:
1. Application initialization
2. Router registration
3. Exception handlers (custom exceptions)
4. Startup/shutdown: table init, bot init, webhook registration,
   closing the completion client and database pool

Run with: uvicorn hith.api.main:app
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from telegram.error import TelegramError

from hith.core.config import get_settings
from hith.core.logging_config import setup_logging, get_logger
from hith.core.exceptions import HithException
from hith.models.chat import ErrorResponse
from hith.api.routes import health_router, journal_router, webhook_router
from hith.api.routes.webhook import close_chat_service


# Initialize logging before anything else
settings = get_settings()
setup_logging(settings.log_level, log_to_file=settings.log_to_file)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup failures are logged, never raised: the health endpoint keeps
    serving while the bot is unreachable.
    """
    from hith.database import get_database, init_tables
    from hith.services.channel import get_bot, register_webhook

    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    logger.info(f"LLM Model: {settings.llm_model}")
    logger.info(f"Rate limit cooldown: {settings.rate_limit_cooldown_seconds}s")

    try:
        await init_tables()
        logger.info("Checked/Initialized conversation tables.")
    except Exception as e:
        logger.error(f"Failed to auto-init tables: {e}")

    bot = None
    app.state.webhook_registered = False
    try:
        bot = get_bot()
        await bot.initialize()
        app.state.webhook_registered = await register_webhook(bot, settings.webhook_url)
    except TelegramError as e:
        logger.error(f"Telegram bot initialization failed: {e}")

    yield  # Application runs here

    logger.info(f"Shutting down {settings.app_name}")

    if bot is not None:
        try:
            await bot.shutdown()
        except TelegramError as e:
            logger.error(f"Error shutting down bot: {e}")

    await close_chat_service()
    await get_database().close()


app = FastAPI(
    title="HITH Companion Bot",
    description="Telegram companion that relays chats to a hosted language model.",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url=None,
)


# ============================================================
# Exception Handlers
# ============================================================

@app.exception_handler(HithException)
async def hith_exception_handler(request: Request, exc: HithException):
    """Handle all custom exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(**exc.to_dict()).model_dump(mode="json")
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions globally.

    Detailed error information is only included in development mode.
    """
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="internal_error",
            message="An unexpected error occurred",
            details=str(exc) if settings.is_development() else None,
        ).model_dump(mode="json")
    )


# ============================================================
# Routers
# ============================================================

app.include_router(health_router)
app.include_router(webhook_router)
app.include_router(journal_router)


@app.get("/", include_in_schema=False, response_class=PlainTextResponse)
async def root():
    return "HITH is alive."


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hith.api.main:app",
        host="0.0.0.0",
        port=settings.port,
    )
