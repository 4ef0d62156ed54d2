"""
Health Check Routes - System health and monitoring endpoints.

These endpoints are used for:
1. Hosting platform health checks
2. Monitoring systems
3. Quick verification of which collaborators are configured

The HTTP server keeps answering here even when webhook registration
failed at startup.
"""
from datetime import datetime

from fastapi import APIRouter, Depends, Request

from hith.core.config import Settings, get_settings
from hith.core.logging_config import get_logger
from hith.database import DatabaseConnection, get_database
from hith.models.chat import HealthResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)

# Application version - would typically come from package metadata
APP_VERSION = "0.1.0"


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
)
async def health_check(
    request: Request,
    settings: Settings = Depends(get_settings),
    db: DatabaseConnection = Depends(get_database),
) -> HealthResponse:
    """
    Report configuration and database reachability.

    The completion endpoint is not called. An unreachable database turns
    the status into 'degraded' but the endpoint still answers 200.
    """
    logger.debug("Health check requested")

    database_ok = await db.check_connection()

    return HealthResponse(
        status="healthy" if database_ok else "degraded",
        version=APP_VERSION,
        timestamp=datetime.utcnow(),
        configured={
            "telegram": bool(settings.bot_token),
            "llm": bool(settings.groq_api_key),
            "database": settings.database_configured,
            "public_url": bool(settings.public_url),
            "webhook_registered": bool(getattr(request.app.state, "webhook_registered", False)),
        },
        checks={"database": database_ok},
    )
