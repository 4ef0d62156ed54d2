"""
API Routes module - Endpoint definitions.

Each file in this module defines routes for a specific domain:
- webhook.py : Telegram updates
- journal.py : Journal save/list API
- health.py  : Health check endpoints
"""
from hith.api.routes.webhook import router as webhook_router
from hith.api.routes.journal import router as journal_router
from hith.api.routes.health import router as health_router

__all__ = [
    "webhook_router",
    "journal_router",
    "health_router",
]
