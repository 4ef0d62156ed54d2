"""
API module - FastAPI routes and HTTP handling.

This module handles:
- Webhook delivery from Telegram
- Health endpoints
- Error handling
"""
