"""
Inbound events and API response models.

Webhook updates are translated into these channel-neutral events before
they reach the conversation pipeline.
"""
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


class InboundTextMessage(BaseModel):
    """
    A text message from a user.

    Attributes:
        user_id: Platform id of the sender
        chat_id: Destination for the reply
        text: Message body, already trimmed
        locale_hint: Client-supplied locale, e.g. 'it-IT'
        display_name: Sender's name, stored on first contact only
    """
    user_id: int
    chat_id: int
    text: str = Field(..., min_length=1)
    locale_hint: Optional[str] = None
    display_name: Optional[str] = None


class ButtonActivation(BaseModel):
    """A quick-reply button pressed by a user."""
    user_id: int
    chat_id: int
    payload: str
    callback_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""
    status: str = Field(default="healthy")
    version: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    configured: Dict[str, bool] = Field(default_factory=dict)
    checks: Dict[str, bool] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    message: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
