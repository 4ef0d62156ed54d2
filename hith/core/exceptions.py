"""
Custom Exceptions - Application-specific error classes.

This module defines a hierarchy of exceptions for clean error handling:
- Each exception has a status code and error code
- The conversation pipeline catches StoreError and LLMRequestError once,
  at the top, and turns them into a localized fallback reply
- The API layer renders anything that escapes with to_dict()
"""
from typing import Optional


class HithException(Exception):
    """
    Base exception for all companion-bot errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(HithException):
    """Raised when an inbound payload cannot be parsed."""
    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field={field}" if field else None)
        self.field = field


class StoreError(HithException):
    """Raised when a persistence read or write fails."""
    status_code = 503
    error_code = "store_error"

    def __init__(self, operation: str, message: str = "Store operation failed"):
        super().__init__(message, details=f"operation={operation}")
        self.operation = operation


class LLMRequestError(HithException):
    """
    Raised when the completion endpoint answers with a non-success status.

    Attributes:
        status: HTTP status returned by the endpoint, or None when the
            endpoint could not be reached at all
        body: Raw response body, captured verbatim
    """
    status_code = 502
    error_code = "llm_request_error"

    def __init__(self, status: Optional[int], body: str):
        super().__init__(
            message=f"Completion request failed with status {status}",
            details=body
        )
        self.status = status
        self.body = body


class ChannelError(HithException):
    """Raised when the outbound reply channel fails to deliver."""
    status_code = 502
    error_code = "channel_error"

    def __init__(self, message: str = "Reply delivery failed"):
        super().__init__(message)
