"""
Core module - Configuration and cross-cutting concerns.

This module provides:
- config.py         : Environment-based configuration management
- logging_config.py : Centralized logging setup
- exceptions.py     : Error hierarchy (StoreError, LLMRequestError, ...)
- rate_limiter.py   : Per-user cooldown gate
- language.py       : Locale resolution and per-language texts
"""
from hith.core.config import get_settings, Settings
from hith.core.logging_config import setup_logging, get_logger, LoggerMixin
from hith.core.language import LanguageResolver, localized
from hith.core.rate_limiter import RateLimiter, get_rate_limiter

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
    "LoggerMixin",
    "LanguageResolver",
    "localized",
    "RateLimiter",
    "get_rate_limiter",
]
