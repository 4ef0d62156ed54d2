"""
Configuration management via environment variables.

This module loads configuration from .env file using python-dotenv.
All configuration values are accessed through the Settings class.

Why environment variables:
1. Security - Bot and model credentials never committed to Git
2. Flexibility - Different values per environment (dev/staging/prod)
3. 12-factor app compliance - Configuration in environment
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Load .env file from project root
# This must happen before accessing os.environ
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


# Number of trailing bot-token characters used as the webhook secret
WEBHOOK_SECRET_LENGTH = 20


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    frozen=True makes the dataclass immutable, preventing accidental
    modification of settings at runtime.

    Attributes:
        app_name: Application identifier for logging
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether the daily log file under logs/ is written
        bot_token: Telegram bot credential
        groq_api_key: Credential for the chat-completion endpoint
        llm_model: Model identifier sent with every completion request
        llm_base_url: Optional override of the completion endpoint base URL
        database_url: Async SQLAlchemy URL for users, messages and journal entries
        database_configured: Whether DATABASE_URL was set (False means the local SQLite default)
        port: HTTP listen port
        public_url: Public base URL used for webhook registration
        rate_limit_cooldown_seconds: Minimum gap between accepted messages
        rate_limit_max_entries: Upper bound of tracked users in the limiter
        history_limit: Number of past turns sent as context
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str
    log_to_file: bool

    # Channel settings
    bot_token: str
    public_url: str
    port: int

    # LLM settings
    groq_api_key: str
    llm_model: str
    llm_base_url: Optional[str]

    # Persistence settings
    database_url: str
    database_configured: bool

    # Conversation settings
    rate_limit_cooldown_seconds: float
    rate_limit_max_entries: int
    history_limit: int

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"

    @property
    def webhook_secret(self) -> str:
        """Path secret derived from the bot credential."""
        return self.bot_token[-WEBHOOK_SECRET_LENGTH:]

    @property
    def webhook_path(self) -> str:
        return f"/tg/{self.webhook_secret}"

    @property
    def webhook_url(self) -> Optional[str]:
        """Full webhook URL, or None when PUBLIC_URL is not set."""
        if not self.public_url:
            return None
        return f"{self.public_url}{self.webhook_path}"


def _get_env(key: str, default: Optional[str] = None) -> str:
    """
    Get environment variable with optional default.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required variable is not set and no default provided
    """
    value = os.environ.get(key, default)
    if value is None:
        raise ValueError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


def normalize_database_url(database_url: str) -> str:
    """
    Rewrite plain driver URLs to their async counterparts.

    Hosted Postgres providers hand out postgres:// URLs, which SQLAlchemy
    does not accept for the asyncio extension.
    """
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are read once at startup; maxsize=1 ensures only one
    instance exists.

    Returns:
        Settings instance with all configuration values

    Raises:
        ValueError: If required environment variables are missing
    """
    bot_token = os.environ.get("BOT_TOKEN") or os.environ.get("TELEGRAM_BOT_TOKEN")
    if not bot_token:
        raise ValueError(
            "Required environment variable 'BOT_TOKEN' (or 'TELEGRAM_BOT_TOKEN') is not set. "
            "Please check your .env file."
        )

    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "Hith"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "INFO"),
        log_to_file=_get_env("LOG_TO_FILE", "true").lower() in ("1", "true", "yes"),

        # Channel
        bot_token=bot_token,
        public_url=_get_env("PUBLIC_URL", "").rstrip("/"),
        port=int(_get_env("PORT", "10000")),

        # LLM
        groq_api_key=_get_env("GROQ_API_KEY"),
        llm_model=_get_env("LLM_MODEL", "llama-3.3-70b-versatile"),
        llm_base_url=os.environ.get("LLM_BASE_URL") or None,

        # Persistence
        database_url=normalize_database_url(
            _get_env("DATABASE_URL", "sqlite+aiosqlite:///./hith.db")
        ),
        database_configured=bool(os.environ.get("DATABASE_URL")),

        # Conversation
        rate_limit_cooldown_seconds=float(_get_env("RATE_LIMIT_COOLDOWN_SECONDS", "5")),
        rate_limit_max_entries=int(_get_env("RATE_LIMIT_MAX_ENTRIES", "10000")),
        history_limit=int(_get_env("HISTORY_LIMIT", "8")),
    )
