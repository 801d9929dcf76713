"""
Application Configuration Module

Centralizes all application settings using Pydantic Settings.
Environment variables are loaded from .env file automatically.

Usage:
    from config.settings import settings

    print(settings.DEFAULT_LANGUAGE)
    print(settings.DEBUG)
"""

from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Variable names are case-insensitive.
    """

    # ==========================================================================
    # Application Settings
    # ==========================================================================
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit logs as JSON objects instead of colored console lines"
    )
    APP_NAME: str = Field(
        default="Voice Calc",
        description="Application name for OpenAPI docs"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application version"
    )

    # ==========================================================================
    # CORS Configuration
    # ==========================================================================
    CORS_ORIGINS: str = Field(
        default="http://localhost:8081,http://localhost:19006",
        description="Allowed CORS origins (comma-separated)"
    )

    @property
    def cors_origins_list(self) -> list:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # ==========================================================================
    # Rate Limiting
    # ==========================================================================
    REDIS_URL: Optional[str] = Field(
        default=None,
        description="Redis connection URL for rate limiting storage"
    )
    TRUST_PROXY_HEADERS: bool = Field(
        default=False,
        description="Key rate limits on X-Forwarded-For (enable only behind a trusted proxy)"
    )

    # ==========================================================================
    # Language & Normalization
    # ==========================================================================
    DEFAULT_LANGUAGE: str = Field(
        default="en",
        description="Language used when a request does not name a supported one"
    )
    MAX_TRANSCRIPT_LENGTH: int = Field(
        default=1000,
        description="Transcripts longer than this are truncated before normalization"
    )

    # ==========================================================================
    # Voice Session Timing
    # ==========================================================================
    CONTINUOUS_POLL_INTERVAL_MS: int = Field(
        default=500,
        description="Poll interval for utterance-boundary detection in continuous mode"
    )
    INTERIM_FRAME_INTERVAL_MS: int = Field(
        default=16,
        description="Minimum spacing between interim transcript emissions"
    )
    PREVIEW_DEBOUNCE_MS: int = Field(
        default=100,
        description="Debounce window for keypad live-preview evaluation"
    )

    # ==========================================================================
    # Text-to-Speech
    # ==========================================================================
    TTS_RATE: float = Field(
        default=1.1,
        description="Speech rate passed to the synthesis capability"
    )
    TTS_PITCH: float = Field(
        default=1.0,
        description="Speech pitch passed to the synthesis capability"
    )
    SPEECH_MUTED: bool = Field(
        default=False,
        description="Start voice sessions with spoken results muted"
    )

    # ==========================================================================
    # Result Sinks
    # ==========================================================================
    HISTORY_ENABLED: bool = Field(
        default=True,
        description="Record successful calculations in the in-memory history"
    )
    HISTORY_MAX_ENTRIES: int = Field(
        default=100,
        description="Maximum number of calculations kept in history"
    )
    WEBHOOK_URL: Optional[str] = Field(
        default=None,
        description="Endpoint notified of every successful calculation"
    )
    WEBHOOK_SECRET: Optional[str] = Field(
        default=None,
        description="HMAC secret used to sign webhook payloads"
    )
    WEBHOOK_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Timeout for a single webhook delivery attempt"
    )
    WEBHOOK_MAX_RETRIES: int = Field(
        default=3,
        description="Delivery attempts before a webhook is dropped"
    )

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


# Singleton instance for easy import
settings = get_settings()
