"""
Configuration settings for the Choose-Wise Advice Service.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development (see .env.example).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Choose-Wise Advice Service"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # === Provider Credentials ===
    # A provider takes part in the failover chain only when its key is set
    ANTHROPIC_API_KEY: Optional[str] = None
    GEMINI_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None

    # === Provider Endpoints & Models ===
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com"
    ANTHROPIC_API_VERSION: str = "2023-06-01"
    CLAUDE_MODEL: str = "claude-3-5-sonnet-latest"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com"
    GEMINI_MODEL: str = "gemini-1.5-flash"
    OPENAI_BASE_URL: str = "https://api.openai.com"
    OPENAI_MODEL: str = "gpt-4o-mini"

    # === LLM Generation Parameters ===
    LLM_MAX_TOKENS: int = 1000
    LLM_TEMPERATURE: float = 0.7

    # === Failover & Retry ===
    PROVIDER_ORDER: list[str] = ["claude", "gemini", "openai"]  # First entry is primary
    PROVIDER_TIMEOUT_SECONDS: float = 35.0  # Hard ceiling per outbound call
    PRIMARY_MAX_RETRIES: int = 3
    FALLBACK_MAX_RETRIES: int = 2  # Fewer retries for fallbacks
    RETRY_BASE_DELAY_MS: int = 1000
    RETRY_JITTER_MAX_MS: int = 1000
    EMERGENCY_FALLBACK_ENABLED: bool = True

    # === Rate Limiting ===
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_REQUESTS: int = 30  # per client per window
    RATE_LIMIT_WINDOW_SECONDS: float = 60.0

    # === HTTP ===
    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    def api_key_for(self, provider_name: str) -> Optional[str]:
        """Return the configured credential for a provider name, if any."""
        return {
            "claude": self.ANTHROPIC_API_KEY,
            "gemini": self.GEMINI_API_KEY,
            "openai": self.OPENAI_API_KEY,
        }.get(provider_name)


# Global settings instance
settings = Settings()
