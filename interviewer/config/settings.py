"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Environment names of the credential slots, in failover order
CREDENTIAL_SLOTS = (
    "GEMINI_API_KEY",
    "GEMINI_API_KEY_1",
    "GEMINI_API_KEY_2",
    "GEMINI_API_KEY_3",
    "GEMINI_API_KEY_4",
    "GEMINI_API_KEY_5",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "AI Interviewer"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # Gemini text generation
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_seconds: float = 60.0
    gemini_temperature: float = 0.7

    # Credential slots (one provider per non-empty slot)
    gemini_api_key: str = ""
    gemini_api_key_1: str = ""
    gemini_api_key_2: str = ""
    gemini_api_key_3: str = ""
    gemini_api_key_4: str = ""
    gemini_api_key_5: str = ""

    # Nominal free-tier requests per key per day, reported by /api/provider-status
    provider_daily_quota: int = 50

    # Retry policy for a single provider
    ai_max_attempts: int = Field(default=3, ge=1)
    ai_retry_base_delay_seconds: float = 1.0
    ai_overload_retry_delay_seconds: float = 5.0

    # Interview settings
    initial_question_count: int = 3
    session_retention_seconds: int = 60 * 60
    session_sweep_interval_seconds: int = 60 * 60

    # Langfuse tracing
    langfuse_enabled: bool = False
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_base_url: str = "https://cloud.langfuse.com"

    # CORS - stored as comma-separated string in env
    cors_origins_str: str = Field(
        default="*",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    def provider_credentials(self) -> list[tuple[str, str]]:
        """
        Configured credentials as (slot name, key) pairs.

        Empty slots are skipped and a key repeated in several slots
        is only returned for the first one.
        """
        credentials = []
        seen = set()
        for slot in CREDENTIAL_SLOTS:
            value = getattr(self, slot.lower()).strip()
            if not value or value in seen:
                continue
            seen.add(value)
            credentials.append((slot, value))
        return credentials


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
