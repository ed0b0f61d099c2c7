"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from webhook_gate.integrations.shopify.webhooks import SHOPIFY_HMAC_HEADER


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True

    # API
    api_v1_prefix: str = "/api/v1"
    project_name: str = "Webhook Gate"
    version: str = "0.1.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Shopify webhooks
    shopify_webhook_secret: str = ""
    shopify_hmac_header: str = SHOPIFY_HMAC_HEADER
    webhook_rate_limit: str = "120/minute"

    # Error tracking
    sentry_dsn: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def webhook_path_prefix(self) -> str:
        """Path under which every request must carry a valid Shopify signature."""
        return f"{self.api_v1_prefix}/webhooks/shopify"

    def validate_webhook_config(self) -> list[str]:
        """Return human-readable configuration errors; empty when usable."""
        errors = []
        if not self.shopify_webhook_secret:
            errors.append("SHOPIFY_WEBHOOK_SECRET is required")
        if not self.shopify_hmac_header.strip():
            errors.append("SHOPIFY_HMAC_HEADER must not be blank")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
