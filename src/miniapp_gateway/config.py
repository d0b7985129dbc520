"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    telegram_bot_token: str
    supabase_url: str
    supabase_service_key: str
    admin_token: str
    telegram_admin_chat_id: str | None = None
    telegram_admin_user_ids: str | None = None
    telegram_webhook_secret: str | None = None
    product_media_bucket: str = "product-media"
    init_data_max_age_seconds: int | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_admin_user_ids(raw: str | None) -> set[int]:
    """Parse Telegram user IDs allowed to moderate from env."""
    if raw is None:
        return set()
    ids: set[int] = set()
    for chunk in raw.split(","):
        value = chunk.strip()
        if value.isdigit():
            ids.add(int(value))
    return ids
