"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from miniapp_gateway.adapters.supabase_article_repository import (
    SupabaseArticleRepository,
)
from miniapp_gateway.adapters.supabase_media_storage import SupabaseMediaStorage
from miniapp_gateway.adapters.supabase_product_repository import (
    SupabaseProductRepository,
)
from miniapp_gateway.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from miniapp_gateway.adapters.supabase_reputation_repository import (
    SupabaseNotificationRepository,
    SupabaseReputationRepository,
)
from miniapp_gateway.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from miniapp_gateway.config import Settings, parse_admin_user_ids
from miniapp_gateway.services.articles import ArticleService
from miniapp_gateway.services.gateway import RequestGateway
from miniapp_gateway.services.init_data import InitDataVerifier
from miniapp_gateway.services.moderation import ModerationService
from miniapp_gateway.services.products import ProductService
from miniapp_gateway.services.profiles import ProfileService
from miniapp_gateway.services.reputation import ReputationService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    gateway: RequestGateway
    profile_service: ProfileService
    article_service: ArticleService
    reputation_service: ReputationService
    product_service: ProductService
    moderation_service: ModerationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    article_repository = SupabaseArticleRepository(supabase_client)
    reputation_repository = SupabaseReputationRepository(supabase_client)
    notification_repository = SupabaseNotificationRepository(supabase_client)
    product_repository = SupabaseProductRepository(supabase_client)
    media_storage = SupabaseMediaStorage(
        supabase_client, bucket=resolved_settings.product_media_bucket
    )
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)

    profile_service = ProfileService(
        repository=profile_repository,
        article_repository=article_repository,
        reputation_repository=reputation_repository,
    )
    verifier = InitDataVerifier(
        bot_token=resolved_settings.telegram_bot_token,
        max_age_seconds=resolved_settings.init_data_max_age_seconds,
    )
    article_service = ArticleService(article_repository)
    reputation_service = ReputationService(
        repository=reputation_repository,
        profile_repository=profile_repository,
        notification_repository=notification_repository,
    )
    product_service = ProductService(
        repository=product_repository, storage=media_storage
    )
    moderation_service = ModerationService(
        article_service=article_service,
        telegram_client=telegram_client,
        admin_chat_id=resolved_settings.telegram_admin_chat_id,
        admin_user_ids=parse_admin_user_ids(resolved_settings.telegram_admin_user_ids),
    )

    async def close_resources() -> None:
        await telegram_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        gateway=RequestGateway(verifier=verifier, profile_service=profile_service),
        profile_service=profile_service,
        article_service=article_service,
        reputation_service=reputation_service,
        product_service=product_service,
        moderation_service=moderation_service,
        close_resources=close_resources,
    )
