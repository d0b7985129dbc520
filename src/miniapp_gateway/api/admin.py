"""Admin API endpoints with simple token auth."""

from __future__ import annotations

import hmac
from dataclasses import asdict
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, Query, Request

from miniapp_gateway.api.schemas import (  # noqa: TC001
    RegisterWebhookRequest,
    RejectArticleRequest,
)
from miniapp_gateway.domain.articles import ArticleStatus
from miniapp_gateway.domain.errors import AuthenticationFailure, ValidationFailure

if TYPE_CHECKING:
    from miniapp_gateway.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or not hmac.compare_digest(
        x_admin_token.encode("utf-8"), admin_token.encode("utf-8")
    ):
        raise AuthenticationFailure(
            "Недействительный токен администратора", reason="invalid_admin_token"
        )


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/articles", dependencies=[Depends(require_admin)])
async def list_articles(
    request: Request,
    article_status: ArticleStatus = Query(
        default=ArticleStatus.PENDING, alias="status"
    ),
    limit: int = 50,
) -> dict[str, object]:
    """Return articles in a moderation state."""
    container: AppContainer = request.app.state.container
    articles = container.article_service.list_articles(article_status, limit)
    return {"articles": [asdict(article) for article in articles]}


@router.post("/articles/{article_id}/approve", dependencies=[Depends(require_admin)])
async def approve_article(article_id: UUID, request: Request) -> dict[str, object]:
    """Publish a pending article."""
    container: AppContainer = request.app.state.container
    article = container.article_service.approve(article_id)
    return {"article": asdict(article)}


@router.post("/articles/{article_id}/reject", dependencies=[Depends(require_admin)])
async def reject_article(
    article_id: UUID, body: RejectArticleRequest, request: Request
) -> dict[str, object]:
    """Reject an article with a reason."""
    container: AppContainer = request.app.state.container
    article = container.article_service.reject(article_id, body.reason)
    return {"article": asdict(article)}


@router.post(
    "/articles/{article_id}/moderation", dependencies=[Depends(require_admin)]
)
async def send_moderation(article_id: UUID, request: Request) -> dict[str, object]:
    """Post the moderation notice for an article to the admin chat."""
    container: AppContainer = request.app.state.container
    message_id = await container.moderation_service.send_moderation_notice(
        article_id
    )
    return {"success": True, "messageId": message_id}


@router.post("/telegram/webhook", dependencies=[Depends(require_admin)])
async def register_webhook(
    body: RegisterWebhookRequest, request: Request
) -> dict[str, object]:
    """Point the bot webhook at this deployment with the configured secret."""
    container: AppContainer = request.app.state.container
    secret = container.settings.telegram_webhook_secret
    if not secret:
        raise ValidationFailure(
            "TELEGRAM_WEBHOOK_SECRET не задан", reason="webhook_secret_not_configured"
        )
    if not body.url:
        raise ValidationFailure("Требуется url", reason="missing_fields")
    await container.telegram_client.set_webhook(
        body.url, secret_token=secret, allowed_updates=["callback_query"]
    )
    return {"success": True}
