"""Mini-App function endpoints authenticated with Telegram initData."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from uuid import UUID

from fastapi import APIRouter, File, Form, Request, UploadFile

from miniapp_gateway.api.schemas import (
    CreateArticleRequest,
    GiveReputationRequest,
    ManageProductRequest,
    SyncProfileRequest,
    UserReputationRequest,
)
from miniapp_gateway.containers import AppContainer
from miniapp_gateway.domain.errors import (
    GatewayError,
    InternalFailure,
    ValidationFailure,
)
from miniapp_gateway.domain.products import MAX_MEDIA_BYTES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["functions"])


@dataclass
class _ActionContext:
    name: str
    telegram_id: int | None = None


@contextmanager
def _action(name: str) -> Iterator[_ActionContext]:
    """Convert unexpected failures into a generic internal error."""
    context = _ActionContext(name=name)
    try:
        yield context
    except GatewayError:
        raise
    except Exception as exc:
        logger.exception(
            "Function failed",
            extra={"action": context.name, "telegram_id": context.telegram_id},
        )
        raise InternalFailure(
            "Internal server error", reason="internal_error"
        ) from exc


@router.post("/tg-sync-profile")
async def sync_profile(
    body: SyncProfileRequest, request: Request
) -> dict[str, object]:
    """Create or refresh the caller's profile from Telegram data."""
    container: AppContainer = request.app.state.container
    with _action("tg-sync-profile") as action:
        identity = container.gateway.authenticate(action.name, body.init_data)
        action.telegram_id = identity.id
        snapshot = container.profile_service.sync_profile(identity)
    return {
        "profile": {**asdict(snapshot.profile), "reputation": snapshot.reputation},
        "articlesCount": snapshot.articles_count,
    }


@router.post("/tg-create-article")
async def create_article(
    body: CreateArticleRequest, request: Request
) -> dict[str, object]:
    """Submit an article for moderation."""
    container: AppContainer = request.app.state.container
    if not body.init_data or body.article is None:
        raise ValidationFailure(
            "Требуются initData и article", reason="missing_fields"
        )
    with _action("tg-create-article") as action:
        identity, profile = container.gateway.authenticate_profile(
            action.name, body.init_data
        )
        action.telegram_id = identity.id
        article = container.article_service.create_article(
            profile, body.article.model_dump()
        )
    try:
        await container.moderation_service.send_moderation_notice(article.id)
    except Exception:
        logger.exception(
            "Failed to send moderation notice", extra={"article_id": str(article.id)}
        )
    return {"article": asdict(article)}


@router.post("/tg-give-reputation")
async def give_reputation(
    body: GiveReputationRequest, request: Request
) -> dict[str, object]:
    """Give +1 reputation to another profile."""
    container: AppContainer = request.app.state.container
    with _action("tg-give-reputation") as action:
        identity, sender = container.gateway.authenticate_profile(
            action.name, body.init_data
        )
        action.telegram_id = identity.id
        container.reputation_service.give_reputation(
            sender,
            _parse_uuid(body.target_user_id, "targetUserId"),
            body.reason,
        )
    return {"success": True}


@router.post("/tg-user-reputation")
async def user_reputation(
    body: UserReputationRequest, request: Request
) -> dict[str, object]:
    """Return a profile's reputation and recent grants."""
    container: AppContainer = request.app.state.container
    with _action("tg-user-reputation") as action:
        identity = container.gateway.authenticate(action.name, body.init_data)
        action.telegram_id = identity.id
        user_id = _parse_uuid(body.user_id, "userId")
        if user_id is None:
            raise ValidationFailure("Требуется userId", reason="missing_fields")
        summary = container.reputation_service.get_user_reputation(user_id)
    return {
        "reputation": summary.reputation,
        "history": [asdict(entry) for entry in summary.history],
    }


@router.post("/tg-upload-product-media")
async def upload_product_media(
    request: Request,
    init_data: str | None = Form(default=None, alias="initData"),
    file: UploadFile | None = File(default=None),
) -> dict[str, object]:
    """Store an image for a premium product listing."""
    container: AppContainer = request.app.state.container
    if not init_data or file is None:
        raise ValidationFailure("Требуются initData и file", reason="missing_fields")
    content = await file.read(MAX_MEDIA_BYTES + 1)
    with _action("tg-upload-product-media") as action:
        identity, profile = container.gateway.authenticate_profile(
            action.name, init_data
        )
        action.telegram_id = identity.id
        url = container.product_service.upload_media(
            profile, file.filename, file.content_type, content
        )
    logger.info("Product media uploaded", extra={"profile_id": str(profile.id)})
    return {"url": url}


@router.post("/tg-manage-product")
async def manage_product(
    body: ManageProductRequest, request: Request
) -> dict[str, object]:
    """Create, update or delete the caller's product."""
    container: AppContainer = request.app.state.container
    with _action("tg-manage-product") as action:
        identity, profile = container.gateway.authenticate_profile(
            action.name, body.init_data
        )
        action.telegram_id = identity.id
        draft = body.product.model_dump() if body.product else {}
        service = container.product_service
        if body.action == "create":
            product = service.create_product(profile, draft)
            return {"product": asdict(product)}
        if body.action not in {"update", "delete"}:
            raise ValidationFailure(
                "Неизвестное действие", reason="unsupported_action"
            )
        product_id = _parse_uuid(body.product_id, "productId")
        if product_id is None:
            raise ValidationFailure("Требуется productId", reason="missing_fields")
        if body.action == "update":
            product = service.update_product(profile, product_id, draft)
            return {"product": asdict(product)}
        service.delete_product(profile, product_id)
    return {"success": True}


def _parse_uuid(raw: str | None, field: str) -> UUID | None:
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError:
        raise ValidationFailure(
            f"Некорректный {field}", reason="invalid_identifier"
        ) from None
