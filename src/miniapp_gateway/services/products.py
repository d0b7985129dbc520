"""Premium product listings and media uploads."""

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from miniapp_gateway.domain.articles import detect_media_type
from miniapp_gateway.domain.errors import (
    AuthorizationFailure,
    BusinessRuleViolation,
    NotFoundFailure,
    ValidationFailure,
)
from miniapp_gateway.domain.products import (
    ALLOWED_MEDIA_TYPES,
    MAX_ACTIVE_PRODUCTS,
    MAX_MEDIA_BYTES,
    Product,
)
from miniapp_gateway.domain.profiles import Profile


class ProductRepository(Protocol):
    """Persistence interface for user products."""

    def count_active(self, user_profile_id: UUID) -> int:
        """Return the number of active products of a profile."""

    def create_product(self, payload: dict[str, object]) -> Product:
        """Insert a product row and return it."""

    def get_product(self, product_id: UUID) -> Product | None:
        """Return a product by id, if present."""

    def update_product(self, product_id: UUID, payload: dict[str, object]) -> Product:
        """Update a product row and return it."""

    def delete_product(self, product_id: UUID) -> None:
        """Delete a product row."""


class MediaStorage(Protocol):
    """Blob storage for uploaded product media."""

    def upload(self, path: str, content: bytes, content_type: str) -> None:
        """Store bytes under a path."""

    def public_url(self, path: str) -> str:
        """Return a publicly resolvable URL for a stored path."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ProductService:
    """Application service for premium product actions."""

    repository: ProductRepository
    storage: MediaStorage
    clock: Callable[[], datetime] = field(default=_utcnow)

    def upload_media(
        self,
        owner: Profile,
        filename: str | None,
        content_type: str | None,
        content: bytes,
    ) -> str:
        """Validate and store an image, returning its public URL."""
        _require_premium(owner)
        if content_type not in ALLOWED_MEDIA_TYPES:
            raise ValidationFailure(
                "Поддерживаются только изображения (JPEG, PNG, GIF, WebP)",
                reason="unsupported_media_type",
            )
        if len(content) > MAX_MEDIA_BYTES:
            raise ValidationFailure(
                "Максимальный размер файла: 5 МБ", reason="file_too_large"
            )
        stamp = int(self.clock().timestamp() * 1000)
        path = f"{owner.id}/{stamp}.{_extension(filename)}"
        self.storage.upload(path, content, content_type)
        return self.storage.public_url(path)

    def create_product(self, owner: Profile, draft: dict[str, object]) -> Product:
        """Create the owner's product; only one active product is allowed."""
        _require_premium(owner)
        payload = _product_payload(draft)
        if self.repository.count_active(owner.id) >= MAX_ACTIVE_PRODUCTS:
            raise BusinessRuleViolation(
                "Можно разместить только один продукт", reason="product_limit_reached"
            )
        return self.repository.create_product(
            {**payload, "user_profile_id": str(owner.id), "is_active": True}
        )

    def update_product(
        self, owner: Profile, product_id: UUID, draft: dict[str, object]
    ) -> Product:
        """Update one of the owner's products."""
        _require_premium(owner)
        payload = _product_payload(draft)
        self._require_owned(owner, product_id)
        return self.repository.update_product(product_id, payload)

    def delete_product(self, owner: Profile, product_id: UUID) -> None:
        """Delete one of the owner's products."""
        self._require_owned(owner, product_id)
        self.repository.delete_product(product_id)

    def _require_owned(self, owner: Profile, product_id: UUID) -> Product:
        product = self.repository.get_product(product_id)
        if product is None or product.user_profile_id != owner.id:
            raise NotFoundFailure("Продукт не найден", reason="product_not_found")
        return product


def _require_premium(profile: Profile) -> None:
    if not profile.has_premium_tier:
        raise AuthorizationFailure(
            "Требуется премиум-подписка", reason="premium_required"
        )


def _extension(filename: str | None) -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1]
        if ext:
            return ext
    return "jpg"


def _product_payload(draft: dict[str, object]) -> dict[str, object]:
    title = str(draft.get("title") or "").strip()
    description = str(draft.get("description") or "").strip()
    if not title or not description:
        raise ValidationFailure("Заполните обязательные поля", reason="missing_fields")
    try:
        price = float(draft.get("price"))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationFailure(
            "Укажите корректную цену", reason="invalid_price"
        ) from None
    if not math.isfinite(price) or price < 0:
        raise ValidationFailure("Укажите корректную цену", reason="invalid_price")
    media_url = draft.get("media_url") or None
    return {
        "title": title,
        "description": description,
        "price": price,
        "currency": draft.get("currency") or "RUB",
        "media_url": media_url,
        "media_type": detect_media_type(str(media_url) if media_url else None),
        "link": draft.get("link") or None,
    }
