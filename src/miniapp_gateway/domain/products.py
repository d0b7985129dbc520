"""Product listing domain models."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

ALLOWED_MEDIA_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
MAX_MEDIA_BYTES = 5 * 1024 * 1024
MAX_ACTIVE_PRODUCTS = 1


@dataclass(frozen=True)
class Product:
    """A product listed by a premium profile."""

    id: UUID
    user_profile_id: UUID
    title: str
    description: str
    price: float
    currency: str
    media_url: str | None
    media_type: str | None
    link: str | None
    is_active: bool
    created_at: datetime | None
