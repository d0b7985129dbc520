"""Article domain models."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

PREVIEW_LENGTH = 200


class ArticleStatus(StrEnum):
    """Moderation state of an article."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ArticleAuthor:
    """Author fields shown in moderation notices."""

    first_name: str | None
    username: str | None
    telegram_id: int | None


@dataclass(frozen=True)
class Article:
    """Represents an article row."""

    id: UUID
    author_id: UUID
    title: str
    body: str
    preview: str | None
    status: ArticleStatus
    is_anonymous: bool
    allow_comments: bool
    media_url: str | None
    media_type: str | None
    category_id: str | None = None
    rejection_reason: str | None = None
    telegram_message_id: int | None = None
    author: ArticleAuthor | None = None


def detect_media_type(media_url: str | None) -> str | None:
    """Classify a media URL as a YouTube link or an image."""
    if not media_url:
        return None
    if "youtube.com" in media_url or "youtu.be" in media_url:
        return "youtube"
    return "image"


def build_preview(preview: str | None, body: str | None) -> str:
    """Return the stored preview: explicit preview or body, truncated."""
    return (preview or body or "")[:PREVIEW_LENGTH]
