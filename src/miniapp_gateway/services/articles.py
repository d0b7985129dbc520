"""Article submission and moderation state changes."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from miniapp_gateway.domain.articles import (
    Article,
    ArticleStatus,
    build_preview,
    detect_media_type,
)
from miniapp_gateway.domain.errors import NotFoundFailure, ValidationFailure
from miniapp_gateway.domain.profiles import Profile


class ArticleRepository(Protocol):
    """Persistence interface for articles."""

    def create_article(self, payload: dict[str, object]) -> Article:
        """Insert an article row and return it."""

    def get_article(self, article_id: UUID) -> Article | None:
        """Return an article with its author, if present."""

    def list_by_status(self, status: ArticleStatus, limit: int) -> list[Article]:
        """Return articles in a moderation state, newest first."""

    def update_article(
        self, article_id: UUID, payload: dict[str, object]
    ) -> Article | None:
        """Update an article and return it, or None when it does not exist."""

    def count_by_author(self, author_id: UUID) -> int:
        """Return the number of articles written by a profile."""


@dataclass
class ArticleService:
    """Application service for articles."""

    repository: ArticleRepository

    def create_article(self, author: Profile, draft: dict[str, object]) -> Article:
        """Create a pending article for the author."""
        title = str(draft.get("title") or "").strip()
        body = str(draft.get("body") or "").strip()
        if not title or not body:
            raise ValidationFailure(
                "Заполните заголовок и текст статьи", reason="missing_fields"
            )
        media_url = draft.get("media_url") or None
        media_type = draft.get("media_type") or detect_media_type(
            str(media_url) if media_url else None
        )
        return self.repository.create_article(
            {
                "author_id": str(author.id),
                "category_id": draft.get("category_id") or None,
                "title": draft.get("title"),
                "body": draft.get("body"),
                "preview": build_preview(
                    _optional_str(draft.get("preview")),
                    _optional_str(draft.get("body")),
                ),
                "media_url": media_url,
                "media_type": media_type,
                "is_anonymous": bool(draft.get("is_anonymous")),
                "allow_comments": draft.get("allow_comments") is not False,
                "status": ArticleStatus.PENDING.value,
            }
        )

    def list_articles(
        self, status: ArticleStatus = ArticleStatus.PENDING, limit: int = 50
    ) -> list[Article]:
        """Return articles in a moderation state."""
        return self.repository.list_by_status(status, limit)

    def get_article(self, article_id: UUID) -> Article:
        """Return an article or fail with not found."""
        article = self.repository.get_article(article_id)
        if article is None:
            raise NotFoundFailure("Статья не найдена", reason="article_not_found")
        return article

    def approve(self, article_id: UUID) -> Article:
        """Publish an article."""
        return self._update(article_id, {"status": ArticleStatus.APPROVED.value})

    def reject(self, article_id: UUID, reason: str | None) -> Article:
        """Reject an article with a reason shown to the author."""
        if not reason or not reason.strip():
            raise ValidationFailure(
                "Укажите причину отклонения", reason="missing_rejection_reason"
            )
        return self._update(
            article_id,
            {"status": ArticleStatus.REJECTED.value, "rejection_reason": reason},
        )

    def attach_moderation_message(self, article_id: UUID, message_id: int) -> None:
        """Remember the admin chat message that announced the article."""
        self._update(article_id, {"telegram_message_id": message_id})

    def _update(self, article_id: UUID, payload: dict[str, object]) -> Article:
        article = self.repository.update_article(article_id, payload)
        if article is None:
            raise NotFoundFailure("Статья не найдена", reason="article_not_found")
        return article


def _optional_str(value: object) -> str | None:
    return str(value) if value else None
