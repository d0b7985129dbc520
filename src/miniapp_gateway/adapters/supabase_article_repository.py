"""Supabase-backed article repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from miniapp_gateway.domain.articles import Article, ArticleAuthor, ArticleStatus
from miniapp_gateway.services.articles import ArticleRepository

_ARTICLE_WITH_AUTHOR = "*, author:author_id(first_name, username, telegram_id)"


@dataclass
class SupabaseArticleRepository(ArticleRepository):
    """Supabase implementation for article persistence."""

    client: Client

    def create_article(self, payload: dict[str, object]) -> Article:
        """Insert an article row and return it."""
        response = self.client.table("articles").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create article in Supabase")
        return _parse_row(response.data[0])

    def get_article(self, article_id: UUID) -> Article | None:
        """Return an article joined with its author, if present."""
        response = (
            self.client.table("articles")
            .select(_ARTICLE_WITH_AUTHOR)
            .eq("id", str(article_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_row(response.data[0])
        return None

    def list_by_status(self, status: ArticleStatus, limit: int) -> list[Article]:
        """Return articles in a moderation state, newest first."""
        response = (
            self.client.table("articles")
            .select(_ARTICLE_WITH_AUTHOR)
            .eq("status", status.value)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def update_article(
        self, article_id: UUID, payload: dict[str, object]
    ) -> Article | None:
        """Update an article and return it, or None when no row matched."""
        response = (
            self.client.table("articles")
            .update(payload)
            .eq("id", str(article_id))
            .execute()
        )
        if response.data:
            return _parse_row(response.data[0])
        return None

    def count_by_author(self, author_id: UUID) -> int:
        """Return the number of articles written by a profile."""
        response = (
            self.client.table("articles")
            .select("id", count="exact", head=True)
            .eq("author_id", str(author_id))
            .execute()
        )
        return response.count or 0


def _parse_row(row: dict[str, object]) -> Article:
    author_raw = row.get("author")
    author = (
        ArticleAuthor(
            first_name=author_raw.get("first_name"),
            username=author_raw.get("username"),
            telegram_id=author_raw.get("telegram_id"),
        )
        if isinstance(author_raw, dict)
        else None
    )
    return Article(
        id=UUID(str(row["id"])),
        author_id=UUID(str(row["author_id"])),
        title=str(row.get("title") or ""),
        body=str(row.get("body") or ""),
        preview=row.get("preview"),
        status=ArticleStatus(row.get("status") or ArticleStatus.PENDING.value),
        is_anonymous=bool(row.get("is_anonymous")),
        allow_comments=row.get("allow_comments") is not False,
        media_url=row.get("media_url"),
        media_type=row.get("media_type"),
        category_id=row.get("category_id"),
        rejection_reason=row.get("rejection_reason"),
        telegram_message_id=row.get("telegram_message_id"),
        author=author,
    )
