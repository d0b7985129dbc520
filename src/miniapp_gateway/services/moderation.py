"""Admin chat moderation of submitted articles."""

import logging
from dataclasses import dataclass, field
from html import escape
from uuid import UUID

from miniapp_gateway.adapters.telegram_client import TelegramClient
from miniapp_gateway.domain.articles import Article
from miniapp_gateway.domain.errors import GatewayError
from miniapp_gateway.services.articles import ArticleService

logger = logging.getLogger(__name__)

CALLBACK_REJECTION_REASON = "Отклонено модератором"


def parse_moderation_callback(data: str) -> tuple[str, UUID] | None:
    """Parse callback data in the format approve:<uuid> or reject:<uuid>."""
    action, sep, raw_id = data.partition(":")
    if not sep or action not in {"approve", "reject"}:
        return None
    try:
        return action, UUID(raw_id)
    except ValueError:
        return None


@dataclass
class ModerationService:
    """Posts moderation notices and applies admin decisions."""

    article_service: ArticleService
    telegram_client: TelegramClient
    admin_chat_id: str | None = None
    admin_user_ids: set[int] = field(default_factory=set)

    def is_admin(self, telegram_id: int) -> bool:
        """Return true when the Telegram user may moderate."""
        return telegram_id in self.admin_user_ids

    async def send_moderation_notice(self, article_id: UUID) -> int | None:
        """Announce an article in the admin chat with approve/reject buttons."""
        article = self.article_service.get_article(article_id)
        if not self.admin_chat_id:
            logger.info(
                "Admin chat not configured; skipping moderation notice",
                extra={"article_id": str(article_id)},
            )
            return None
        result = await self.telegram_client.send_message(
            chat_id=self.admin_chat_id,
            text=_format_notice(article),
            reply_markup=_moderation_keyboard(article.id),
            parse_mode="HTML",
        )
        message_id = result.get("message_id")
        if isinstance(message_id, int):
            self.article_service.attach_moderation_message(article.id, message_id)
            return message_id
        return None

    async def handle_callback(self, telegram_id: int, data: str) -> str | None:
        """Apply an approve/reject button press; return the answer text."""
        parsed = parse_moderation_callback(data)
        if parsed is None:
            return None
        action, article_id = parsed
        if not self.is_admin(telegram_id):
            logger.warning(
                "Moderation callback from non-admin",
                extra={"telegram_id": telegram_id, "article_id": str(article_id)},
            )
            return "Недостаточно прав."
        try:
            if action == "approve":
                self.article_service.approve(article_id)
                return "Статья одобрена"
            self.article_service.reject(article_id, CALLBACK_REJECTION_REASON)
        except GatewayError as exc:
            return exc.message
        return "Статья отклонена"


def _format_notice(article: Article) -> str:
    author = article.author
    author_name = (
        "Аноним"
        if article.is_anonymous
        else (author.first_name if author and author.first_name else "Unknown")
    )
    username = author.username if author and author.username else "no_username"
    preview = article.preview or article.body[:300] or "Нет превью"
    return (
        "📝 <b>Новая статья на модерацию</b>\n\n"
        f"<b>Заголовок:</b> {escape(article.title)}\n\n"
        f"<b>Автор:</b> {escape(author_name)} (@{escape(username)})\n\n"
        f"<b>Превью:</b>\n{escape(preview)}...\n\n"
        f"<b>ID:</b> <code>{article.id}</code>"
    )


def _moderation_keyboard(article_id: UUID) -> dict:
    return {
        "inline_keyboard": [
            [
                {"text": "✅ Одобрить", "callback_data": f"approve:{article_id}"},
                {"text": "❌ Отклонить", "callback_data": f"reject:{article_id}"},
            ]
        ]
    }
