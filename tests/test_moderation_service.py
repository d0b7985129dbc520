"""Tests for admin chat moderation."""

import asyncio
from uuid import uuid4

from miniapp_gateway.domain.articles import ArticleStatus
from miniapp_gateway.services.articles import ArticleService
from miniapp_gateway.services.moderation import (
    CALLBACK_REJECTION_REASON,
    ModerationService,
    parse_moderation_callback,
)
from tests.conftest import ADMIN_TELEGRAM_ID


def _service(article_repository, telegram_client, admin_chat_id="-100123"):
    return ModerationService(
        article_service=ArticleService(article_repository),
        telegram_client=telegram_client,
        admin_chat_id=admin_chat_id,
        admin_user_ids={ADMIN_TELEGRAM_ID},
    )


def _article(service: ModerationService, profile_repository, **draft: object):
    author = profile_repository.add(42)
    return service.article_service.create_article(
        author, {"title": "<b>Hi</b>", "body": "Body", **draft}
    )


def test_parse_moderation_callback() -> None:
    article_id = uuid4()

    assert parse_moderation_callback(f"approve:{article_id}") == (
        "approve",
        article_id,
    )
    assert parse_moderation_callback(f"reject:{article_id}") == ("reject", article_id)
    assert parse_moderation_callback("approve:not-a-uuid") is None
    assert parse_moderation_callback(f"delete:{article_id}") is None
    assert parse_moderation_callback("approve") is None


def test_send_moderation_notice_posts_keyboard(
    article_repository, telegram_client, profile_repository
) -> None:
    service = _service(article_repository, telegram_client)
    article = _article(service, profile_repository)

    message_id = asyncio.run(service.send_moderation_notice(article.id))

    assert message_id == 501
    [message] = telegram_client.messages
    assert message["chat_id"] == "-100123"
    assert message["parse_mode"] == "HTML"
    assert "&lt;b&gt;Hi&lt;/b&gt;" in message["text"]
    buttons = message["reply_markup"]["inline_keyboard"][0]
    assert buttons[0]["callback_data"] == f"approve:{article.id}"
    assert buttons[1]["callback_data"] == f"reject:{article.id}"
    assert article_repository.articles[article.id].telegram_message_id == 501


def test_anonymous_author_is_hidden(
    article_repository, telegram_client, profile_repository
) -> None:
    service = _service(article_repository, telegram_client)
    article = _article(service, profile_repository, is_anonymous=True)

    asyncio.run(service.send_moderation_notice(article.id))

    assert "Аноним" in telegram_client.messages[0]["text"]


def test_notice_skipped_without_admin_chat(
    article_repository, telegram_client, profile_repository
) -> None:
    service = _service(article_repository, telegram_client, admin_chat_id=None)
    article = _article(service, profile_repository)

    assert asyncio.run(service.send_moderation_notice(article.id)) is None
    assert telegram_client.messages == []


def test_admin_callback_approves(
    article_repository, telegram_client, profile_repository
) -> None:
    service = _service(article_repository, telegram_client)
    article = _article(service, profile_repository)

    answer = asyncio.run(
        service.handle_callback(ADMIN_TELEGRAM_ID, f"approve:{article.id}")
    )

    assert answer == "Статья одобрена"
    assert article_repository.articles[article.id].status is ArticleStatus.APPROVED


def test_admin_callback_rejects_with_fixed_reason(
    article_repository, telegram_client, profile_repository
) -> None:
    service = _service(article_repository, telegram_client)
    article = _article(service, profile_repository)

    answer = asyncio.run(
        service.handle_callback(ADMIN_TELEGRAM_ID, f"reject:{article.id}")
    )

    stored = article_repository.articles[article.id]
    assert answer == "Статья отклонена"
    assert stored.status is ArticleStatus.REJECTED
    assert stored.rejection_reason == CALLBACK_REJECTION_REASON


def test_non_admin_callback_is_refused(
    article_repository, telegram_client, profile_repository
) -> None:
    service = _service(article_repository, telegram_client)
    article = _article(service, profile_repository)

    answer = asyncio.run(service.handle_callback(1, f"approve:{article.id}"))

    assert answer == "Недостаточно прав."
    assert article_repository.articles[article.id].status is ArticleStatus.PENDING


def test_callback_for_missing_article(article_repository, telegram_client) -> None:
    service = _service(article_repository, telegram_client)

    answer = asyncio.run(
        service.handle_callback(ADMIN_TELEGRAM_ID, f"approve:{uuid4()}")
    )

    assert answer == "Статья не найдена"
