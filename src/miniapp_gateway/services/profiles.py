"""Profile lookup and Telegram sync."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from miniapp_gateway.domain.errors import NotFoundFailure
from miniapp_gateway.domain.init_data import TelegramIdentity
from miniapp_gateway.domain.profiles import Profile, ProfileSnapshot


class ProfileRepository(Protocol):
    """Persistence interface for profiles."""

    def get_by_telegram_id(self, telegram_id: int) -> Profile | None:
        """Return the profile for a Telegram user id, if present."""

    def get_by_id(self, profile_id: UUID) -> Profile | None:
        """Return a profile by id, if present."""

    def create_profile(self, payload: dict[str, object]) -> Profile:
        """Insert a profile row and return it."""

    def update_profile(self, profile_id: UUID, payload: dict[str, object]) -> Profile:
        """Update a profile row and return it."""

    def set_reputation(self, profile_id: UUID, reputation: int) -> None:
        """Overwrite the cached reputation counter."""


class ArticleCountRepository(Protocol):
    """Counts articles written by a profile."""

    def count_by_author(self, author_id: UUID) -> int:
        """Return the number of articles for an author."""


class ReputationTotalsRepository(Protocol):
    """Sums reputation grants received by a profile."""

    def sum_values(self, user_id: UUID) -> int:
        """Return the sum of grant values for a recipient."""


@dataclass
class ProfileService:
    """Application service for profile lifecycle actions."""

    repository: ProfileRepository
    article_repository: ArticleCountRepository
    reputation_repository: ReputationTotalsRepository

    def require_profile(self, telegram_id: int) -> Profile:
        """Return the caller's profile or fail with not found."""
        profile = self.repository.get_by_telegram_id(telegram_id)
        if profile is None:
            raise NotFoundFailure("Профиль не найден", reason="profile_not_found")
        return profile

    def sync_profile(self, identity: TelegramIdentity) -> ProfileSnapshot:
        """Upsert the profile from Telegram data and return derived counters.

        The returned reputation is recomputed from grant history; the cached
        column on the row is not trusted for display.
        """
        payload: dict[str, object] = {
            "telegram_id": identity.id,
            "username": identity.username or None,
            "first_name": identity.first_name or "User",
            "last_name": identity.last_name or None,
            "avatar_url": identity.photo_url or None,
            "is_premium": identity.is_premium,
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        existing = self.repository.get_by_telegram_id(identity.id)
        if existing:
            profile = self.repository.update_profile(existing.id, payload)
        else:
            profile = self.repository.create_profile({**payload, "reputation": 0})
        return ProfileSnapshot(
            profile=profile,
            reputation=self.reputation_repository.sum_values(profile.id),
            articles_count=self.article_repository.count_by_author(profile.id),
        )
