"""Profile domain models."""

from dataclasses import dataclass
from uuid import UUID

PREMIUM_TIER = "premium"


@dataclass(frozen=True)
class Profile:
    """Application user record keyed by Telegram id."""

    id: UUID
    telegram_id: int
    username: str | None
    first_name: str | None
    last_name: str | None
    avatar_url: str | None
    is_premium: bool
    reputation: int
    subscription_tier: str | None
    show_name: bool = True
    show_username: bool = True
    show_avatar: bool = True

    @property
    def has_premium_tier(self) -> bool:
        """Return true when the subscription unlocks premium actions."""
        return self.subscription_tier == PREMIUM_TIER

    @property
    def display_name(self) -> str:
        """Name shown to other users in notifications."""
        if self.username:
            return f"@{self.username}"
        return self.first_name or "Пользователь"


@dataclass(frozen=True)
class ProfileSnapshot:
    """Profile as returned by a sync, with derived counters."""

    profile: Profile
    reputation: int
    articles_count: int
