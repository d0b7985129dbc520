"""Reputation domain models."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

GRANT_COOLDOWN = timedelta(hours=24)
GRANT_VALUE = 1
HISTORY_LIMIT = 50


@dataclass(frozen=True)
class ReputationGrant:
    """Append-only +1 endorsement from one profile to another."""

    id: UUID
    from_user_id: UUID
    user_id: UUID
    value: int
    created_at: datetime


@dataclass(frozen=True)
class Granter:
    """Display fields of the profile that gave a grant."""

    id: UUID
    first_name: str | None
    last_name: str | None
    username: str | None
    avatar_url: str | None
    show_name: bool
    show_username: bool
    show_avatar: bool
    subscription_tier: str | None


@dataclass(frozen=True)
class ReputationHistoryEntry:
    """A grant joined with its granter's profile fields."""

    id: UUID
    value: int
    created_at: datetime
    from_user: Granter | None


@dataclass(frozen=True)
class ReputationSummary:
    """Cached reputation plus recent history of a profile."""

    reputation: int
    history: list[ReputationHistoryEntry]
