"""Reputation grants and history."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from miniapp_gateway.domain.errors import (
    BusinessRuleViolation,
    NotFoundFailure,
    ValidationFailure,
)
from miniapp_gateway.domain.profiles import Profile
from miniapp_gateway.domain.reputation import (
    GRANT_COOLDOWN,
    GRANT_VALUE,
    HISTORY_LIMIT,
    ReputationGrant,
    ReputationHistoryEntry,
    ReputationSummary,
)
from miniapp_gateway.services.profiles import ProfileRepository

logger = logging.getLogger(__name__)


class DuplicateGrantError(Exception):
    """Raised by a store that enforces one grant per pair and window."""


class ReputationRepository(Protocol):
    """Persistence interface for reputation history."""

    def has_grant_since(
        self, from_user_id: UUID, user_id: UUID, since: datetime
    ) -> bool:
        """Return true when the sender granted the recipient after ``since``."""

    def create_grant(
        self, from_user_id: UUID, user_id: UUID, value: int
    ) -> ReputationGrant:
        """Append a grant and return it."""

    def sum_values(self, user_id: UUID) -> int:
        """Return the sum of grant values for a recipient."""

    def list_history(self, user_id: UUID, limit: int) -> list[ReputationHistoryEntry]:
        """Return recent grants for a recipient, newest first."""


class NotificationRepository(Protocol):
    """Persistence interface for in-app notifications."""

    def create_notification(
        self,
        user_profile_id: UUID,
        from_user_id: UUID,
        notification_type: str,
        message: str,
    ) -> None:
        """Create an unread notification."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _cooldown_error() -> BusinessRuleViolation:
    return BusinessRuleViolation(
        "Вы уже давали репутацию этому пользователю за последние 24 часа",
        reason="cooldown_active",
    )


@dataclass
class ReputationService:
    """Application service for reputation grants."""

    repository: ReputationRepository
    profile_repository: ProfileRepository
    notification_repository: NotificationRepository
    clock: Callable[[], datetime] = field(default=_utcnow)

    def give_reputation(
        self, sender: Profile, target_user_id: UUID | None, reason: str | None
    ) -> ReputationGrant:
        """Grant +1 reputation from sender to target.

        The history row is authoritative: once it is written, failures while
        bumping the cached counter or notifying the recipient are logged and
        do not fail the grant.

        The cooldown check is read-then-write and not atomic. A store with a
        unique constraint on (sender, recipient, day) closes the race; its
        conflict surfaces here as the same cooldown error.
        """
        if target_user_id is None or not reason or not reason.strip():
            raise ValidationFailure(
                "Требуются targetUserId и reason", reason="missing_fields"
            )
        if sender.id == target_user_id:
            raise BusinessRuleViolation(
                "Нельзя дать репутацию самому себе", reason="self_grant"
            )
        target = self.profile_repository.get_by_id(target_user_id)
        if target is None:
            raise NotFoundFailure(
                "Пользователь не найден", reason="target_not_found"
            )
        since = self.clock() - GRANT_COOLDOWN
        if self.repository.has_grant_since(sender.id, target.id, since):
            raise _cooldown_error()
        try:
            grant = self.repository.create_grant(sender.id, target.id, GRANT_VALUE)
        except DuplicateGrantError as exc:
            raise _cooldown_error() from exc

        try:
            self.profile_repository.set_reputation(
                target.id, target.reputation + grant.value
            )
        except Exception:
            logger.exception(
                "Failed to update cached reputation",
                extra={"profile_id": str(target.id), "grant_id": str(grant.id)},
            )
        try:
            self.notification_repository.create_notification(
                user_profile_id=target.id,
                from_user_id=sender.id,
                notification_type="reputation",
                message=f'{sender.display_name} дал вам +1 rep: "{reason.strip()}"',
            )
        except Exception:
            logger.exception(
                "Failed to create reputation notification",
                extra={"profile_id": str(target.id), "grant_id": str(grant.id)},
            )
        return grant

    def get_user_reputation(self, user_id: UUID) -> ReputationSummary:
        """Return cached reputation and recent grants for a profile."""
        profile = self.profile_repository.get_by_id(user_id)
        if profile is None:
            raise NotFoundFailure("Профиль не найден", reason="profile_not_found")
        return ReputationSummary(
            reputation=profile.reputation,
            history=self.repository.list_history(profile.id, HISTORY_LIMIT),
        )
