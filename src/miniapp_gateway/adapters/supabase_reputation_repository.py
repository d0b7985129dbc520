"""Supabase repositories for reputation history and notifications."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from miniapp_gateway.domain.reputation import (
    Granter,
    ReputationGrant,
    ReputationHistoryEntry,
)
from miniapp_gateway.services.reputation import (
    DuplicateGrantError,
    NotificationRepository,
    ReputationRepository,
)

_UNIQUE_VIOLATION = "23505"
_HISTORY_COLUMNS = (
    "id, value, created_at, "
    "from_user:profiles!reputation_history_from_user_id_fkey("
    "id, first_name, last_name, username, avatar_url, "
    "show_name, show_username, show_avatar, subscription_tier)"
)


@dataclass
class SupabaseReputationRepository(ReputationRepository):
    """Supabase implementation for the reputation_history table."""

    client: Client

    def has_grant_since(
        self, from_user_id: UUID, user_id: UUID, since: datetime
    ) -> bool:
        """Return true when the sender granted the recipient after ``since``."""
        response = (
            self.client.table("reputation_history")
            .select("id")
            .eq("from_user_id", str(from_user_id))
            .eq("user_id", str(user_id))
            .gte("created_at", since.isoformat())
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def create_grant(
        self, from_user_id: UUID, user_id: UUID, value: int
    ) -> ReputationGrant:
        """Append a grant row and return it."""
        try:
            response = (
                self.client.table("reputation_history")
                .insert(
                    {
                        "from_user_id": str(from_user_id),
                        "user_id": str(user_id),
                        "value": value,
                    }
                )
                .execute()
            )
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise DuplicateGrantError(str(exc)) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create reputation grant")
        row = response.data[0]
        return ReputationGrant(
            id=UUID(str(row["id"])),
            from_user_id=UUID(str(row["from_user_id"])),
            user_id=UUID(str(row["user_id"])),
            value=int(row.get("value", value)),
            created_at=_parse_timestamp(row.get("created_at")),
        )

    def sum_values(self, user_id: UUID) -> int:
        """Return the sum of grant values for a recipient."""
        response = (
            self.client.table("reputation_history")
            .select("value")
            .eq("user_id", str(user_id))
            .execute()
        )
        return sum(int(row.get("value") or 0) for row in response.data or [])

    def list_history(self, user_id: UUID, limit: int) -> list[ReputationHistoryEntry]:
        """Return recent grants joined with granter profiles."""
        response = (
            self.client.table("reputation_history")
            .select(_HISTORY_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_history_row(row) for row in response.data or []]


@dataclass
class SupabaseNotificationRepository(NotificationRepository):
    """Supabase implementation for the notifications table."""

    client: Client

    def create_notification(
        self,
        user_profile_id: UUID,
        from_user_id: UUID,
        notification_type: str,
        message: str,
    ) -> None:
        """Create an unread notification row."""
        self.client.table("notifications").insert(
            {
                "user_profile_id": str(user_profile_id),
                "from_user_id": str(from_user_id),
                "type": notification_type,
                "message": message,
                "is_read": False,
            }
        ).execute()


def _parse_timestamp(raw: object) -> datetime:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return datetime.now(tz=UTC)


def _parse_history_row(row: dict[str, object]) -> ReputationHistoryEntry:
    granter_raw = row.get("from_user")
    granter = (
        Granter(
            id=UUID(str(granter_raw["id"])),
            first_name=granter_raw.get("first_name"),
            last_name=granter_raw.get("last_name"),
            username=granter_raw.get("username"),
            avatar_url=granter_raw.get("avatar_url"),
            show_name=granter_raw.get("show_name") is not False,
            show_username=granter_raw.get("show_username") is not False,
            show_avatar=granter_raw.get("show_avatar") is not False,
            subscription_tier=granter_raw.get("subscription_tier"),
        )
        if isinstance(granter_raw, dict)
        else None
    )
    return ReputationHistoryEntry(
        id=UUID(str(row["id"])),
        value=int(row.get("value") or 0),
        created_at=_parse_timestamp(row.get("created_at")),
        from_user=granter,
    )
