"""Supabase-backed profile repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from miniapp_gateway.domain.profiles import Profile
from miniapp_gateway.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_by_telegram_id(self, telegram_id: int) -> Profile | None:
        """Return the profile for a Telegram user id, if present."""
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("telegram_id", telegram_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return parse_profile(response.data[0])
        return None

    def get_by_id(self, profile_id: UUID) -> Profile | None:
        """Return a profile by id, if present."""
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("id", str(profile_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return parse_profile(response.data[0])
        return None

    def create_profile(self, payload: dict[str, object]) -> Profile:
        """Insert a profile row and return it."""
        response = self.client.table("profiles").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create profile in Supabase")
        return parse_profile(response.data[0])

    def update_profile(self, profile_id: UUID, payload: dict[str, object]) -> Profile:
        """Update a profile row and return it."""
        response = (
            self.client.table("profiles")
            .update(payload)
            .eq("id", str(profile_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update profile in Supabase")
        return parse_profile(response.data[0])

    def set_reputation(self, profile_id: UUID, reputation: int) -> None:
        """Overwrite the cached reputation counter."""
        self.client.table("profiles").update({"reputation": reputation}).eq(
            "id", str(profile_id)
        ).execute()


def parse_profile(row: dict[str, object]) -> Profile:
    """Build a profile from a Supabase row."""
    return Profile(
        id=UUID(str(row["id"])),
        telegram_id=int(row["telegram_id"]),
        username=row.get("username"),
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
        avatar_url=row.get("avatar_url"),
        is_premium=bool(row.get("is_premium")),
        reputation=int(row.get("reputation") or 0),
        subscription_tier=row.get("subscription_tier"),
        show_name=row.get("show_name") is not False,
        show_username=row.get("show_username") is not False,
        show_avatar=row.get("show_avatar") is not False,
    )
