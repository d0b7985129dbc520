"""Telegram WebApp initData models."""

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel


class TelegramIdentity(BaseModel):
    """User object embedded in a verified initData payload."""

    id: int
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    photo_url: str | None = None
    language_code: str | None = None
    is_premium: bool = False


class VerificationFailureReason(StrEnum):
    """Reasons a signed payload is rejected."""

    MISSING_HASH = "missing_hash"
    HASH_MISMATCH = "hash_mismatch"
    MISSING_USER = "missing_user"
    BAD_USER_JSON = "bad_user_json"
    EXPIRED = "expired"


@dataclass(frozen=True)
class VerificationFailure:
    """Tagged verification failure with diagnostics.

    ``user_id`` is read from the unverified payload and is only meant for logs.
    """

    reason: VerificationFailureReason
    auth_date: str | None = None
    has_query_id: bool = False
    user_id: int | None = None
