"""Telegram WebApp initData verification.

Telegram signs the Mini-App launch payload with a key derived from the bot
token. A payload is authentic when the hex HMAC-SHA256 of its data-check
string (every ``key=value`` pair except ``hash``, sorted and joined with
newlines) matches the ``hash`` field.

Verification never raises on malformed input: every failure path returns a
``VerificationFailure`` tagged with its reason.
"""

import hashlib
import hmac
import json
from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import parse_qsl

from pydantic import ValidationError

from miniapp_gateway.domain.init_data import (
    TelegramIdentity,
    VerificationFailure,
    VerificationFailureReason,
)

_SECRET_KEY_LABEL = b"WebAppData"


def parse_init_data(signed_payload: str) -> list[tuple[str, str]]:
    """Split a signed payload into decoded key/value pairs, keeping order."""
    return parse_qsl(signed_payload, keep_blank_values=True)


def build_data_check_string(pairs: list[tuple[str, str]]) -> str:
    """Return the canonical string Telegram signs."""
    rendered = [f"{key}={value}" for key, value in pairs if key != "hash"]
    return "\n".join(sorted(rendered))


def compute_init_data_hash(data_check_string: str, bot_token: str) -> str:
    """Return the hex signature of a data-check string for a bot token."""
    secret = hmac.new(
        _SECRET_KEY_LABEL, bot_token.encode("utf-8"), hashlib.sha256
    ).digest()
    return hmac.new(
        secret, data_check_string.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def verify_init_data(
    signed_payload: str,
    bot_token: str,
    *,
    max_age_seconds: int | None = None,
    now: datetime | None = None,
) -> TelegramIdentity | VerificationFailure:
    """Verify a signed payload and return the embedded Telegram user."""
    pairs = parse_init_data(signed_payload or "")
    auth_date = _first(pairs, "auth_date")
    has_query_id = bool(_first(pairs, "query_id"))

    received_hash = _first(pairs, "hash")
    if not received_hash:
        return VerificationFailure(
            reason=VerificationFailureReason.MISSING_HASH,
            auth_date=auth_date,
            has_query_id=has_query_id,
        )

    candidate = compute_init_data_hash(build_data_check_string(pairs), bot_token)
    if not hmac.compare_digest(
        candidate.encode("ascii"), received_hash.encode("utf-8")
    ):
        return VerificationFailure(
            reason=VerificationFailureReason.HASH_MISMATCH,
            auth_date=auth_date,
            has_query_id=has_query_id,
            user_id=_peek_user_id(_first(pairs, "user")),
        )

    if max_age_seconds is not None and _is_expired(auth_date, max_age_seconds, now):
        return VerificationFailure(
            reason=VerificationFailureReason.EXPIRED,
            auth_date=auth_date,
            has_query_id=has_query_id,
        )

    user_json = _first(pairs, "user")
    if not user_json:
        return VerificationFailure(
            reason=VerificationFailureReason.MISSING_USER,
            auth_date=auth_date,
            has_query_id=has_query_id,
        )

    try:
        return TelegramIdentity.model_validate(json.loads(user_json))
    except (ValueError, ValidationError):
        return VerificationFailure(
            reason=VerificationFailureReason.BAD_USER_JSON,
            auth_date=auth_date,
            has_query_id=has_query_id,
        )


@dataclass(frozen=True)
class InitDataVerifier:
    """Verifier bound to the configured bot token."""

    bot_token: str
    max_age_seconds: int | None = None

    def verify(
        self, signed_payload: str, now: datetime | None = None
    ) -> TelegramIdentity | VerificationFailure:
        """Verify a signed payload against the bound bot token."""
        return verify_init_data(
            signed_payload,
            self.bot_token,
            max_age_seconds=self.max_age_seconds,
            now=now,
        )

    @property
    def token_prefix(self) -> str:
        """Short token prefix safe to print in diagnostics."""
        if not self.bot_token:
            return "NOT_SET"
        return f"{self.bot_token[:10]}..."


def _first(pairs: list[tuple[str, str]], key: str) -> str | None:
    for name, value in pairs:
        if name == key:
            return value
    return None


def _peek_user_id(user_json: str | None) -> int | None:
    if not user_json:
        return None
    try:
        user = json.loads(user_json)
    except ValueError:
        return None
    if isinstance(user, dict) and isinstance(user.get("id"), int):
        return user["id"]
    return None


def _is_expired(
    auth_date: str | None, max_age_seconds: int, now: datetime | None
) -> bool:
    if not auth_date or not auth_date.isdigit():
        return True
    current = now or datetime.now(tz=UTC)
    return current.timestamp() - int(auth_date) > max_age_seconds
