"""Shared authentication steps for privileged Mini-App actions."""

import logging
from dataclasses import dataclass

from miniapp_gateway.domain.errors import AuthenticationFailure, ValidationFailure
from miniapp_gateway.domain.init_data import (
    TelegramIdentity,
    VerificationFailure,
    VerificationFailureReason,
)
from miniapp_gateway.domain.profiles import Profile
from miniapp_gateway.services.init_data import InitDataVerifier
from miniapp_gateway.services.profiles import ProfileService

logger = logging.getLogger(__name__)

_TOKEN_MISMATCH_HINT = (
    "Токен бота на сервере не совпадает с ботом, через которого открыто "
    "мини-приложение. Проверьте TELEGRAM_BOT_TOKEN."
)


@dataclass
class RequestGateway:
    """Authenticates callers and resolves them to profiles."""

    verifier: InitDataVerifier
    profile_service: ProfileService

    def authenticate(self, action: str, init_data: str | None) -> TelegramIdentity:
        """Verify the signed payload or raise an authentication error."""
        if not init_data:
            raise ValidationFailure("Требуется initData", reason="missing_init_data")
        result = self.verifier.verify(init_data)
        if isinstance(result, VerificationFailure):
            self._log_failure(action, result, len(init_data))
            hint = (
                _TOKEN_MISMATCH_HINT
                if result.reason is VerificationFailureReason.HASH_MISMATCH
                else None
            )
            raise AuthenticationFailure(
                "Недействительные данные Telegram initData",
                reason=result.reason.value,
                hint=hint,
            )
        return result

    def resolve_profile(self, identity: TelegramIdentity) -> Profile:
        """Return the profile of an authenticated caller."""
        return self.profile_service.require_profile(identity.id)

    def authenticate_profile(
        self, action: str, init_data: str | None
    ) -> tuple[TelegramIdentity, Profile]:
        """Authenticate and resolve the caller in one step."""
        identity = self.authenticate(action, init_data)
        return identity, self.resolve_profile(identity)

    def _log_failure(
        self, action: str, failure: VerificationFailure, payload_length: int
    ) -> None:
        logger.warning(
            "initData verification failed",
            extra={
                "action": action,
                "reason": failure.reason.value,
                "auth_date": failure.auth_date,
                "has_query_id": failure.has_query_id,
                "telegram_id": failure.user_id,
                "init_data_length": payload_length,
                "token_prefix": self.verifier.token_prefix,
            },
        )
        if failure.reason is VerificationFailureReason.HASH_MISMATCH:
            logger.warning(
                "Signature mismatch for %s; the bot token most likely differs "
                "from the bot that launched the Mini-App",
                action,
            )
