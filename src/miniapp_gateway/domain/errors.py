"""Gateway error taxonomy mapped onto HTTP status codes."""


class GatewayError(Exception):
    """Base error rendered as the JSON error envelope."""

    status_code = 500

    def __init__(
        self,
        message: str,
        reason: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.hint = hint

    def to_payload(self) -> dict[str, str]:
        """Return the error envelope body."""
        payload = {"error": self.message}
        if self.reason is not None:
            payload["reason"] = self.reason
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ValidationFailure(GatewayError):
    """Missing or malformed input."""

    status_code = 400


class BusinessRuleViolation(GatewayError):
    """A valid request that breaks a business rule."""

    status_code = 400


class AuthenticationFailure(GatewayError):
    """The signed payload could not be verified."""

    status_code = 401


class AuthorizationFailure(GatewayError):
    """Authenticated caller lacks privilege or tier."""

    status_code = 403


class NotFoundFailure(GatewayError):
    """A referenced entity does not exist."""

    status_code = 404


class InternalFailure(GatewayError):
    """Unexpected store or storage error."""

    status_code = 500
