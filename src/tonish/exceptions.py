"""Custom exceptions for the Tonish API.

Every error the HTTP layer maps to a status code lives here, so stores,
services and routers can share them without circular imports.
"""


class TonishError(Exception):
    """Base exception for all Tonish errors."""

    status_code = 500


class NotFoundError(TonishError):
    """Raised when a requested entity does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: int | None = None) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ConflictError(TonishError):
    """Raised when a write would violate a uniqueness constraint."""

    status_code = 409


class AuthenticationError(TonishError):
    """Raised when a request cannot be authenticated."""

    status_code = 401


class InvalidCredentialsError(AuthenticationError):
    """Raised on unknown e-mail or wrong password."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class InvalidTokenError(AuthenticationError):
    """Raised when a bearer token is malformed, expired, or wrongly signed."""

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class RegistrationDisabledError(TonishError):
    """Raised when self-service registration is switched off."""

    status_code = 403

    def __init__(self) -> None:
        super().__init__("User registration is currently disabled")


class AIServiceError(TonishError):
    """Raised when the language-model server call fails."""


class AIResponseParseError(AIServiceError):
    """Raised when the model reply is not a JSON object.

    Carries the raw reply so the caller can surface it.
    """

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__("Failed to parse AI response")


class AIUnavailableError(AIServiceError):
    """Raised when the language-model server health probe fails."""

    status_code = 503


class HubNotRunningError(TonishError, RuntimeError):
    """Raised when registering with a hub whose control loop is not running."""
