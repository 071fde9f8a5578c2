"""Domain exceptions for the entity store.

One closed taxonomy (ErrorKind) shared by every error the application raises
on purpose. Each exception carries its kind, a public message that is safe to
return to clients, optional details, and an optional wrapped cause. The
presentation layer maps kinds to HTTP status codes in exception handlers.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Closed set of error categories surfaced at the HTTP boundary."""

    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION = "VALIDATION_ERROR"
    INTERNAL = "INTERNAL_ERROR"


class EntityStoreError(Exception):
    """Base exception for all entity store errors.

    Attributes:
        kind: Category from ErrorKind; decides the outward status.
        message: Human-readable, client-safe description.
        details: Additional client-safe context (e.g. field, resource_id).
        cause: Underlying exception, logged server-side only.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    @property
    def error_code(self) -> str:
        """Machine-readable code (the kind's value)."""
        return self.kind.value

    def to_dict(self) -> dict[str, Any]:
        """Serialize for an HTTP response body (never includes the cause)."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class NotFoundException(EntityStoreError):
    """Raised when a requested entity is absent from the store."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource_type: str,
        resource_id: Any,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            f"{resource_type} not found",
            {"resource_type": resource_type, "resource_id": resource_id},
            cause,
        )


class ConflictException(EntityStoreError):
    """Raised on a uniqueness violation (e.g. duplicate email)."""

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        message: str,
        field: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, {"field": field} if field else {}, cause)


class UnauthorizedException(EntityStoreError):
    """Raised when a credential is missing, malformed, invalid or expired.

    The outward message is always the same; ``reason`` is for server logs.
    """

    kind = ErrorKind.UNAUTHORIZED
    PUBLIC_MESSAGE = "Unauthorized"

    def __init__(
        self,
        reason: str = "authentication failed",
        cause: BaseException | None = None,
    ) -> None:
        self.reason = reason
        super().__init__(self.PUBLIC_MESSAGE, None, cause)


class InvalidCredentialsException(UnauthorizedException):
    """Login failed. Same message for unknown email and wrong password."""

    PUBLIC_MESSAGE = "invalid email or password"

    def __init__(self) -> None:
        super().__init__("invalid email or password")


class ValidationException(EntityStoreError):
    """Raised when input validation fails (e.g. invalid id or range)."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, {"field": field} if field else {})


class InternalException(EntityStoreError):
    """Store, cache or signing failure not attributable to caller input.

    The public message is fixed; the real message and cause go to logs.
    """

    kind = ErrorKind.INTERNAL
    PUBLIC_MESSAGE = "Internal server error"

    def __init__(self, reason: str, cause: BaseException | None = None) -> None:
        self.reason = reason
        super().__init__(self.PUBLIC_MESSAGE, None, cause)
