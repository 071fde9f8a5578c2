"""Domain layer: error taxonomy shared by every other layer."""

from entitystore.domain.exceptions import (
    ConflictException,
    EntityStoreError,
    ErrorKind,
    InternalException,
    InvalidCredentialsException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)

__all__ = [
    "ConflictException",
    "EntityStoreError",
    "ErrorKind",
    "InternalException",
    "InvalidCredentialsException",
    "NotFoundException",
    "UnauthorizedException",
    "ValidationException",
]
