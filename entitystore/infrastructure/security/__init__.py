"""Security: session tokens and password hashing."""

from entitystore.infrastructure.security.jwt import SessionClaims, TokenService
from entitystore.infrastructure.security.password import (
    get_password_hash,
    verify_password,
)

__all__ = ["SessionClaims", "TokenService", "get_password_hash", "verify_password"]
