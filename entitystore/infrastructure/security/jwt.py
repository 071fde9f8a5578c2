"""Stateless session tokens (JWT, HS256).

TokenService issues compact signed tokens carrying
``{user_id, email, iss, iat, nbf, exp}`` and validates them without any
server-side session storage. There is no revocation list: a token stays valid
until ``exp`` even if the user is deleted afterwards. Refresh issues a new
token and leaves the old one valid.

Time checks are done here rather than by jose so that the boundary is exact
(``now >= exp`` is expired) and the clock can be injected in tests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from entitystore.core.config import Settings
from entitystore.core.constants import (
    DEFAULT_TOKEN_EXPIRE_HOURS,
    MAX_ENTITY_ID,
    TOKEN_ALGORITHM,
)
from entitystore.domain.exceptions import InternalException, UnauthorizedException

logger = logging.getLogger(__name__)

_REQUIRED_CLAIMS = ("user_id", "email", "iss", "iat", "nbf", "exp")


@dataclass(frozen=True)
class SessionClaims:
    """Identity and validity window embedded in a token. Immutable once issued."""

    subject_id: int
    email: str
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    issuer: str


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_datetime(payload: dict[str, Any], claim: str) -> datetime:
    value = payload[claim]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise UnauthorizedException(f"claim {claim!r} is not a numeric date")
    try:
        return datetime.fromtimestamp(value, UTC)
    except (OverflowError, OSError, ValueError) as e:
        raise UnauthorizedException(f"claim {claim!r} is out of range", cause=e) from e


def _claims_from_payload(payload: dict[str, Any]) -> SessionClaims:
    """Build SessionClaims from a verified payload; raise if claims are missing or ill-typed."""
    missing = [c for c in _REQUIRED_CLAIMS if c not in payload]
    if missing:
        raise UnauthorizedException(f"token missing claims: {', '.join(missing)}")
    user_id = payload["user_id"]
    if (
        isinstance(user_id, bool)
        or not isinstance(user_id, int)
        or not 0 <= user_id <= MAX_ENTITY_ID
    ):
        raise UnauthorizedException("claim 'user_id' is not a valid entity id")
    email, issuer = payload["email"], payload["iss"]
    if not isinstance(email, str) or not isinstance(issuer, str):
        raise UnauthorizedException("claims 'email' and 'iss' must be strings")
    return SessionClaims(
        subject_id=user_id,
        email=email,
        issued_at=_as_datetime(payload, "iat"),
        not_before=_as_datetime(payload, "nbf"),
        expires_at=_as_datetime(payload, "exp"),
        issuer=issuer,
    )


class TokenService:
    """Issue, validate and refresh HS256 session tokens.

    Pure in-memory computation: no I/O, no shared mutable state, safe to share
    across concurrent requests.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        issuer: str,
        expire_hours: int = DEFAULT_TOKEN_EXPIRE_HOURS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            secret_key: Symmetric signing key. Empty is a configuration error.
            issuer: Value for the ``iss`` claim.
            expire_hours: Token lifetime; values <= 0 mean 24 hours, resolved
                at issuance.
            clock: Returns the current aware UTC datetime (tests inject one).

        Raises:
            ValueError: If secret_key is empty (fatal at startup, not per request).
        """
        if not secret_key:
            raise ValueError("Token signing key is not configured (SECRET_KEY)")
        self._secret_key = secret_key
        self.issuer = issuer
        self.expire_hours = expire_hours
        self._clock = clock or _utcnow

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        return cls(
            settings.secret_key.get_secret_value(),
            issuer=settings.token_issuer,
            expire_hours=settings.token_expire_hours,
        )

    def _lifetime(self) -> timedelta:
        hours = self.expire_hours if self.expire_hours > 0 else DEFAULT_TOKEN_EXPIRE_HOURS
        return timedelta(hours=hours)

    def issue(self, subject_id: int, email: str) -> str:
        """Return a signed token for subject_id/email valid from now for the configured TTL."""
        now = self._clock()
        claims = {
            "user_id": subject_id,
            "email": email,
            "iss": self.issuer,
            "iat": now,
            "nbf": now,
            "exp": now + self._lifetime(),
        }
        try:
            return jwt.encode(claims, self._secret_key, algorithm=TOKEN_ALGORITHM)
        except JWTError as e:
            raise InternalException("failed to sign session token", cause=e) from e

    def validate(self, token: str) -> SessionClaims:
        """Verify signature and validity window; return the embedded claims unchanged.

        Does not consult the user store. Every failure raises
        UnauthorizedException whose ``reason`` is for logs only.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise UnauthorizedException("malformed token", cause=e) from e
        algorithm = header.get("alg")
        if algorithm != TOKEN_ALGORITHM:
            raise UnauthorizedException(f"unexpected signing algorithm {algorithm!r}")
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[TOKEN_ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                    "verify_aud": False,
                },
            )
        except JWTError as e:
            raise UnauthorizedException("signature verification failed", cause=e) from e

        claims = _claims_from_payload(payload)
        now = self._clock()
        if now < claims.not_before:
            raise UnauthorizedException("token not yet valid")
        if now >= claims.expires_at:
            raise UnauthorizedException("token expired")
        return claims

    def refresh(self, claims: SessionClaims) -> str:
        """Issue a fresh token for an already-validated identity. The old token stays valid."""
        return self.issue(claims.subject_id, claims.email)
