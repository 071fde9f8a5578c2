"""Authentication use cases: login, token refresh and current-user lookup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from entitystore.application.dtos.user import UserCreate, UserResult
from entitystore.domain.exceptions import InvalidCredentialsException

if TYPE_CHECKING:
    from entitystore.application.interfaces.repositories import IUserRepository
    from entitystore.infrastructure.cache.cache_aside import CacheAsideRepository
    from entitystore.infrastructure.security.jwt import SessionClaims, TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """Exchange credentials for session tokens and resolve token identities."""

    def __init__(
        self,
        store: IUserRepository,
        users: CacheAsideRepository[UserResult, UserCreate],
        tokens: TokenService,
    ) -> None:
        self._store = store
        self._users = users
        self._tokens = tokens

    async def login(self, email: str, password: str) -> tuple[str, UserResult]:
        """Return (token, user). Raises InvalidCredentialsException on any mismatch."""
        user = await self._store.authenticate(email, password)
        if user is None:
            logger.info("Login failed for %s", email)
            raise InvalidCredentialsException()
        return self._tokens.issue(user.id, user.email), user

    def refresh(self, claims: SessionClaims) -> str:
        """Issue a fresh token for an already-validated identity."""
        return self._tokens.refresh(claims)

    async def current_user(self, claims: SessionClaims) -> UserResult:
        """Current state of the token's subject; NotFoundException if since deleted."""
        return await self._users.get_by_id(claims.subject_id)
