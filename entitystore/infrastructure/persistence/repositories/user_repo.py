"""User repository with email lookup and password check. Returns application DTOs."""

from __future__ import annotations

import asyncio

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from entitystore.application.dtos.user import UserCreate, UserResult
from entitystore.domain.exceptions import ConflictException, NotFoundException
from entitystore.infrastructure.persistence.models.user import User
from entitystore.infrastructure.persistence.repositories.base import BaseRepository
from entitystore.infrastructure.security.password import (
    get_password_hash,
    verify_password,
)

# Lazy dummy hash for constant-time comparison when user is not found (timing-attack mitigation).
_dummy_hash_cache: str | None = None


async def _get_dummy_hash() -> str:
    """Return a valid bcrypt hash for dummy comparison; computed once in thread pool."""
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(
            get_password_hash, "not-a-real-password"
        )
    return _dummy_hash_cache


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        name=u.name,
        email=u.email,
        age=u.age,
        created_at=u.created_at,
        updated_at=u.updated_at,
    )


class UserRepository(BaseRepository[User, UserResult, UserCreate]):
    """User store. Unique email; authenticate never reveals which check failed."""

    resource_type = "user"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    def _to_result(self, obj: User) -> UserResult:
        return _user_to_result(obj)

    def _conflict(self, error: IntegrityError) -> ConflictException:
        return ConflictException("email already exists", field="email", cause=error)

    async def _get_model_by_email(self, email: str) -> User | None:
        async with self._translate_errors("lookup"):
            result = await self.db.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> UserResult:
        user = await self._get_model_by_email(email)
        if user is None:
            raise NotFoundException(self.resource_type, email)
        return _user_to_result(user)

    async def authenticate(self, email: str, password: str) -> UserResult | None:
        user = await self._get_model_by_email(email)
        if user is None:
            dummy_hash = await _get_dummy_hash()
            await asyncio.to_thread(verify_password, password, dummy_hash)
            return None
        if not await asyncio.to_thread(verify_password, password, user.hashed_password):
            return None
        return _user_to_result(user)
