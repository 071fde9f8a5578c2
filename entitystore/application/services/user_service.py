"""User application service: create, read, list, partial update and delete users."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from entitystore.application.dtos.pagination import PageResult, normalize_page
from entitystore.application.dtos.user import UserCreate, UserPatch, UserResult
from entitystore.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from entitystore.domain.exceptions import ConflictException, NotFoundException

if TYPE_CHECKING:
    from collections.abc import Callable

    from entitystore.application.interfaces.repositories import IUserRepository
    from entitystore.infrastructure.cache.cache_aside import CacheAsideRepository

logger = logging.getLogger(__name__)


class UserService:
    """User use cases over the cached repository and the underlying store.

    Reads and mutations by id go through the cache-aside wrapper; email
    lookups (uniqueness checks) always hit the store.
    """

    def __init__(
        self,
        users: CacheAsideRepository[UserResult, UserCreate],
        store: IUserRepository,
        hash_password: Callable[[str], str],
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        self._users = users
        self._store = store
        self._hash_password = hash_password
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    async def _email_owner(self, email: str) -> UserResult | None:
        try:
            return await self._store.get_by_email(email)
        except NotFoundException:
            return None

    async def create_user(
        self, name: str, email: str, password: str, age: int = 0
    ) -> UserResult:
        """Create a user. Raises ConflictException if the email is taken."""
        if await self._email_owner(email) is not None:
            raise ConflictException("email already exists", field="email")
        hashed = await asyncio.to_thread(self._hash_password, password)
        user = await self._users.create(
            UserCreate(name=name, email=email, hashed_password=hashed, age=age)
        )
        logger.info("Created user %s", user.id)
        return user

    async def get_user(self, user_id: int) -> UserResult:
        return await self._users.get_by_id(user_id)

    async def list_users(
        self, page: int | None = None, page_size: int | None = None
    ) -> PageResult[UserResult]:
        req = normalize_page(
            page,
            page_size,
            default_size=self._default_page_size,
            max_size=self._max_page_size,
        )
        items, total = await self._users.list_page(req.offset, req.page_size)
        return PageResult(items=items, total=total, page=req.page, page_size=req.page_size)

    async def update_user(
        self,
        user_id: int,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
        age: int | None = None,
    ) -> UserResult:
        """Apply a partial update. Empty or zero fields are left unchanged.

        Raises NotFoundException if the user is absent and ConflictException
        if the new email belongs to another user.
        """
        if email:
            owner = await self._email_owner(email)
            if owner is not None and owner.id != user_id:
                raise ConflictException("email already exists", field="email")
        hashed = None
        if password:
            hashed = await asyncio.to_thread(self._hash_password, password)
        patch = UserPatch(name=name, email=email, hashed_password=hashed, age=age)
        return await self._users.update(user_id, patch)

    async def delete_user(self, user_id: int) -> None:
        await self._users.delete(user_id)
        logger.info("Deleted user %s", user_id)
