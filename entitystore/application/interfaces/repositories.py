"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
SQLAlchemy repositories implement them in production; in-memory doubles
implement them in tests.

Contract shared by all stores:
- get_by_id / get_by_email raise NotFoundException when absent.
- create / update raise ConflictException on a uniqueness violation.
- Any other backend failure raises InternalException.
- Mutations are durable (committed) when the awaited call returns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from entitystore.application.dtos.product import ProductCreate, ProductResult
    from entitystore.application.dtos.user import UserCreate, UserResult


class IEntityStore[EntityT, CreateT](Protocol):
    """Per-entity persistence operations wrapped by CacheAsideRepository."""

    async def create(self, data: CreateT) -> EntityT:
        """Insert a row and return it with its assigned id."""
        ...

    async def get_by_id(self, entity_id: int) -> EntityT:
        """Return the row for entity_id; raise NotFoundException if absent."""
        ...

    async def get_all(self, offset: int, limit: int) -> list[EntityT]:
        """Return rows ordered by id with offset/limit pagination."""
        ...

    async def count(self) -> int:
        """Return the total number of rows."""
        ...

    async def update(self, entity_id: int, changes: dict[str, Any]) -> EntityT:
        """Set the given columns and return the updated row."""
        ...

    async def delete(self, entity_id: int) -> None:
        """Delete the row; raise NotFoundException if absent."""
        ...


class IUserRepository(IEntityStore["UserResult", "UserCreate"], Protocol):
    """User store: adds secondary-key lookup and credential check."""

    async def get_by_email(self, email: str) -> UserResult:
        """Return user by email; raise NotFoundException if absent."""
        ...

    async def authenticate(self, email: str, password: str) -> UserResult | None:
        """Return the user when email and password match, else None."""
        ...


class IProductRepository(IEntityStore["ProductResult", "ProductCreate"], Protocol):
    """Product store (no secondary keys)."""
