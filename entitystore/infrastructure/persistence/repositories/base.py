"""Base repository: generic CRUD over one ORM model, returning application DTOs.

Every mutation commits before returning, so a caller that invalidates cache
entries afterwards never races an uncommitted write. SQLAlchemy errors are
translated into the domain taxonomy (IntegrityError -> ConflictException,
anything else -> InternalException) after rolling the session back.
"""

from __future__ import annotations

import dataclasses
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from entitystore.domain.exceptions import (
    ConflictException,
    InternalException,
    NotFoundException,
)
from entitystore.infrastructure.persistence.database import Base


class BaseRepository[ModelType: Base, EntityT, CreateT]:
    """CRUD for one model. Subclasses implement _to_result and may override _conflict."""

    resource_type = "entity"

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    def _to_result(self, obj: ModelType) -> EntityT:
        raise NotImplementedError

    def _conflict(self, error: IntegrityError) -> ConflictException:
        """Map a unique-constraint violation to a client-facing conflict."""
        return ConflictException(f"{self.resource_type} already exists", cause=error)

    @asynccontextmanager
    async def _translate_errors(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except IntegrityError as e:
            await self.db.rollback()
            raise self._conflict(e) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise InternalException(
                f"{self.resource_type} {operation} failed", cause=e
            ) from e

    async def _get_model(self, entity_id: int) -> ModelType:
        model: Any = self.model
        async with self._translate_errors("lookup"):
            result = await self.db.execute(select(self.model).where(model.id == entity_id))
            obj = result.scalar_one_or_none()
        if obj is None:
            raise NotFoundException(self.resource_type, entity_id)
        return obj

    async def get_by_id(self, entity_id: int) -> EntityT:
        """Return a single record by primary key; raise NotFoundException if absent."""
        return self._to_result(await self._get_model(entity_id))

    async def get_all(self, offset: int = 0, limit: int = 100) -> list[EntityT]:
        """Return records ordered by id with pagination."""
        model: Any = self.model
        async with self._translate_errors("list"):
            result = await self.db.execute(
                select(self.model).order_by(model.id).offset(offset).limit(limit)
            )
            return [self._to_result(obj) for obj in result.scalars().all()]

    async def count(self) -> int:
        async with self._translate_errors("count"):
            result = await self.db.execute(select(func.count()).select_from(self.model))
            return int(result.scalar_one())

    async def create(self, data: CreateT) -> EntityT:
        """Insert a record from a create DTO, commit, and return it."""
        obj = self.model(**dataclasses.asdict(data))  # type: ignore[call-overload]
        async with self._translate_errors("create"):
            self.db.add(obj)
            await self.db.commit()
            await self.db.refresh(obj)
        return self._to_result(obj)

    async def update(self, entity_id: int, changes: dict[str, Any]) -> EntityT:
        """Set the given columns on an existing record, commit, and return it."""
        obj = await self._get_model(entity_id)
        for field, value in changes.items():
            if not hasattr(self.model, field):
                raise ValueError(f"{self.model.__name__} has no column {field!r}")
            setattr(obj, field, value)
        async with self._translate_errors("update"):
            await self.db.commit()
            await self.db.refresh(obj)
        return self._to_result(obj)

    async def delete(self, entity_id: int) -> None:
        obj = await self._get_model(entity_id)
        async with self._translate_errors("delete"):
            await self.db.delete(obj)
            await self.db.commit()
