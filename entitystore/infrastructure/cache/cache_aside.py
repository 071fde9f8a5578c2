"""Cache-aside repository wrapper.

Wraps an entity store with read-through caching and invalidate-on-write:

- Reads try the cache first. A hit that fails to deserialize is treated as a
  miss. A miss reads the store and populates the cache best-effort. Absence
  (NotFoundException) is never cached.
- Writes go to the store first and only then delete the entity key and the
  whole list family for the entity type. Cached values are never updated in
  place, so the cache can only hold something the store returned on a read.

List-family invalidation is SCAN + UNLINK and is not atomic: a reader that
misses a page and repopulates it between the scan and the unlink (or that read
the store just before the write committed) can leave a stale page until its
TTL expires. Single-entity keys have the same window for a reader whose store
read precedes the write but whose cache set lands after the delete.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Callable
from decimal import Decimal
from typing import Any

from pydantic import TypeAdapter

from entitystore.application.interfaces.repositories import IEntityStore
from entitystore.core.constants import DEFAULT_ENTITY_CACHE_TTL
from entitystore.infrastructure.cache.cache_protocol import CacheProtocol
from entitystore.infrastructure.cache.keys import entity_key, list_key, list_pattern

logger = logging.getLogger(__name__)


def is_zero_value(value: Any) -> bool:
    """Return True for None, empty strings and numeric zero (bools are never zero)."""
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (str, bytes)):
        return len(value) == 0
    if isinstance(value, (int, float, Decimal)):
        return value == 0
    return False


def effective_changes(patch: Any) -> dict[str, Any]:
    """Return the fields of a patch dataclass that count as provided.

    A field equal to its zero value is left unchanged, so an update can never
    clear a field to empty or zero.
    """
    if dataclasses.is_dataclass(patch) and not isinstance(patch, type):
        items = ((f.name, getattr(patch, f.name)) for f in dataclasses.fields(patch))
    else:
        items = dict(patch).items()
    return {name: value for name, value in items if not is_zero_value(value)}


class CacheAsideRepository[EntityT, CreateT]:
    """Read-through / invalidate-on-write wrapper around one entity store.

    Stateless apart from the injected store and cache handles, so one
    instance per request (or a shared one) is safe under concurrency.
    """

    def __init__(
        self,
        store: IEntityStore[EntityT, CreateT],
        cache: CacheProtocol | None,
        *,
        entity_type: type[EntityT],
        key_prefix: str,
        list_prefix: str,
        ttl: int = DEFAULT_ENTITY_CACHE_TTL,
    ) -> None:
        """Initialize the wrapper.

        Args:
            store: Source of truth (see IEntityStore contract).
            cache: Cache backend; None disables caching entirely.
            entity_type: Dataclass returned by the store; also the wire format.
            key_prefix: Single-entity key prefix (e.g. "user").
            list_prefix: List-family prefix (e.g. "users").
            ttl: Seconds a cached entry lives.
        """
        self.store = store
        self.cache = cache
        self.key_prefix = key_prefix
        self.list_prefix = list_prefix
        self.ttl = ttl
        self._entity_adapter = TypeAdapter(entity_type)
        self._list_adapter = TypeAdapter(list[entity_type])  # type: ignore[valid-type]

    def _cache_enabled(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    def key_for(self, entity_id: int) -> str:
        return entity_key(self.key_prefix, entity_id)

    # ---- serialization ----

    def _dump_entity(self, entity: EntityT) -> str:
        return self._entity_adapter.dump_json(entity).decode("utf-8")

    def _load_entity(self, raw: str) -> EntityT:
        return self._entity_adapter.validate_json(raw)

    def _dump_page(self, items: list[EntityT], total: int) -> str:
        return json.dumps(
            {"items": self._list_adapter.dump_python(items, mode="json"), "total": total}
        )

    def _load_page(self, raw: str) -> tuple[list[EntityT], int]:
        data = json.loads(raw)
        total = data["total"]
        if not isinstance(total, int) or isinstance(total, bool):
            raise ValueError("page total must be an integer")
        return self._list_adapter.validate_python(data["items"]), total

    # ---- reads ----

    async def get_by_id(self, entity_id: int) -> EntityT:
        """Return the entity, from cache when possible.

        Raises NotFoundException (from the store) when absent; absence is not cached.
        """
        key = self.key_for(entity_id)
        if self._cache_enabled():
            raw = await self.cache.get(key)
            if raw is not None:
                try:
                    return self._load_entity(raw)
                except ValueError:
                    logger.warning("Discarding unreadable cache entry %s", key)
        entity = await self.store.get_by_id(entity_id)
        await self._populate(key, lambda: self._dump_entity(entity))
        return entity

    async def list_page(self, offset: int, limit: int) -> tuple[list[EntityT], int]:
        """Return one page of entities and the total count, from cache when possible."""
        key = list_key(self.list_prefix, offset, limit)
        if self._cache_enabled():
            raw = await self.cache.get(key)
            if raw is not None:
                try:
                    return self._load_page(raw)
                except (ValueError, TypeError, KeyError):
                    logger.warning("Discarding unreadable cache entry %s", key)
        items = await self.store.get_all(offset, limit)
        total = await self.store.count()
        await self._populate(key, lambda: self._dump_page(items, total))
        return items, total

    async def _populate(self, key: str, serialize: Callable[[], str]) -> None:
        """Best-effort cache write; failures are logged, never raised."""
        if not self._cache_enabled():
            return
        try:
            payload = serialize()
        except (ValueError, TypeError):
            logger.warning("Failed to serialize value for cache key %s", key, exc_info=True)
            return
        if not await self.cache.set(key, payload, self.ttl):
            logger.warning("Cache write failed for %s; serving uncached", key)

    # ---- writes ----

    async def create(self, data: CreateT) -> EntityT:
        """Insert via the store, then drop every cached page of this entity type."""
        entity = await self.store.create(data)
        await self._invalidate_lists()
        return entity

    async def update(self, entity_id: int, patch: Any) -> EntityT:
        """Apply a partial update read from and written to the store, then invalidate.

        The current row is read from the store (never the cache). Zero-valued
        patch fields are ignored. The store write completes before the entity
        key and list family are deleted.
        """
        await self.store.get_by_id(entity_id)
        changes = effective_changes(patch)
        updated = await self.store.update(entity_id, changes)
        await self._invalidate_entity(entity_id)
        return updated

    async def delete(self, entity_id: int) -> None:
        """Verify existence, delete from the store, then invalidate."""
        await self.store.get_by_id(entity_id)
        await self.store.delete(entity_id)
        await self._invalidate_entity(entity_id)

    # ---- invalidation ----

    async def _invalidate_entity(self, entity_id: int) -> None:
        if not self._cache_enabled():
            return
        await self.cache.delete(self.key_for(entity_id))
        await self._invalidate_lists()

    async def _invalidate_lists(self) -> None:
        if not self._cache_enabled():
            return
        await self.cache.delete_pattern(list_pattern(self.list_prefix))
