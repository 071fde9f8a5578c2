"""Cache: Redis service, cache-aside wrapper and key utilities.

CacheService owns the Redis pool; CacheAsideRepository applies read-through
and invalidate-on-write over any IEntityStore; key format lives in keys.py.
"""

from entitystore.infrastructure.cache.cache_aside import (
    CacheAsideRepository,
    effective_changes,
    is_zero_value,
)
from entitystore.infrastructure.cache.cache_protocol import CacheProtocol
from entitystore.infrastructure.cache.keys import (
    entity_key,
    list_key,
    list_pattern,
    product_key,
    user_key,
)
from entitystore.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheAsideRepository",
    "CacheProtocol",
    "CacheService",
    "effective_changes",
    "entity_key",
    "is_zero_value",
    "list_key",
    "list_pattern",
    "product_key",
    "user_key",
]
