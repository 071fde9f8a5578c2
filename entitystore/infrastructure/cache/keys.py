"""Cache key builders. Single place for key format.

Formats are shared with existing cache populations:
    user:<id>            product:<id>
    users:list:<o>:<l>   products:list:<o>:<l>   (family pattern users:list:*)

Prefixes must not contain CACHE_KEY_SEP to avoid ambiguous or colliding keys.
"""

from entitystore.core.constants import (
    CACHE_KEY_SEP,
    CACHE_LIST_SEGMENT,
    CACHE_PREFIX_PRODUCT,
    CACHE_PREFIX_USER,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator."""
    if not value or CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must be non-empty and must not "
            f"contain separator {CACHE_KEY_SEP!r}"
        )


def entity_key(prefix: str, entity_id: int) -> str:
    """Cache key for a single entity, e.g. ``user:42``."""
    _validate_key_component(prefix, "prefix")
    return f"{prefix}{CACHE_KEY_SEP}{entity_id}"


def list_key(list_prefix: str, offset: int, limit: int) -> str:
    """Cache key for one page of a list family, e.g. ``users:list:0:10``."""
    _validate_key_component(list_prefix, "list_prefix")
    return (
        f"{list_prefix}{CACHE_KEY_SEP}{CACHE_LIST_SEGMENT}{CACHE_KEY_SEP}"
        f"{offset}{CACHE_KEY_SEP}{limit}"
    )


def list_pattern(list_prefix: str) -> str:
    """Glob matching every page of a list family, e.g. ``users:list:*``."""
    _validate_key_component(list_prefix, "list_prefix")
    return f"{list_prefix}{CACHE_KEY_SEP}{CACHE_LIST_SEGMENT}{CACHE_KEY_SEP}*"


def user_key(user_id: int) -> str:
    """Cache key for user by ID."""
    return entity_key(CACHE_PREFIX_USER, user_id)


def product_key(product_id: int) -> str:
    """Cache key for product by ID."""
    return entity_key(CACHE_PREFIX_PRODUCT, product_id)
