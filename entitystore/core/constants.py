"""Core constants: cache key prefixes and token literals.

Cache key structure is shared with existing cache populations and must not
change: ``user:<id>``, ``product:<id>``, ``users:list:*``, ``products:list:*``.
"""

# Single-entity cache key prefixes
CACHE_PREFIX_USER = "user"
CACHE_PREFIX_PRODUCT = "product"

# List-family prefixes (plural) and the family marker
CACHE_PREFIX_USERS = "users"
CACHE_PREFIX_PRODUCTS = "products"
CACHE_LIST_SEGMENT = "list"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

DEFAULT_ENTITY_CACHE_TTL = 300

# Session tokens
TOKEN_ALGORITHM = "HS256"
DEFAULT_TOKEN_EXPIRE_HOURS = 24
BEARER_SCHEME = "bearer"

# Pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Largest value a BIGINT id or row offset can hold
MAX_ENTITY_ID = 2**63 - 1
