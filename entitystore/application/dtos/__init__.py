"""Application DTOs: read-models, create payloads and partial-update patches."""

from entitystore.application.dtos.pagination import (
    PageRequest,
    PageResult,
    normalize_page,
)
from entitystore.application.dtos.product import (
    ProductCreate,
    ProductPatch,
    ProductResult,
)
from entitystore.application.dtos.user import UserCreate, UserPatch, UserResult

__all__ = [
    "PageRequest",
    "PageResult",
    "ProductCreate",
    "ProductPatch",
    "ProductResult",
    "UserCreate",
    "UserPatch",
    "UserResult",
    "normalize_page",
]
