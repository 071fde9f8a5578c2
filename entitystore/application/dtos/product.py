"""DTOs for product use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ProductResult:
    """Product read-model and cache wire representation."""

    id: int
    name: str
    price: float
    description: str = ""
    stock: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ProductCreate:
    name: str
    price: float
    description: str = ""
    stock: int = 0


@dataclass(frozen=True)
class ProductPatch:
    """Partial update. Zero values mean "not provided" (stock cannot be set to 0 here)."""

    name: str | None = None
    description: str | None = None
    price: float | None = None
    stock: int | None = None
