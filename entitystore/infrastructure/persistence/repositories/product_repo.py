"""Product repository. Returns application DTOs."""

from sqlalchemy.ext.asyncio import AsyncSession

from entitystore.application.dtos.product import ProductCreate, ProductResult
from entitystore.infrastructure.persistence.models.product import Product
from entitystore.infrastructure.persistence.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product, ProductResult, ProductCreate]):
    resource_type = "product"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Product)

    def _to_result(self, obj: Product) -> ProductResult:
        return ProductResult(
            id=obj.id,
            name=obj.name,
            description=obj.description,
            price=float(obj.price),
            stock=obj.stock,
            created_at=obj.created_at,
            updated_at=obj.updated_at,
        )
