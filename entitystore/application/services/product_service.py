"""Product application service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from entitystore.application.dtos.pagination import PageResult, normalize_page
from entitystore.application.dtos.product import (
    ProductCreate,
    ProductPatch,
    ProductResult,
)
from entitystore.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

if TYPE_CHECKING:
    from entitystore.infrastructure.cache.cache_aside import CacheAsideRepository

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(
        self,
        products: CacheAsideRepository[ProductResult, ProductCreate],
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        self._products = products
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    async def create_product(
        self, name: str, price: float, description: str = "", stock: int = 0
    ) -> ProductResult:
        product = await self._products.create(
            ProductCreate(name=name, price=price, description=description, stock=stock)
        )
        logger.info("Created product %s", product.id)
        return product

    async def get_product(self, product_id: int) -> ProductResult:
        return await self._products.get_by_id(product_id)

    async def list_products(
        self, page: int | None = None, page_size: int | None = None
    ) -> PageResult[ProductResult]:
        req = normalize_page(
            page,
            page_size,
            default_size=self._default_page_size,
            max_size=self._max_page_size,
        )
        items, total = await self._products.list_page(req.offset, req.page_size)
        return PageResult(items=items, total=total, page=req.page, page_size=req.page_size)

    async def update_product(
        self,
        product_id: int,
        name: str | None = None,
        description: str | None = None,
        price: float | None = None,
        stock: int | None = None,
    ) -> ProductResult:
        """Partial update; a stock of 0 here means "unchanged", not "sold out"."""
        patch = ProductPatch(name=name, description=description, price=price, stock=stock)
        return await self._products.update(product_id, patch)

    async def delete_product(self, product_id: int) -> None:
        await self._products.delete(product_id)
        logger.info("Deleted product %s", product_id)
