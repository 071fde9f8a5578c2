"""Product API: thin routes delegating to ProductService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from entitystore.api.v1.dependencies import get_product_service, parse_entity_id
from entitystore.application.services import ProductService
from entitystore.schemas.product import (
    ProductCreateRequest,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
)

router = APIRouter()

ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]


def _product_id(product_id: str) -> int:
    return parse_entity_id(product_id, "product")


ProductId = Annotated[int, Depends(_product_id)]


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(
    body: ProductCreateRequest, products: ProductServiceDep
) -> ProductResponse:
    product = await products.create_product(
        name=body.name,
        price=body.price,
        description=body.description,
        stock=body.stock,
    )
    return ProductResponse.model_validate(product)


@router.get("", response_model=ProductListResponse)
async def list_products(
    products: ProductServiceDep,
    page: int = 1,
    page_size: int = 10,
) -> ProductListResponse:
    result = await products.list_products(page, page_size)
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: ProductId, products: ProductServiceDep) -> ProductResponse:
    return ProductResponse.model_validate(await products.get_product(product_id))


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: ProductId, body: ProductUpdateRequest, products: ProductServiceDep
) -> ProductResponse:
    """Partial update. A stock of 0 is treated as "not provided"."""
    product = await products.update_product(
        product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        stock=body.stock,
    )
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: ProductId, products: ProductServiceDep) -> Response:
    await products.delete_product(product_id)
    return Response(status_code=204)
