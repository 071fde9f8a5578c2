"""Product API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# Column limits: price is NUMERIC(10, 2), stock is a 32-bit INTEGER
MAX_PRICE = 99_999_999.99
MAX_STOCK = 2**31 - 1


class ProductCreateRequest(BaseModel):
    """Request body for creating a product."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    price: float = Field(
        ..., gt=0, le=MAX_PRICE, description="Unit price, two decimal places"
    )
    stock: int = Field(default=0, ge=0, le=MAX_STOCK)


class ProductUpdateRequest(BaseModel):
    """Partial update. Zero values (including stock 0) leave the field unchanged."""

    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    price: float | None = Field(default=None, ge=0, le=MAX_PRICE)
    stock: int | None = Field(default=None, ge=0, le=MAX_STOCK)


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: float
    stock: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    total: int
    page: int
    page_size: int
