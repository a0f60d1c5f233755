from decimal import Decimal
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal

from glowiva.models.products import PRODUCT_CATEGORIES

ProductCategory = Literal[PRODUCT_CATEGORIES]


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)

    cost_price: Decimal = Field(
        ...,
        ge=0,
        lt=100_000_000,
        description="Cost price must be below 100 million"
    )

    # Unset or zero falls back to 1.5x cost
    selling_price: Decimal | None = Field(None, ge=0, lt=100_000_000)

    description: str | None = None
    category: ProductCategory = "other"
    stock: int = Field(0, ge=0)
    min_stock: int = Field(10, ge=0)
    sku: str | None = Field(None, max_length=40)
    image_url: str = ""

    class Config:
        extra = "forbid"


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    category: ProductCategory | None = None
    cost_price: Decimal | None = Field(None, ge=0, lt=100_000_000)
    selling_price: Decimal | None = Field(None, ge=0, lt=100_000_000)
    stock: int | None = Field(None, ge=0)
    min_stock: int | None = Field(None, ge=0)
    image_url: str | None = None
    is_active: bool | None = None

    class Config:
        extra = "forbid"


class StockUpdate(BaseModel):
    quantity: int = Field(..., ge=0)
    operation: Literal["add", "subtract", "set"] = "set"

    class Config:
        extra = "forbid"


class ProductPublicResponse(BaseModel):
    """What employees see: no cost figures."""
    id: int
    name: str
    description: str
    category: str
    selling_price: float
    stock: int
    sku: str
    image_url: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProductResponse(ProductPublicResponse):
    cost_price: float
    min_stock: int
    is_low_stock: bool
    profit: float
