# storefront/schemas/product.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class CategoryRead(SQLModel):
    """
    Category representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str | None = None
    image_url: str | None = None
    created_at: datetime


class CategorySummary(SQLModel):
    id: uuid.UUID
    name: str


class ProductRead(SQLModel):
    """
    Product representation for clients, with its category embedded.
    """

    id: uuid.UUID
    name: str
    description: str
    price: Decimal
    category_id: uuid.UUID | None = None
    category: CategorySummary | None = None
    image_url: str | None = None
    stock_quantity: int
    is_active: bool
    created_at: datetime


class ProductSummary(SQLModel):
    """
    Subset of product fields embedded in cart and wishlist rows.
    """

    id: uuid.UUID
    name: str
    price: Decimal
    image_url: str | None = None
    stock_quantity: int


class ProductFilters(SQLModel):
    """
    Catalog filter options.

    - category: category id equality
    - min_price / max_price: inclusive bounds
    - search: case-insensitive substring on name OR description
    """

    model_config = ConfigDict(extra="forbid")

    category: uuid.UUID | None = None
    min_price: Decimal | None = Field(default=None, ge=0)
    max_price: Decimal | None = Field(default=None, ge=0)
    search: str | None = None

    @field_validator("search")
    @classmethod
    def normalize_search(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None
