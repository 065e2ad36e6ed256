# storefront/models/product.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Catalog category. Publicly readable, listed alphabetically.
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        index=True,
        description="Display name of the category",
    )

    description: str | None = None
    image_url: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    Shoppers only ever see rows with is_active = true.
    stock_quantity is decremented when an order is placed.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        index=True,
        description="Display name of the product",
    )

    description: str = Field(
        default="",
        description="Long description, searched by the catalog filter",
    )

    price: Decimal = Field(
        gt=0,
        max_digits=10,
        decimal_places=2,
        description="Unit price",
    )

    category_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="categories.id",
        index=True,
    )

    image_url: str | None = Field(
        default=None,
        description="Main product image URL",
    )

    stock_quantity: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
