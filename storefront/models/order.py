# storefront/models/order.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Column
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import SQLModel, Field

# jsonb on Supabase Postgres, plain JSON elsewhere (sqlite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")

# pending -> processing -> shipped -> delivered
# cancelled is reachable from any non-terminal status.
ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")


class Order(SQLModel, table=True):
    """
    Customer order.

    total_amount is computed once at checkout and never recomputed.
    shipping_address is a snapshot of the checkout form:
      full_name, phone, street, city, state, postal_code, country
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(index=True)

    total_amount: Decimal = Field(
        gt=0,
        max_digits=10,
        decimal_places=2,
        description="Sum of line quantity * snapshot price",
    )

    # pending | processing | shipped | delivered | cancelled
    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    shipping_address: dict[str, Any] = Field(
        sa_column=Column(JSONType, nullable=False),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    price is copied from Product.price at checkout and never re-read.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    price: Decimal = Field(
        gt=0,
        max_digits=10,
        decimal_places=2,
        description="Unit price at time of order",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
