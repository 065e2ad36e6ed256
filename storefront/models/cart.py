# storefront/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    Shopping cart entry for a user.
    One user cannot have 2 rows for the same product.

    No price is stored here: cart totals use the live product price,
    the order snapshots it at checkout.
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="cart_items_user_id_product_id_key"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # auth.users.id (Supabase Auth schema, not mirrored here)
    user_id: uuid.UUID = Field(index=True)

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
