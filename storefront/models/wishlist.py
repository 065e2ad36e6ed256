# storefront/models/wishlist.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class WishlistItem(SQLModel, table=True):
    """
    Saved (user, product) pair. Unique per pair.
    """

    __tablename__ = "wishlist_items"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="wishlist_items_user_id_product_id_key"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(index=True)

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
