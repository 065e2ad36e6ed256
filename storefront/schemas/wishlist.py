# storefront/schemas/wishlist.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel

from storefront.schemas.product import ProductSummary


class WishlistItemRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    product_id: uuid.UUID
    product: ProductSummary | None = None
    created_at: datetime


class WishlistStatus(SQLModel):
    """
    Presence of a product in the caller's wishlist.
    """

    product_id: uuid.UUID
    in_wishlist: bool
