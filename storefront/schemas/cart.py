# storefront/schemas/cart.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict
from sqlmodel import SQLModel

from storefront.schemas.product import ProductSummary


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.

    quantity < 1 is rejected by the service with a 400.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = 1


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart line.

    - quantity <= 0 removes the line.
    - expected_quantity (optional) makes the update conditional on the
      stored quantity; a mismatch is a 409.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int
    expected_quantity: int | None = None


class CartItemRead(SQLModel):
    """
    Read model for a single cart line, joined with its product.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    product: ProductSummary
    line_total: Decimal
    created_at: datetime


class CheckoutQuote(SQLModel):
    """
    Display-only estimate shown before checkout.
    The order itself stores only the line total.
    """

    subtotal: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal
    estimated_total: Decimal


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total_items: int
    total_amount: Decimal
    quote: CheckoutQuote
