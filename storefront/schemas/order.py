# storefront/schemas/order.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]

SHIPPING_ADDRESS_FIELDS = (
    "full_name",
    "phone",
    "street",
    "city",
    "state",
    "postal_code",
    "country",
)


class ShippingAddress(SQLModel):
    """
    Shipping snapshot stored on the order.

    All fields are required. Values are stripped here; blank or missing
    fields are reported by OrderService as a single 400 listing them.
    """

    model_config = ConfigDict(extra="forbid")

    full_name: str = ""
    phone: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""

    @field_validator(*SHIPPING_ADDRESS_FIELDS, mode="before")
    @classmethod
    def strip_value(cls, v: str | None) -> str:
        if v is None:
            return ""
        return str(v).strip()

    def missing_fields(self) -> list[str]:
        return [name for name in SHIPPING_ADDRESS_FIELDS if not getattr(self, name)]


class OrderCreate(SQLModel):
    """
    Payload for creating an order from the current cart.

    Backend derives:
      - user_id from token
      - status = 'pending'
      - total_amount and items from cart
    """

    model_config = ConfigDict(extra="forbid")

    shipping_address: ShippingAddress


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    price: Decimal
    line_total: Decimal
    product_name: str | None = None
    product_image_url: str | None = None
    created_at: datetime


class OrderRead(SQLModel):
    """
    Full order view including items.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    total_amount: Decimal
    status: OrderStatus
    shipping_address: ShippingAddress
    created_at: datetime
    items: list[OrderItemRead]
