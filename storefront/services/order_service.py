# storefront/services/order_service.py
import logging
import uuid
from contextlib import contextmanager
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.core.errors import (
    EmptyCartError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from storefront.core.money import to_money
from storefront.models.cart import CartItem
from storefront.models.order import Order, OrderItem
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderRead,
    ShippingAddress,
)

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create order from cart
      - Validate cart items against products (active, stock)
      - Compute total_amount once, snapshot unit prices
      - Deduct stock_quantity
      - Clear cart after success
      - Read a user's own orders
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # -------- User-facing operations --------

    def create_order_from_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: OrderCreate,
    ) -> OrderRead:
        """
        Convert the current user's cart into an Order.

        Steps:
          1. Load cart items; error if empty.
          2. Validate the shipping address (all fields required).
          3. For each cart item: product exists & is active,
             quantity <= stock_quantity.
          4. Compute total_amount from live product prices.
          5. Create Order row (status='pending').
          6. Create OrderItem rows with the product price snapshotted.
          7. Deduct product stock_quantity.
          8. Commit 5-7 as one transaction.
          9. Clear cart (failure is logged, the order stands).
        """
        # 1) Load cart
        cart_items: list[CartItem] = self.cart_repo.list_for_user(session, user_id)
        if not cart_items:
            raise EmptyCartError("Cart is empty")

        # 2) Shipping address
        address = payload.shipping_address
        missing = address.missing_fields()
        if missing:
            raise ValidationError(
                {"message": "Shipping address is incomplete", "fields": missing}
            )

        # 3) Validate each cart item vs product
        product_map = self.product_repo.get_many(
            session, (ci.product_id for ci in cart_items)
        )
        self._validate_cart(cart_items, product_map)

        # 4) Total, computed once from the cart as read above
        prices: dict[uuid.UUID, Decimal] = {
            ci.product_id: product_map[ci.product_id].price for ci in cart_items
        }
        total_amount = to_money(
            sum((ci.quantity * prices[ci.product_id] for ci in cart_items), Decimal("0"))
        )
        if total_amount <= 0:
            raise ValidationError("Total order amount must be positive")

        # 5) Create the Order
        with self._checkout_step(session, "order"):
            order = self.order_repo.create_order(
                session,
                Order(
                    user_id=user_id,
                    total_amount=total_amount,
                    status="pending",
                    shipping_address=address.model_dump(),
                ),
            )

        # 6) Create OrderItem rows
        with self._checkout_step(session, "order_items"):
            order_items = self.order_repo.create_items(
                session,
                [
                    OrderItem(
                        order_id=order.id,
                        product_id=ci.product_id,
                        quantity=ci.quantity,
                        price=prices[ci.product_id],
                    )
                    for ci in cart_items
                ],
            )

        # 7) Deduct stock_quantity
        short: list[dict[str, str]] = []
        with self._checkout_step(session, "stock"):
            for ci in cart_items:
                if not self.product_repo.decrement_stock(
                    session, ci.product_id, ci.quantity
                ):
                    short.append(
                        {
                            "product_id": str(ci.product_id),
                            "reason": "Insufficient stock",
                        }
                    )
        if short:
            # Stock moved between validation and the update.
            session.rollback()
            raise ValidationError({"message": "Cart validation failed", "items": short})

        # Response is built from the rows written above; commit expires them
        # and nothing after the commit may re-read the store.
        result = self._build_order_dto(
            order,
            [(it, product_map.get(it.product_id)) for it in order_items],
        )

        # 8) Commit transaction
        with self._checkout_step(session, "commit"):
            session.commit()
        logger.info(
            "Order %s created for user %s (%d lines, total %s)",
            result.id,
            user_id,
            len(cart_items),
            total_amount,
        )

        # 9) Clear cart; the order is already the record of truth
        try:
            self.cart_repo.clear_user_cart(session, user_id)
        except SQLAlchemyError:
            session.rollback()
            logger.warning(
                "Order %s placed but cart for user %s could not be cleared",
                result.id,
                user_id,
                exc_info=True,
            )

        return result

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        """
        List orders for the given user, newest first, with items.
        """
        orders = self.order_repo.list_for_user(session, user_id, skip, limit)
        rows = self.order_repo.list_items_with_products(
            session, [o.id for o in orders]
        )

        grouped: dict[uuid.UUID, list[tuple[OrderItem, Product | None]]] = {
            o.id: [] for o in orders
        }
        for item, product in rows:
            grouped[item.order_id].append((item, product))

        return [self._build_order_dto(o, grouped[o.id]) for o in orders]

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        Get a single order for the user, including items.

        - 404 if order not found or does not belong to this user.
        """
        order = self.order_repo.get_for_user(session, user_id, order_id)
        if not order:
            raise NotFoundError("Order not found")
        return self._load_order(session, order)

    # -------- Helpers --------

    @staticmethod
    def _validate_cart(
        cart_items: list[CartItem],
        product_map: dict[uuid.UUID, Product],
    ) -> None:
        missing: list[dict[str, str]] = []
        errors: list[dict[str, str]] = []

        for ci in cart_items:
            product = product_map.get(ci.product_id)

            if not product or not product.is_active:
                missing.append(
                    {
                        "product_id": str(ci.product_id),
                        "reason": "Product not found",
                    }
                )
                continue

            if ci.quantity > product.stock_quantity:
                errors.append(
                    {
                        "product_id": str(ci.product_id),
                        "reason": f"Insufficient stock (have {product.stock_quantity}, requested {ci.quantity})",
                    }
                )

        if missing:
            raise NotFoundError({"message": "Cart validation failed", "items": missing})
        if errors:
            raise ValidationError({"message": "Cart validation failed", "items": errors})

    @contextmanager
    def _checkout_step(self, session: Session, step: str):
        """
        Run one step of the checkout transaction.

        A store failure rolls back everything written so far, so an order
        never survives without its items.
        """
        try:
            yield
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Checkout failed at step %r, rolled back: %s", step, exc)
            raise StoreError(f"Checkout failed while writing {step}", step=step) from exc

    def _load_order(self, session: Session, order: Order) -> OrderRead:
        rows = self.order_repo.list_items_with_products(session, [order.id])
        return self._build_order_dto(order, rows)

    def _build_order_dto(
        self,
        order: Order,
        rows: list[tuple[OrderItem, Product | None]],
    ) -> OrderRead:
        """
        Compose OrderRead from ORM models. Line totals use the stored
        snapshot price, never the live product price.
        """
        item_dtos = [
            OrderItemRead(
                id=it.id,
                order_id=it.order_id,
                product_id=it.product_id,
                quantity=it.quantity,
                price=it.price,
                line_total=to_money(it.quantity * it.price),
                product_name=product.name if product else None,
                product_image_url=product.image_url if product else None,
                created_at=it.created_at,
            )
            for it, product in rows
        ]

        return OrderRead(
            id=order.id,
            user_id=order.user_id,
            total_amount=order.total_amount,
            status=order.status,
            shipping_address=ShippingAddress.model_validate(order.shipping_address),
            created_at=order.created_at,
            items=item_dtos,
        )
