# storefront/services/cart_service.py
import uuid
from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.core.money import to_money
from storefront.models.cart import CartItem
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItemRead, CartSummary, CheckoutQuote
from storefront.schemas.product import ProductSummary

CartLine = tuple[CartItem, Product]


def cart_total_amount(lines: Iterable[CartLine]) -> Decimal:
    """
    Sum of quantity * live product price.

    This is a cart-time estimate; orders store their own snapshot.
    """
    total = sum((item.quantity * product.price for item, product in lines), Decimal("0"))
    return to_money(total)


def cart_total_items(lines: Iterable[CartLine]) -> int:
    return sum(item.quantity for item, _ in lines)


def build_quote(subtotal: Decimal) -> CheckoutQuote:
    """
    Shipping is free at or above FREE_SHIPPING_THRESHOLD (and for an empty
    cart), tax is TAX_RATE of the subtotal.
    """
    settings = get_settings()
    if subtotal <= 0 or subtotal >= settings.FREE_SHIPPING_THRESHOLD:
        shipping = Decimal("0.00")
    else:
        shipping = to_money(settings.SHIPPING_COST)
    tax = to_money(subtotal * settings.TAX_RATE)
    return CheckoutQuote(
        subtotal=to_money(subtotal),
        shipping_cost=shipping,
        tax_amount=tax,
        estimated_total=to_money(subtotal + shipping + tax),
    )


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence and active flag
      - keep one row per (user, product); repeated adds bump quantity
      - enforce 1 <= quantity <= stock_quantity
      - non-positive quantity updates remove the line
      - compute cart totals from live product prices
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_valid_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_active(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def _get_line(
        self, session: Session, user_id: uuid.UUID, item_id: uuid.UUID
    ) -> CartItem:
        item = self.cart_repo.get_for_user(session, user_id, item_id)
        if not item:
            raise NotFoundError("Item not in cart")
        return item

    @staticmethod
    def _check_stock(product: Product, quantity: int) -> None:
        if quantity > product.stock_quantity:
            raise ValidationError(
                f"Not enough stock available (have {product.stock_quantity}, "
                f"requested {quantity})"
            )

    # ---- public operations ----

    def get_cart_summary(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        """
        Return full cart summary:
          - list of CartItemRead (with product and line_total)
          - total_items
          - total_amount
          - checkout quote (shipping + tax estimate)
        """
        lines = self.cart_repo.list_with_products(session, user_id)

        item_reads = [
            CartItemRead(
                id=item.id,
                user_id=item.user_id,
                product_id=item.product_id,
                quantity=item.quantity,
                product=ProductSummary.model_validate(product, from_attributes=True),
                line_total=to_money(item.quantity * product.price),
                created_at=item.created_at,
            )
            for item, product in lines
        ]

        total_amount = cart_total_amount(lines)
        return CartSummary(
            items=item_reads,
            total_items=cart_total_items(lines),
            total_amount=total_amount,
            quote=build_quote(total_amount),
        )

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int = 1,
    ) -> CartSummary:
        """
        Add a product to the user's cart.

        Rules:
          - quantity must be >= 1
          - product must exist and be active
          - an existing line is updated, never duplicated
          - quantity + existing_quantity <= stock_quantity
        """
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        product = self._get_valid_product(session, product_id)
        existing = self.cart_repo.get_item(session, user_id, product_id)

        if existing:
            new_qty = existing.quantity + quantity
            self._check_stock(product, new_qty)
            existing.quantity = new_qty
            self.cart_repo.update(session, existing)
        else:
            self._check_stock(product, quantity)
            item = CartItem(
                user_id=user_id,
                product_id=product_id,
                quantity=quantity,
            )
            try:
                self.cart_repo.create(session, item)
            except IntegrityError:
                # Another request inserted the same (user, product) first.
                session.rollback()
                raise ConflictError("Product is already in the cart")

        return self.get_cart_summary(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        quantity: int,
        expected_quantity: int | None = None,
    ) -> CartSummary:
        """
        Set the quantity of a cart line.

        - quantity <= 0 removes the line.
        - quantity above stock_quantity => 400.
        - expected_quantity, when given, must match the stored quantity
          or the update is refused with 409.
        """
        item = self._get_line(session, user_id, item_id)

        if expected_quantity is not None and item.quantity != expected_quantity:
            raise ConflictError("Cart item was changed by another request")

        if quantity <= 0:
            return self.remove_item(session, user_id, item_id)

        product = self._get_valid_product(session, item.product_id)
        self._check_stock(product, quantity)

        if expected_quantity is None:
            item.quantity = quantity
            self.cart_repo.update(session, item)
        elif not self.cart_repo.compare_and_set_quantity(
            session, item, expected_quantity, quantity
        ):
            raise ConflictError("Cart item was changed by another request")

        return self.get_cart_summary(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
    ) -> CartSummary:
        """
        Remove a line from the cart and return the updated summary.
        """
        item = self._get_line(session, user_id, item_id)
        self.cart_repo.delete(session, item)
        return self.get_cart_summary(session, user_id)

    def clear_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        """
        Clear all items from the cart and return an empty summary.
        """
        self.cart_repo.clear_user_cart(session, user_id)
        zero = Decimal("0.00")
        return CartSummary(
            items=[],
            total_items=0,
            total_amount=zero,
            quote=build_quote(zero),
        )
