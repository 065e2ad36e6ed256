# storefront/repositories/cart_repo.py
import uuid

from sqlalchemy import delete, update
from sqlmodel import Session, select

from storefront.models.cart import CartItem
from storefront.models.product import Product


class CartRepository:
    """
    Data access layer for cart_items.

    Every query is scoped by user_id, on top of the store's own
    row-level policies.
    """

    # Get items for a user
    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at)
        )
        return list(session.exec(stmt).all())

    def list_with_products(
        self, session: Session, user_id: uuid.UUID
    ) -> list[tuple[CartItem, Product]]:
        stmt = (
            select(CartItem, Product)
            .join(Product, Product.id == CartItem.product_id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at)
        )
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def get_for_user(
        self, session: Session, user_id: uuid.UUID, item_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.id == item_id, CartItem.user_id == user_id
        )
        return session.exec(stmt).first()

    # CRUD
    def create(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def update(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def compare_and_set_quantity(
        self,
        session: Session,
        item: CartItem,
        expected_quantity: int,
        quantity: int,
    ) -> bool:
        """
        Set quantity only if the stored value still equals expected_quantity.

        Returns False (and changes nothing) when another writer got there first.
        """
        stmt = (
            update(CartItem)
            .where(
                CartItem.id == item.id,
                CartItem.user_id == item.user_id,
                CartItem.quantity == expected_quantity,
            )
            .values(quantity=quantity)
        )
        result = session.exec(stmt)
        if result.rowcount == 0:
            session.rollback()
            return False
        session.commit()
        session.refresh(item)
        return True

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    def clear_user_cart(self, session: Session, user_id: uuid.UUID) -> None:
        session.exec(delete(CartItem).where(CartItem.user_id == user_id))
        session.commit()
