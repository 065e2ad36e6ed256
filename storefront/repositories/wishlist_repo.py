# storefront/repositories/wishlist_repo.py
import uuid

from sqlalchemy import delete
from sqlmodel import Session, select

from storefront.models.product import Product
from storefront.models.wishlist import WishlistItem


class WishlistRepository:
    """
    Data access layer for wishlist_items, always scoped by user_id.
    """

    def list_with_products(
        self, session: Session, user_id: uuid.UUID
    ) -> list[tuple[WishlistItem, Product | None]]:
        stmt = (
            select(WishlistItem, Product)
            .join(Product, Product.id == WishlistItem.product_id, isouter=True)
            .where(WishlistItem.user_id == user_id)
            .order_by(WishlistItem.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> WishlistItem | None:
        stmt = select(WishlistItem).where(
            WishlistItem.user_id == user_id,
            WishlistItem.product_id == product_id,
        )
        return session.exec(stmt).first()

    def create(self, session: Session, item: WishlistItem) -> WishlistItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete_pair(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> None:
        session.exec(
            delete(WishlistItem).where(
                WishlistItem.user_id == user_id,
                WishlistItem.product_id == product_id,
            )
        )
        session.commit()
