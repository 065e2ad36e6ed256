# storefront/services/wishlist_service.py
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.errors import ConflictError, NotFoundError
from storefront.models.wishlist import WishlistItem
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.product import ProductSummary
from storefront.schemas.wishlist import WishlistItemRead, WishlistStatus


class WishlistService:
    """
    Presence/toggle semantics over (user, product).

    - add on an existing pair returns the stored entry.
    - add that loses an insert race to the unique constraint => 409.
    - remove on a missing pair is a no-op.
    """

    def __init__(self, wishlist_repo: WishlistRepository, product_repo: ProductRepository):
        self.wishlist_repo = wishlist_repo
        self.product_repo = product_repo

    def list_items(self, session: Session, user_id: uuid.UUID) -> list[WishlistItemRead]:
        rows = self.wishlist_repo.list_with_products(session, user_id)
        return [
            WishlistItemRead(
                id=item.id,
                user_id=item.user_id,
                product_id=item.product_id,
                product=(
                    ProductSummary.model_validate(product, from_attributes=True)
                    if product
                    else None
                ),
                created_at=item.created_at,
            )
            for item, product in rows
        ]

    def contains(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> bool:
        return self.wishlist_repo.get_item(session, user_id, product_id) is not None

    def add(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> WishlistItem:
        existing = self.wishlist_repo.get_item(session, user_id, product_id)
        if existing:
            return existing

        if not self.product_repo.get_active(session, product_id):
            raise NotFoundError("Product not found")

        try:
            return self.wishlist_repo.create(
                session, WishlistItem(user_id=user_id, product_id=product_id)
            )
        except IntegrityError:
            session.rollback()
            raise ConflictError("Product is already in the wishlist")

    def remove(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> None:
        self.wishlist_repo.delete_pair(session, user_id, product_id)

    def toggle(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> WishlistStatus:
        """Add when absent, remove when present. Returns the new state."""
        if self.contains(session, user_id, product_id):
            self.remove(session, user_id, product_id)
            return WishlistStatus(product_id=product_id, in_wishlist=False)
        self.add(session, user_id, product_id)
        return WishlistStatus(product_id=product_id, in_wishlist=True)
