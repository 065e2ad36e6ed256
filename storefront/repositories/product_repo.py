# storefront/repositories/product_repo.py
import uuid
from collections.abc import Iterable

from sqlalchemy import func, or_, update
from sqlmodel import Session, select

from storefront.models.product import Category, Product
from storefront.schemas.product import ProductFilters


def _escape_like(term: str) -> str:
    # search is a plain substring; % and _ must not act as wildcards
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProductRepository:
    """
    Data access layer for Category & Product.

    - Pure DB operations (queries + stock updates).
    - No FastAPI, no business logic.
    - Shopper-facing reads always scope to is_active = true.
    """

    # ----- Categories -----

    def list_categories(self, session: Session) -> list[Category]:
        stmt = select(Category).order_by(Category.name)
        return list(session.exec(stmt).all())

    def get_categories(
        self,
        session: Session,
        category_ids: Iterable[uuid.UUID | None],
    ) -> dict[uuid.UUID, Category]:
        ids = {cid for cid in category_ids if cid is not None}
        if not ids:
            return {}
        stmt = select(Category).where(Category.id.in_(ids))
        return {c.id: c for c in session.exec(stmt).all()}

    # ----- Products -----

    def get_active(self, session: Session, product_id: uuid.UUID) -> Product | None:
        stmt = select(Product).where(
            Product.id == product_id,
            Product.is_active == True,  # noqa: E712
        )
        return session.exec(stmt).first()

    def get_many(
        self,
        session: Session,
        product_ids: Iterable[uuid.UUID],
    ) -> dict[uuid.UUID, Product]:
        ids = list(product_ids)
        if not ids:
            return {}
        stmt = select(Product).where(Product.id.in_(ids))
        return {p.id: p for p in session.exec(stmt).all()}

    def list_active(
        self,
        session: Session,
        filters: ProductFilters | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Product]:
        """
        Active products, newest first, narrowed by the given filters.
        """
        stmt = select(Product).where(Product.is_active == True)  # noqa: E712

        if filters is not None:
            if filters.category is not None:
                stmt = stmt.where(Product.category_id == filters.category)
            if filters.min_price is not None:
                stmt = stmt.where(Product.price >= filters.min_price)
            if filters.max_price is not None:
                stmt = stmt.where(Product.price <= filters.max_price)
            if filters.search:
                pattern = f"%{_escape_like(filters.search.lower())}%"
                stmt = stmt.where(
                    or_(
                        func.lower(Product.name).like(pattern, escape="\\"),
                        func.lower(Product.description).like(pattern, escape="\\"),
                    )
                )

        stmt = stmt.order_by(Product.created_at.desc()).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(session.exec(stmt).all())

    def decrement_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        quantity: int,
    ) -> bool:
        """
        Deduct stock inside the caller's transaction (no commit).

        The row only changes while stock_quantity >= quantity, so two
        checkouts racing for the last units cannot push stock below zero.
        Returns False when there was not enough stock left.
        """
        stmt = (
            update(Product)
            .where(
                Product.id == product_id,
                Product.stock_quantity >= quantity,
            )
            .values(stock_quantity=Product.stock_quantity - quantity)
        )
        result = session.exec(stmt)
        return result.rowcount == 1
