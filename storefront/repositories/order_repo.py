# storefront/repositories/order_repo.py
import uuid

from sqlmodel import Session, select

from storefront.models.order import Order, OrderItem
from storefront.models.product import Product


class OrderRepository:
    """
    Data access layer for orders and order_items.

    NOTE:
      - No commits here; order creation is a multi-step transaction.
        The service is responsible for calling session.commit().
    """

    # ---- Orders ----

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def get_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> Order | None:
        stmt = select(Order).where(Order.id == order_id, Order.user_id == user_id)
        return session.exec(stmt).first()

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()  # Assign PK
        session.refresh(order)
        return order

    # ---- Order items ----

    def list_items_with_products(
        self,
        session: Session,
        order_ids: list[uuid.UUID],
    ) -> list[tuple[OrderItem, Product | None]]:
        if not order_ids:
            return []
        stmt = (
            select(OrderItem, Product)
            .join(Product, Product.id == OrderItem.product_id, isouter=True)
            .where(OrderItem.order_id.in_(order_ids))
            .order_by(OrderItem.created_at)
        )
        return list(session.exec(stmt).all())

    def create_items(
        self,
        session: Session,
        items: list[OrderItem],
    ) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        for item in items:
            session.refresh(item)
        return items
