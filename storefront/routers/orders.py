# storefront/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import AuthUser, require_auth
from storefront.database import get_session
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order import OrderCreate, OrderRead
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
product_repo = ProductRepository()
service = OrderService(order_repo, cart_repo, product_repo)


@router.post(
    "/checkout",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Create an order from the current user's cart.

    Payment is not collected here; the order starts as 'pending'.
    """
    return service.create_order_from_cart(session, current_user.id, payload)


@router.get("", response_model=list[OrderRead])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
):
    """
    List the authenticated user's orders, newest first.
    """
    return service.list_user_orders(session, current_user.id, skip, limit)


@router.get("/{order_id}", response_model=OrderRead)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Get a single order (with items) belonging to the current user.
    """
    return service.get_user_order(session, current_user.id, order_id)
