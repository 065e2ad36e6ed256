# storefront/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import AuthUser, require_auth
from storefront.database import get_session
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartSummary, CartItemCreate, CartItemUpdate
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


@router.get("", response_model=CartSummary)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Get current user's cart summary, including the checkout quote.
    """
    return service.get_cart_summary(session, current_user.id)


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Add product to the current user's cart.

    Adding a product already in the cart increases its quantity.
    Returns the updated cart summary.
    """
    return service.add_to_cart(
        session, current_user.id, payload.product_id, payload.quantity
    )


@router.patch("/{item_id}", response_model=CartSummary)
def update_cart_item(
    item_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Update quantity of a cart line.

    quantity <= 0 removes the line. Send `expected_quantity` to make the
    update conditional (409 if the line changed meanwhile).
    """
    return service.update_quantity(
        session=session,
        user_id=current_user.id,
        item_id=item_id,
        quantity=payload.quantity,
        expected_quantity=payload.expected_quantity,
    )


@router.delete("/{item_id}", response_model=CartSummary)
def remove_cart_item(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Remove a line from the cart.

    Returns the updated cart summary.
    """
    return service.remove_item(session, current_user.id, item_id)


@router.delete("", response_model=CartSummary)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Clear the entire cart.

    Returns an empty cart summary.
    """
    return service.clear_cart(session, current_user.id)
