# storefront/routers/wishlist.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import AuthUser, require_auth
from storefront.database import get_session
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.wishlist import WishlistItemRead, WishlistStatus
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

service = WishlistService(WishlistRepository(), ProductRepository())


@router.get("", response_model=list[WishlistItemRead])
def list_my_wishlist(
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Saved products, newest first.
    """
    return service.list_items(session, current_user.id)


@router.get("/{product_id}", response_model=WishlistStatus)
def is_in_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    return WishlistStatus(
        product_id=product_id,
        in_wishlist=service.contains(session, current_user.id, product_id),
    )


@router.post("/{product_id}", response_model=WishlistStatus)
def add_to_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Save a product. Saving it again is a no-op.
    """
    service.add(session, current_user.id, product_id)
    return WishlistStatus(product_id=product_id, in_wishlist=True)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Remove a saved product. Missing entries are ignored.
    """
    service.remove(session, current_user.id, product_id)


@router.post("/{product_id}/toggle", response_model=WishlistStatus)
def toggle_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    return service.toggle(session, current_user.id, product_id)
