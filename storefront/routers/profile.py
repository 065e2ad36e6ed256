# storefront/routers/profile.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import AuthUser, require_auth
from storefront.database import get_session
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.profile import ProfileRead, ProfileUpdate
from storefront.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["Profile"])

repo = ProfileRepository()
service = ProfileService(repo)


@router.get("", response_model=ProfileRead)
def read_profile(
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Return the authenticated user's profile.

    The row is created on first access.
    """
    return service.get_or_create(session, current_user.id)


@router.patch("", response_model=ProfileRead)
def update_profile(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Update the authenticated user's profile (partial update).

    Editable: full_name, phone, address.
    """
    return service.update(session, current_user.id, payload)
