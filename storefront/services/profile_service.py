# storefront/services/profile_service.py
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.models.profile import UserProfile
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.profile import ProfileUpdate


class ProfileService:
    """
    Business logic for user_profiles.

    Responsibilities:
      - lazily create the profile row on first access
      - apply partial updates and bump updated_at
    """

    def __init__(self, repo: ProfileRepository):
        self.repo = repo

    def get_or_create(self, session: Session, user_id: uuid.UUID) -> UserProfile:
        """
        Return the caller's profile, creating an empty one if absent.
        """
        profile = self.repo.get_by_id(session, user_id)
        if profile is not None:
            return profile

        try:
            return self.repo.create(session, UserProfile(id=user_id))
        except IntegrityError:
            # A concurrent request created it first.
            session.rollback()
            return self.repo.get_by_id(session, user_id)

    def update(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: ProfileUpdate,
    ) -> UserProfile:
        """
        Partial update; omitted fields are left unchanged.
        """
        profile = self.get_or_create(session, user_id)

        if payload.full_name is not None:
            profile.full_name = payload.full_name

        if payload.phone is not None:
            profile.phone = payload.phone

        if payload.address is not None:
            profile.address = payload.address.model_dump()

        profile.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, profile)
