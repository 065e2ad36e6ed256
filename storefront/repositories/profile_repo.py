# storefront/repositories/profile_repo.py
import uuid

from sqlmodel import Session

from storefront.models.profile import UserProfile


class ProfileRepository:
    """
    Data access layer for user_profiles.

    Responsibilities:
      - Pure DB operations
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> UserProfile | None:
        """Return a profile by primary key, or None if not found."""
        return session.get(UserProfile, user_id)

    def create(self, session: Session, profile: UserProfile) -> UserProfile:
        """Insert a new profile and return the persisted row."""
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile

    def update(self, session: Session, profile: UserProfile) -> UserProfile:
        """Persist changes to an existing profile."""
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile
