# storefront/models/profile.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column
from sqlmodel import SQLModel, Field

from storefront.models.order import JSONType


class UserProfile(SQLModel, table=True):
    """
    Persistent user profile.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    Supabase Auth owns credentials; this row only holds contact details
    used to pre-fill checkout. Created lazily on first access.
    """

    __tablename__ = "user_profiles"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    full_name: str | None = None
    phone: str | None = None

    # street, city, state, postal_code, country
    address: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSONType, nullable=True),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
