# storefront/schemas/profile.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class Address(SQLModel):
    """
    Postal address saved on the profile (pre-fills checkout).
    """

    model_config = ConfigDict(extra="forbid")

    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""


class ProfileRead(SQLModel):
    """Response schema returned to clients."""

    id: uuid.UUID
    full_name: str | None = None
    phone: str | None = None
    address: Address | None = None
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(SQLModel):
    """
    Partial profile update. Omitted fields are left unchanged.
    """

    model_config = ConfigDict(extra="forbid")

    full_name: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=50)
    address: Address | None = None

    @field_validator("full_name", "phone")
    @classmethod
    def normalize(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v
