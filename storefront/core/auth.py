# storefront/core/auth.py
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel

from storefront.core.config import get_settings

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so public routes can still resolve an anonymous caller.
bearer_scheme = HTTPBearer(auto_error=False)


class AuthUser(BaseModel):
    """
    Identity resolved from a Supabase access token.

    `id` is auth.users.id and is the `user_id` stored on carts,
    wishlists, orders and the profile row.
    """

    id: uuid.UUID
    email: str | None = None


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthUser | None:
    """
    Resolve the caller from a Supabase JWT.

    Flow:
      1. No Authorization header => anonymous => None.
      2. Decode JWT => extract 'sub' and optional 'email'.
      3. Convert 'sub' to UUID.

    The profile row is not touched here; ProfileService creates it lazily.

    Raises:
        HTTPException(401): if token is malformed or 'sub' is missing.
    """
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")

    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )

    # Supabase provides sub as a string; enforce UUID
    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    return AuthUser(id=sub_uuid, email=payload.get("email"))


def require_auth(user: AuthUser | None = Depends(get_current_user)) -> AuthUser:
    """
    Enforce authentication.

    Cart, wishlist, order and profile routes depend on this; anonymous
    callers are rejected with 401.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user
