# storefront/core/errors.py
"""
Domain errors raised by services.

Every error is an HTTPException subclass, so FastAPI renders it directly
and routers stay free of try/except blocks.

    ValidationError -> 400  bad input (quantity, stock, address)
    NotFoundError   -> 404  product / cart line / order absent or not owned
    EmptyCartError  -> 400  checkout with no lines
    ConflictError   -> 409  uniqueness violation, stale expected quantity
    StoreError      -> 503  database failure, tagged with the failing step
"""
from typing import Any

from fastapi import HTTPException, status


class StorefrontError(HTTPException):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request failed"

    def __init__(self, detail: Any = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail if detail is not None else self.default_detail,
        )


class ValidationError(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class NotFoundError(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class EmptyCartError(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Cart is empty"


class ConflictError(StorefrontError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflicting update"


class StoreError(StorefrontError):
    """
    Underlying data-store failure.

    `step` names the stage of a multi-step workflow that failed
    (e.g. "order", "order_items", "stock", "commit").
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Data store unavailable"

    def __init__(self, detail: Any = None, step: str | None = None):
        self.step = step
        if step is not None:
            detail = {"message": detail or self.default_detail, "step": step}
        super().__init__(detail)
