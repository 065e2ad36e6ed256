# storefront/routers/products.py
import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.database import get_session
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import ProductFilters, ProductRead
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["Catalog"])

settings = get_settings()
repo = ProductRepository()
service = CatalogService(repo)


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    category: uuid.UUID | None = None,
    min_price: Decimal | None = Query(default=None, ge=0),
    max_price: Decimal | None = Query(default=None, ge=0),
    search: str | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
):
    """
    List active products, newest first.

    Filters:
      - `category`: category id
      - `min_price` / `max_price`: inclusive price range
      - `search`: case-insensitive match on name or description
    """
    filters = ProductFilters(
        category=category,
        min_price=min_price,
        max_price=max_price,
        search=search,
    )
    return service.list_products(session, filters, skip=skip, limit=limit)


@router.get("/featured", response_model=list[ProductRead])
def list_featured_products(
    session: Session = Depends(get_session),
    limit: int | None = Query(default=None, ge=1, le=50),
):
    """
    Newest active products for the landing page.
    """
    return service.list_featured(session, limit or settings.FEATURED_PRODUCTS_LIMIT)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single active product by id.

    - Public endpoint.
    - 404 for unknown or inactive products.
    """
    return service.get_product(session, product_id)
