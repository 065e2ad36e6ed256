# storefront/routers/categories.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.database import get_session
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import CategoryRead
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/categories", tags=["Catalog"])

service = CatalogService(ProductRepository())


@router.get("", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    """
    List all categories, alphabetically.

    - Public endpoint.
    """
    return service.list_categories(session)
