# storefront/services/catalog_service.py
import uuid

from sqlmodel import Session

from storefront.core.errors import NotFoundError, ValidationError
from storefront.models.product import Category, Product
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import CategorySummary, ProductFilters, ProductRead


class CatalogService:
    """
    Read-only catalog queries.

    Responsibilities:
      - category listing (alphabetical)
      - product listing with filters (newest first)
      - single product lookup
    Inactive products are never returned.
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def list_categories(self, session: Session) -> list[Category]:
        return self.repo.list_categories(session)

    def list_products(
        self,
        session: Session,
        filters: ProductFilters | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[ProductRead]:
        if (
            filters is not None
            and filters.min_price is not None
            and filters.max_price is not None
            and filters.min_price > filters.max_price
        ):
            raise ValidationError("min_price cannot be greater than max_price")
        products = self.repo.list_active(session, filters, skip=skip, limit=limit)
        return self._with_categories(session, products)

    def list_featured(self, session: Session, limit: int) -> list[ProductRead]:
        """Newest active products."""
        products = self.repo.list_active(session, limit=limit)
        return self._with_categories(session, products)

    def get_product(self, session: Session, product_id: uuid.UUID) -> ProductRead:
        product = self.repo.get_active(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return self._with_categories(session, [product])[0]

    # -------- Helpers --------

    def _with_categories(
        self,
        session: Session,
        products: list[Product],
    ) -> list[ProductRead]:
        categories = self.repo.get_categories(session, (p.category_id for p in products))

        result: list[ProductRead] = []
        for p in products:
            category = categories.get(p.category_id) if p.category_id else None
            result.append(
                ProductRead(
                    **p.model_dump(),
                    category=(
                        CategorySummary(id=category.id, name=category.name)
                        if category
                        else None
                    ),
                )
            )
        return result
