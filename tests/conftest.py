"""Pytest configuration: in-memory SQLite store, test tokens, sample catalog."""

import os
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# Settings are read at import time; point them at sqlite before importing the app.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from storefront.core.config import get_settings
from storefront.database import get_session
from storefront.main import app
from storefront.models.product import Category, Product


@pytest.fixture(name="engine")
def engine_fixture():
    """
    Fresh in-memory database per test.
    StaticPool keeps the single connection alive for the whole test.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session):
    """Override the app database dependency with the test session."""

    def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def make_token(user_id: uuid.UUID, email: str = "shopper@example.com", **claims) -> str:
    settings = get_settings()
    payload = {
        "sub": str(user_id),
        "email": email,
        "aud": "authenticated",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    payload.update(claims)
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm=settings.SUPABASE_JWT_ALG)


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def other_user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def auth_headers(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def other_auth_headers(other_user_id):
    return {"Authorization": f"Bearer {make_token(other_user_id, email='other@example.com')}"}


@pytest.fixture
def catalog(session):
    """
    Two categories and four products; "Retired Speaker" is inactive.
    created_at is spaced out so newest-first ordering is deterministic.
    """
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)
    electronics = Category(name="Electronics", description="Gadgets")
    clothing = Category(name="Clothing", description="Apparel")
    session.add(electronics)
    session.add(clothing)
    session.flush()

    products = {
        "headphones": Product(
            name="Wireless Bluetooth Headphones",
            description="High-quality wireless headphones with noise cancellation",
            price=Decimal("199.99"),
            category_id=electronics.id,
            stock_quantity=50,
            created_at=base,
        ),
        "tshirt": Product(
            name="Casual Cotton T-Shirt",
            description="Comfortable 100% cotton t-shirt",
            price=Decimal("24.99"),
            category_id=clothing.id,
            stock_quantity=100,
            created_at=base + timedelta(days=1),
        ),
        "watch": Product(
            name="Smart Watch Series X",
            description="Smartwatch with health monitoring",
            price=Decimal("299.99"),
            category_id=electronics.id,
            stock_quantity=3,
            created_at=base + timedelta(days=2),
        ),
        "retired": Product(
            name="Retired Speaker",
            description="No longer sold",
            price=Decimal("59.99"),
            category_id=electronics.id,
            stock_quantity=10,
            is_active=False,
            created_at=base + timedelta(days=3),
        ),
    }
    for product in products.values():
        session.add(product)
    session.commit()
    for product in products.values():
        session.refresh(product)

    return {"electronics": electronics, "clothing": clothing, **products}


@pytest.fixture
def shipping_address():
    return {
        "full_name": "Ada Lovelace",
        "phone": "+1 555 0100",
        "street": "12 Analytical Way",
        "city": "London",
        "state": "Greater London",
        "postal_code": "N1 9GU",
        "country": "UK",
    }
