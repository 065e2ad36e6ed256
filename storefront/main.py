# storefront/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.config import get_settings
from storefront.core.errors import StoreError
from storefront.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from storefront.models import product as _product_models  # noqa: F401
from storefront.models import cart as _cart_models  # noqa: F401
from storefront.models import wishlist as _wishlist_models  # noqa: F401
from storefront.models import order as _order_models  # noqa: F401
from storefront.models import profile as _profile_models  # noqa: F401

# Routers
from storefront.routers.categories import router as categories_router
from storefront.routers.products import router as products_router
from storefront.routers.cart import router as cart_router
from storefront.routers.wishlist import router as wishlist_router
from storefront.routers.orders import router as orders_router
from storefront.routers.profile import router as profile_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    """
    Any database failure that escapes a service is reported as a StoreError.
    """
    logger.error(f"Store error on {request.method} {request.url.path}: {exc}")
    error = StoreError()
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


# Versioned API prefix, e.g. /api/v1
app.include_router(categories_router, prefix=settings.API_V1_STR)
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(wishlist_router, prefix=settings.API_V1_STR)
app.include_router(orders_router, prefix=settings.API_V1_STR)
app.include_router(profile_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "storefront-backend"}
