# storefront/data/seed.py
"""
Sample catalog for local development.

    python -m storefront.data.seed

Only seeds an empty catalog; re-running is a no-op.
"""
import logging
from decimal import Decimal

from sqlmodel import Session, select

from storefront.database import create_db_and_tables, engine
from storefront.models.product import Category, Product

logger = logging.getLogger(__name__)

CATEGORIES = [
    ("Electronics", "Latest electronic devices and gadgets", "https://images.pexels.com/photos/356056/pexels-photo-356056.jpeg"),
    ("Clothing", "Fashion and apparel for all occasions", "https://images.pexels.com/photos/996329/pexels-photo-996329.jpeg"),
    ("Home & Garden", "Everything for your home and garden", "https://images.pexels.com/photos/1571460/pexels-photo-1571460.jpeg"),
    ("Sports", "Sports equipment and accessories", "https://images.pexels.com/photos/863988/pexels-photo-863988.jpeg"),
    ("Books", "Books and educational materials", "https://images.pexels.com/photos/159866/books-book-pages-read-literature-159866.jpeg"),
    ("Beauty", "Beauty and personal care products", "https://images.pexels.com/photos/2536965/pexels-photo-2536965.jpeg"),
]

# name, description, price, category, image, stock
PRODUCTS = [
    ("Wireless Bluetooth Headphones", "High-quality wireless headphones with noise cancellation", "199.99", "Electronics", "https://images.pexels.com/photos/3394650/pexels-photo-3394650.jpeg", 50),
    ("Smart Watch Series X", "Advanced smartwatch with health monitoring features", "299.99", "Electronics", "https://images.pexels.com/photos/437037/pexels-photo-437037.jpeg", 30),
    ("Casual Cotton T-Shirt", "Comfortable 100% cotton t-shirt in various colors", "24.99", "Clothing", "https://images.pexels.com/photos/8532616/pexels-photo-8532616.jpeg", 100),
    ("Premium Denim Jeans", "High-quality denim jeans with perfect fit", "79.99", "Clothing", "https://images.pexels.com/photos/1598507/pexels-photo-1598507.jpeg", 75),
    ("Modern Table Lamp", "Elegant table lamp with adjustable brightness", "89.99", "Home & Garden", "https://images.pexels.com/photos/2343467/pexels-photo-2343467.jpeg", 25),
    ("Yoga Mat Pro", "Professional yoga mat with superior grip", "49.99", "Sports", "https://images.pexels.com/photos/4056723/pexels-photo-4056723.jpeg", 40),
    ("Programming Fundamentals", "Essential guide to programming concepts", "39.99", "Books", "https://images.pexels.com/photos/2004161/pexels-photo-2004161.jpeg", 60),
    ("Skincare Essentials Set", "Complete skincare routine for healthy skin", "129.99", "Beauty", "https://images.pexels.com/photos/3735657/pexels-photo-3735657.jpeg", 35),
]


def seed(session: Session) -> bool:
    """
    Insert the sample catalog. Returns False if categories already exist.
    """
    # not forcing: only seed if empty
    if session.exec(select(Category)).first():
        return False

    by_name: dict[str, Category] = {}
    for name, description, image_url in CATEGORIES:
        category = Category(name=name, description=description, image_url=image_url)
        session.add(category)
        by_name[name] = category
    session.flush()

    for name, description, price, category, image_url, stock in PRODUCTS:
        session.add(
            Product(
                name=name,
                description=description,
                price=Decimal(price),
                category_id=by_name[category].id,
                image_url=image_url,
                stock_quantity=stock,
            )
        )
    session.commit()
    return True


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    create_db_and_tables()
    with Session(engine) as session:
        if seed(session):
            logger.info("Seeded %d categories, %d products", len(CATEGORIES), len(PRODUCTS))
        else:
            logger.info("Catalog already populated, nothing to do")


if __name__ == "__main__":
    main()
