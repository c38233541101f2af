# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal, Base, engine
from storefront.data.models import ProductModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_SELLER_ID = 1

DEMO_PRODUCTS = [
    {"name": "Keyboard", "price": Decimal("199.99"), "stock_quantity": 25, "category": "Accessories"},
    {"name": "Mouse", "price": Decimal("49.50"), "stock_quantity": 40, "category": "Accessories"},
    {"name": "Monitor", "price": Decimal("899.00"), "stock_quantity": 5, "category": "Displays"},
]


def seed(session_factory=SessionLocal) -> int:
    """Insert the demo catalog into an empty products table. Returns rows added."""
    db = session_factory()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return 0
        for data in DEMO_PRODUCTS:
            db.add(ProductModel(seller_id=DEMO_SELLER_ID, **data))
        db.commit()
        logger.info(f"Seeded {len(DEMO_PRODUCTS)} demo products")
        return len(DEMO_PRODUCTS)
    finally:
        db.close()


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    seed()
