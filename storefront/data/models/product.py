# storefront/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, CheckConstraint
from sqlalchemy.ext.hybrid import hybrid_property

from storefront.data.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class ProductModel(Base):
    """Catalog entry and its stock ledger row."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    seller_id = Column(Integer, nullable=False, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String, nullable=True)
    category = Column(String(100), nullable=True)

    stock_quantity = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
    )

    # derived on read, never stored
    @hybrid_property
    def is_in_stock(self):
        return self.stock_quantity > 0
