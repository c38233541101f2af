"""Pytest fixtures for storefront tests."""

import os

# must be set before storefront.utils.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_ALWAYS_EAGER"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

from decimal import Decimal

import pytest
from sqlalchemy import create_engine, select, func
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.data.database import Base, get_db
from storefront.data.models import (
    AddressModel,
    CartItemModel,
    OrderItemModel,
    OrderModel,
    ProductModel,
)

SELLER_ID = 100
USER_ID = 1
OTHER_USER_ID = 2


class RecordingNotifier:
    """Stands in for NotificationService and remembers what was sent."""

    def __init__(self):
        self.events = []

    def order_placed(self, order):
        self.events.append(("order_placed", order.order_number))

    def status_changed(self, order):
        self.events.append(("status_changed", order.order_number, order.status))

    def order_cancelled(self, order):
        self.events.append(("order_cancelled", order.order_number))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_product(db):
    """Create a product directly in the database."""

    def _make(name="Widget", price="10.00", stock=10, seller_id=SELLER_ID, image_url=None, category="Gadgets"):
        product = ProductModel(
            seller_id=seller_id,
            name=name,
            price=Decimal(price),
            stock_quantity=stock,
            image_url=image_url,
            category=category,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def make_address(db):
    def _make(user_id=USER_ID, full_name="Asha Rao", is_default=True, **overrides):
        data = {
            "full_name": full_name,
            "phone": "9876543210",
            "line1": "12 MG Road",
            "line2": "Flat 4B",
            "city": "Bengaluru",
            "state": "Karnataka",
            "postal_code": "560001",
        }
        data.update(overrides)
        address = AddressModel(user_id=user_id, is_default=is_default, **data)
        db.add(address)
        db.commit()
        return address

    return _make


def stock_of(db, product_id: int) -> int:
    """Current stock as stored, bypassing the identity map."""
    db.expire_all()
    return db.execute(
        select(ProductModel.stock_quantity).where(ProductModel.id == product_id)
    ).scalar_one()


def cart_snapshot(db, user_id: int) -> dict:
    db.expire_all()
    rows = db.execute(
        select(CartItemModel.product_id, CartItemModel.quantity).where(CartItemModel.user_id == user_id)
    ).all()
    return {product_id: quantity for product_id, quantity in rows}


def count_rows(db, model) -> int:
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def count_orders(db) -> int:
    return count_rows(db, OrderModel)


def count_order_items(db) -> int:
    return count_rows(db, OrderItemModel)


@pytest.fixture
def client(session_factory):
    """TestClient whose requests use the per-test in-memory database."""
    from fastapi.testclient import TestClient

    from storefront.main import create_app

    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client
