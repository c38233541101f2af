"""Tests for the cart store."""

from decimal import Decimal

import pytest

from conftest import USER_ID, OTHER_USER_ID, cart_snapshot
from storefront.domain.errors import (
    NotFoundError,
    OutOfStockError,
    InsufficientStockError,
    CartConflictError,
)
from storefront.repos.cart_repo import CartRepo
from storefront.services.cart_service import CartService


class TestAddItem:
    def test_creates_line(self, db, make_product):
        product = make_product(stock=5)

        line = CartService(db).add_item(USER_ID, product.id, 2)

        assert line.id is not None
        assert line.quantity == 2
        assert cart_snapshot(db, USER_ID) == {product.id: 2}

    def test_default_quantity_is_one(self, db, make_product):
        product = make_product(stock=5)
        assert CartService(db).add_item(USER_ID, product.id).quantity == 1

    def test_second_add_increments_same_line(self, db, make_product):
        product = make_product(stock=5)
        svc = CartService(db)

        first = svc.add_item(USER_ID, product.id, 2)
        second = svc.add_item(USER_ID, product.id, 3)

        assert first.id == second.id
        assert second.quantity == 5
        assert cart_snapshot(db, USER_ID) == {product.id: 5}

    def test_out_of_stock(self, db, make_product):
        product = make_product(name="Kettle", stock=0)

        with pytest.raises(OutOfStockError) as exc:
            CartService(db).add_item(USER_ID, product.id)

        assert '"Kettle" is out of stock' == exc.value.message
        assert cart_snapshot(db, USER_ID) == {}

    def test_more_than_stock_on_new_line(self, db, make_product):
        product = make_product(stock=3)

        with pytest.raises(InsufficientStockError) as exc:
            CartService(db).add_item(USER_ID, product.id, 4)

        assert exc.value.available == 3
        assert "Only 3 more available" in exc.value.message

    def test_insufficient_stock_reports_remaining_units(self, db, make_product):
        product = make_product(stock=5)
        svc = CartService(db)
        svc.add_item(USER_ID, product.id, 4)

        with pytest.raises(InsufficientStockError) as exc:
            svc.add_item(USER_ID, product.id, 2)

        assert exc.value.available == 1
        assert "Only 1 more available" in exc.value.message
        # the existing line is untouched
        cart = svc.get_cart(USER_ID)
        assert cart["items"][0]["quantity"] == 4

    def test_missing_product(self, db):
        with pytest.raises(NotFoundError):
            CartService(db).add_item(USER_ID, 404, 1)

    def test_rejects_zero_quantity(self, db, make_product):
        product = make_product()
        with pytest.raises(ValueError):
            CartService(db).add_item(USER_ID, product.id, 0)

    def test_carts_are_per_user(self, db, make_product):
        product = make_product(stock=5)
        svc = CartService(db)

        svc.add_item(USER_ID, product.id, 2)
        svc.add_item(OTHER_USER_ID, product.id, 3)

        assert cart_snapshot(db, USER_ID) == {product.id: 2}
        assert cart_snapshot(db, OTHER_USER_ID) == {product.id: 3}


class TestAddItemConflicts:
    def test_retries_after_lost_optimistic_update(self, db, make_product, monkeypatch):
        product = make_product(stock=10)
        svc = CartService(db)
        svc.add_item(USER_ID, product.id, 1)

        original = CartRepo.increment_quantity
        calls = []

        def lose_first(self, line_id, seen_quantity, delta):
            calls.append(seen_quantity)
            if len(calls) == 1:
                return 0
            return original(self, line_id, seen_quantity, delta)

        monkeypatch.setattr(CartRepo, "increment_quantity", lose_first)

        line = svc.add_item(USER_ID, product.id, 2)

        assert len(calls) == 2
        assert line.quantity == 3
        assert cart_snapshot(db, USER_ID) == {product.id: 3}

    def test_retries_after_concurrent_insert(self, db, make_product, monkeypatch):
        product = make_product(stock=10)
        svc = CartService(db)
        svc.add_item(USER_ID, product.id, 1)

        original = CartRepo.get_cart_item_for_product
        calls = []

        def stale_first(self, user_id, product_id):
            # the first read misses the line another request just created
            calls.append(product_id)
            if len(calls) == 1:
                return None
            return original(self, user_id, product_id)

        monkeypatch.setattr(CartRepo, "get_cart_item_for_product", stale_first)

        line = svc.add_item(USER_ID, product.id, 2)

        assert line.quantity == 3
        assert cart_snapshot(db, USER_ID) == {product.id: 3}

    def test_gives_up_after_bounded_attempts(self, db, make_product, monkeypatch):
        product = make_product(stock=10)
        svc = CartService(db)
        svc.add_item(USER_ID, product.id, 1)

        monkeypatch.setattr(CartRepo, "increment_quantity", lambda self, *args: 0)

        with pytest.raises(CartConflictError):
            svc.add_item(USER_ID, product.id, 1)

        assert cart_snapshot(db, USER_ID) == {product.id: 1}


class TestGetCart:
    def test_empty_cart(self, db):
        cart = CartService(db).get_cart(USER_ID)

        assert cart == {"items": [], "item_count": 0, "subtotal": "0.00", "total": "0.00"}

    def test_totals(self, db, make_product):
        a = make_product(name="A", price="100.00", stock=5)
        b = make_product(name="B", price="19.99", stock=5, category="Books")
        svc = CartService(db)
        svc.add_item(USER_ID, a.id, 2)
        svc.add_item(USER_ID, b.id, 3)

        cart = svc.get_cart(USER_ID)

        totals = {line["product"]["name"]: line["item_total"] for line in cart["items"]}
        assert totals == {"A": Decimal("200.00"), "B": Decimal("59.97")}
        assert cart["item_count"] == 2
        assert cart["subtotal"] == "259.97"
        assert cart["total"] == cart["subtotal"]

    def test_item_count_counts_lines_not_units(self, db, make_product):
        product = make_product(stock=10)
        svc = CartService(db)
        svc.add_item(USER_ID, product.id, 7)

        assert svc.get_cart(USER_ID)["item_count"] == 1

    def test_newest_line_first(self, db, make_product):
        a = make_product(name="A")
        b = make_product(name="B")
        svc = CartService(db)
        svc.add_item(USER_ID, a.id)
        svc.add_item(USER_ID, b.id)

        names = [line["product"]["name"] for line in svc.get_cart(USER_ID)["items"]]
        assert names == ["B", "A"]

    def test_product_details(self, db, make_product):
        product = make_product(name="Lamp", price="12.50", stock=4, image_url="http://img/lamp.jpg", category="Home")
        svc = CartService(db)
        svc.add_item(USER_ID, product.id, 1)

        line = svc.get_cart(USER_ID)["items"][0]

        assert line["product"] == {
            "id": product.id,
            "name": "Lamp",
            "price": Decimal("12.50"),
            "image_url": "http://img/lamp.jpg",
            "category": "Home",
            "stock_quantity": 4,
            "is_in_stock": True,
        }
        assert line["stock_warning"] is None

    def test_stock_warnings(self, db, make_product):
        gone = make_product(name="Gone", stock=5)
        low = make_product(name="Low", stock=5)
        svc = CartService(db)
        svc.add_item(USER_ID, gone.id, 2)
        svc.add_item(USER_ID, low.id, 4)

        gone.stock_quantity = 0
        low.stock_quantity = 3
        db.commit()

        warnings = {line["product"]["name"]: line["stock_warning"] for line in svc.get_cart(USER_ID)["items"]}
        assert warnings == {"Gone": "Out of stock", "Low": "Only 3 available"}


class TestUpdateAndRemove:
    def test_update_quantity(self, db, make_product):
        product = make_product(stock=5)
        svc = CartService(db)
        line = svc.add_item(USER_ID, product.id, 1)

        updated = svc.update_quantity(USER_ID, line.id, 5)

        assert updated.quantity == 5

    def test_update_checks_absolute_quantity(self, db, make_product):
        product = make_product(name="Pen", stock=5)
        svc = CartService(db)
        line = svc.add_item(USER_ID, product.id, 4)

        with pytest.raises(InsufficientStockError) as exc:
            svc.update_quantity(USER_ID, line.id, 6)

        assert 'Only 5 items available for "Pen"' == exc.value.message
        assert cart_snapshot(db, USER_ID) == {product.id: 4}

    def test_update_other_users_line(self, db, make_product):
        product = make_product(stock=5)
        svc = CartService(db)
        line = svc.add_item(OTHER_USER_ID, product.id, 1)

        with pytest.raises(NotFoundError):
            svc.update_quantity(USER_ID, line.id, 2)

    def test_update_missing_line(self, db):
        with pytest.raises(NotFoundError):
            CartService(db).update_quantity(USER_ID, 77, 1)

    def test_remove_item(self, db, make_product):
        product = make_product()
        svc = CartService(db)
        line = svc.add_item(USER_ID, product.id)

        svc.remove_item(USER_ID, line.id)

        assert cart_snapshot(db, USER_ID) == {}

    def test_remove_other_users_line(self, db, make_product):
        product = make_product()
        svc = CartService(db)
        line = svc.add_item(OTHER_USER_ID, product.id)

        with pytest.raises(NotFoundError):
            svc.remove_item(USER_ID, line.id)

        assert cart_snapshot(db, OTHER_USER_ID) == {product.id: 1}

    def test_clear_cart(self, db, make_product):
        a = make_product(name="A")
        b = make_product(name="B")
        svc = CartService(db)
        svc.add_item(USER_ID, a.id)
        svc.add_item(USER_ID, b.id)
        svc.add_item(OTHER_USER_ID, a.id)

        svc.clear_cart(USER_ID)

        assert cart_snapshot(db, USER_ID) == {}
        assert cart_snapshot(db, OTHER_USER_ID) == {a.id: 1}

    def test_clear_empty_cart_is_noop(self, db):
        svc = CartService(db)
        svc.clear_cart(USER_ID)
        svc.clear_cart(USER_ID)


class TestValidateForCheckout:
    def test_valid_cart(self, db, make_product):
        product = make_product(stock=5)
        svc = CartService(db)
        svc.add_item(USER_ID, product.id, 5)

        assert svc.validate_for_checkout(USER_ID) == {"valid": True, "issues": []}

    def test_empty_cart_is_trivially_valid(self, db):
        assert CartService(db).validate_for_checkout(USER_ID) == {"valid": True, "issues": []}

    def test_reports_each_problem_line(self, db, make_product):
        gone = make_product(name="Gone", stock=5)
        low = make_product(name="Low", stock=5)
        fine = make_product(name="Fine", stock=5)
        svc = CartService(db)
        svc.add_item(USER_ID, gone.id, 1)
        svc.add_item(USER_ID, low.id, 4)
        svc.add_item(USER_ID, fine.id, 1)

        gone.stock_quantity = 0
        low.stock_quantity = 2
        db.commit()

        result = svc.validate_for_checkout(USER_ID)

        assert result["valid"] is False
        issues = {i["product_name"]: i["issue"] for i in result["issues"]}
        assert issues == {
            "Gone": "Out of stock",
            "Low": "Only 2 available (you have 4 in cart)",
        }
        # read only
        assert cart_snapshot(db, USER_ID) == {gone.id: 1, low.id: 4, fine.id: 1}


class TestDeletedProduct:
    def test_deleting_product_removes_its_cart_lines(self, db, make_product):
        gone = make_product(name="Gone", stock=5)
        kept = make_product(name="Kept", price="20.00", stock=5)
        cart = CartService(db)
        cart.add_item(USER_ID, gone.id, 2)
        cart.add_item(USER_ID, kept.id, 1)
        cart.add_item(OTHER_USER_ID, gone.id, 1)

        db.delete(gone)
        db.commit()

        assert cart_snapshot(db, USER_ID) == {kept.id: 1}
        assert cart_snapshot(db, OTHER_USER_ID) == {}

        current = cart.get_cart(USER_ID)
        assert current["item_count"] == 1
        assert current["subtotal"] == "20.00"
        assert cart.validate_for_checkout(USER_ID) == {"valid": True, "issues": []}
