# storefront/services/cart_service.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import (
    NotFoundError,
    OutOfStockError,
    InsufficientStockError,
    CartConflictError,
)
from storefront.repos.cart_repo import CartRepo
from storefront.services.product_service import ProductService
from storefront.utils.logging import get_logger
from storefront.utils.retry import conflict_retry

logger = get_logger(__name__)

CENT = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def stock_warning(product: ProductModel, quantity: int) -> str | None:
    if not product.is_in_stock:
        return "Out of stock"
    if product.stock_quantity < quantity:
        return f"Only {product.stock_quantity} available"
    return None


class CartService:
    """
    Persistent per-user cart, one line per (user, product).

    commands (add, update, remove, clear) change state and commit
    queries (get, validate) only read
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductService(db)

    # queries
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        items = self.repo.get_cart_items(user_id)

        subtotal = Decimal("0.00")
        lines = []
        for item in items:
            product = item.product
            item_total = money(product.price * item.quantity)
            subtotal += item_total

            lines.append(
                {
                    "id": item.id,
                    "quantity": item.quantity,
                    "product": {
                        "id": product.id,
                        "name": product.name,
                        "price": product.price,
                        "image_url": product.image_url,
                        "category": product.category,
                        "stock_quantity": product.stock_quantity,
                        "is_in_stock": product.is_in_stock,
                    },
                    "item_total": item_total,
                    "stock_warning": stock_warning(product, item.quantity),
                }
            )

        # no tax or shipping, total is the subtotal
        return {
            "items": lines,
            "item_count": len(items),
            "subtotal": f"{subtotal:.2f}",
            "total": f"{subtotal:.2f}",
        }

    def get_cart_items_for_checkout(self, user_id: int) -> list[CartItemModel]:
        return self.repo.get_cart_items(user_id)

    def validate_for_checkout(self, user_id: int) -> Dict[str, Any]:
        issues = []
        for item in self.repo.get_cart_items(user_id):
            product = item.product
            if not product.is_in_stock:
                issues.append({"product_name": product.name, "issue": "Out of stock"})
            elif product.stock_quantity < item.quantity:
                issues.append(
                    {
                        "product_name": product.name,
                        "issue": (
                            f"Only {product.stock_quantity} available "
                            f"(you have {item.quantity} in cart)"
                        ),
                    }
                )

        return {"valid": not issues, "issues": issues}

    # commands
    @conflict_retry()
    def add_item(self, user_id: int, product_id: int, quantity: int = 1) -> CartItemModel:
        if quantity <= 0:
            raise ValueError("Quantity must be at least 1")

        product = self.products.get_product(product_id)

        if not product.is_in_stock:
            raise OutOfStockError(f'"{product.name}" is out of stock')

        existing = self.repo.get_cart_item_for_product(user_id, product_id)
        in_cart = existing.quantity if existing else 0

        if in_cart + quantity > product.stock_quantity:
            available = max(product.stock_quantity - in_cart, 0)
            raise InsufficientStockError(
                f'Cannot add {quantity} of "{product.name}". Only {available} more available.',
                available=available,
            )

        try:
            if existing:
                logger.info(
                    f"Product {product_id} already in cart of user {user_id}, "
                    f"raising quantity from {in_cart} to {in_cart + quantity}"
                )
                # UPDATE ... SET quantity = 3 WHERE id = 7 AND quantity = 1
                if self.repo.increment_quantity(existing.id, in_cart, quantity) == 0:
                    raise CartConflictError("Cart line was modified by another request")
                item = existing
            else:
                logger.info(f"Adding product {product_id} to cart of user {user_id}")
                item = self.repo.add_cart_item(
                    CartItemModel(user_id=user_id, product_id=product_id, quantity=quantity)
                )

            self.repo.commit()

        except IntegrityError as e:
            # a concurrent add created the (user, product) line first
            self.repo.rollback()
            logger.warning(f"Concurrent add of product {product_id} for user {user_id}, retrying")
            raise CartConflictError("Cart line was created by another request") from e
        except CartConflictError:
            self.repo.rollback()
            logger.warning(f"Lost optimistic update on cart line for product {product_id}, retrying")
            raise

        return self.repo.refresh(item)

    def update_quantity(self, user_id: int, line_id: int, quantity: int) -> CartItemModel:
        if quantity <= 0:
            raise ValueError("Quantity must be at least 1")

        item = self._find_cart_item(line_id, user_id)
        product = self.products.get_product(item.product_id)

        # absolute check, unlike add_item
        if quantity > product.stock_quantity:
            raise InsufficientStockError(
                f'Only {product.stock_quantity} items available for "{product.name}"',
                available=product.stock_quantity,
            )

        self.repo.set_quantity(item, quantity)
        self.repo.commit()

        logger.info(f"Cart line {line_id} of user {user_id} set to quantity {quantity}")
        return self.repo.refresh(item)

    def remove_item(self, user_id: int, line_id: int) -> None:
        item = self._find_cart_item(line_id, user_id)
        self.repo.delete_cart_item(item)
        self.repo.commit()

        logger.info(f"Cart line {line_id} removed for user {user_id}")

    def clear_cart(self, user_id: int) -> None:
        removed = self.repo.clear(user_id)
        self.repo.commit()

        logger.info(f"Cleared {removed} cart lines for user {user_id}")

    def _find_cart_item(self, line_id: int, user_id: int) -> CartItemModel:
        item = self.repo.get_cart_item(line_id)

        # a line of another user looks exactly like a missing one
        if not item or item.user_id != user_id:
            raise NotFoundError("Cart item not found")

        return item
