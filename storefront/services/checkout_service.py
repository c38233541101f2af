# storefront/services/checkout_service.py
from decimal import Decimal
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.enums import OrderStatus, PaymentMethod, PaymentStatus
from storefront.domain.errors import (
    CartInvalidError,
    CheckoutConflictError,
    EmptyCartError,
    PaymentMethodUnavailableError,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.address_service import AddressService
from storefront.services.cart_service import CartService, money
from storefront.services.notification_service import NotificationService
from storefront.services.product_service import ProductService
from storefront.utils.logging import get_logger
from storefront.utils.order_number import generate_order_number
from storefront.utils.settings import ORDER_NUMBER_ATTEMPTS

logger = get_logger(__name__)


class CheckoutService:
    """
    Turns a user's cart into an order.

    Everything that can be checked up front is checked before the first
    write. The writes (order, items, stock decrements, cart clear) share one
    transaction: a failure at any point rolls all of them back.
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        number_generator: Callable[[], str] = generate_order_number,
    ):
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.cart = CartService(db)
        self.stock = ProductService(db)
        self.addresses = AddressService(db)
        self.notification_service = notification_service or NotificationService()
        self.number_generator = number_generator

    def create_order(
        self,
        user_id: int,
        address_id: int,
        payment_method: PaymentMethod | str,
        notes: str | None = None,
    ) -> OrderModel:
        method = getattr(payment_method, "value", payment_method)
        if method != PaymentMethod.COD.value:
            raise PaymentMethodUnavailableError(method)

        validation = self.cart.validate_for_checkout(user_id)
        if not validation["valid"]:
            raise CartInvalidError(validation["issues"])

        # an empty cart passes stock validation trivially
        lines = self.cart.get_cart_items_for_checkout(user_id)
        if not lines:
            raise EmptyCartError("Your cart is empty")

        address = self.addresses.get_address(address_id, user_id)

        subtotals = [money(line.product.price * line.quantity) for line in lines]
        total = sum(subtotals, Decimal("0.00"))

        order_number = self._next_order_number()

        logger.info(
            f"Checkout of {len(lines)} lines for user {user_id}, "
            f"order {order_number}, total {total}"
        )

        try:
            order = self.repo.add_order(
                OrderModel(
                    order_number=order_number,
                    user_id=user_id,
                    status=OrderStatus.PENDING.value,
                    payment_method=method,
                    payment_status=PaymentStatus.PENDING.value,
                    total_amount=total,
                    shipping_name=address.full_name,
                    shipping_phone=address.phone,
                    shipping_line1=address.line1,
                    shipping_line2=address.line2,
                    shipping_city=address.city,
                    shipping_state=address.state,
                    shipping_postal_code=address.postal_code,
                    notes=notes,
                )
            )

            for line, subtotal in zip(lines, subtotals):
                product = line.product
                self.repo.add_order_item(
                    order,
                    OrderItemModel(
                        product_id=product.id,
                        quantity=line.quantity,
                        price_at_purchase=product.price,
                        subtotal=subtotal,
                        product_name=product.name,
                        product_image=product.image_url,
                    )
                )
                # stock may have moved since validation; the conditional
                # decrement raises InsufficientStockError in that case
                self.stock.decrease_stock(product.id, line.quantity)

            self.cart_repo.clear(user_id)
            self.repo.commit()

        except IntegrityError as e:
            # another checkout committed the same order number first
            self.repo.rollback()
            logger.warning(f"Checkout for user {user_id} rolled back on conflict: {e}")
            raise CheckoutConflictError("Your order could not be placed right now, please try again")

        except Exception as e:
            self.repo.rollback()
            logger.error(f"Checkout for user {user_id} rolled back: {e}")
            raise

        logger.info(f"Order {order.order_number} ({order.id}) placed by user {user_id}")

        self.notification_service.order_placed(order)
        return order

    def _next_order_number(self) -> str:
        for _ in range(ORDER_NUMBER_ATTEMPTS):
            candidate = self.number_generator()
            if not self.repo.order_number_exists(candidate):
                return candidate
            logger.warning(f"Order number {candidate} already taken, generating another")

        logger.error(f"No free order number after {ORDER_NUMBER_ATTEMPTS} attempts")
        raise CheckoutConflictError("Your order could not be placed right now, please try again")
