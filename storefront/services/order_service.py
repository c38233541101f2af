# storefront/services/order_service.py
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.enums import (
    ALLOWED_TRANSITIONS,
    CANCELLABLE,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from storefront.domain.errors import (
    NotFoundError,
    ForbiddenError,
    InvalidTransitionError,
    CannotCancelError,
)
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService
from storefront.services.product_service import ProductService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Order lifecycle after checkout: lookups, status transitions and
    cancellation. Orders are never deleted; cancelled is a status.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.repo = OrderRepo(db)
        self.stock = ProductService(db)
        self.notification_service = notification_service or NotificationService()

    # queries
    def find_one(self, order_id: int, user_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError(f"Order with ID {order_id} not found")

        if order.user_id != user_id:
            raise ForbiddenError("You can only view your own orders")

        return order

    def find_by_order_number(self, order_number: str, user_id: int) -> OrderModel:
        order = self.repo.get_by_order_number(order_number)

        if not order:
            raise NotFoundError(f"Order {order_number} not found")

        if order.user_id != user_id:
            raise ForbiddenError("You can only view your own orders")

        return order

    def list_by_user(self, user_id: int) -> list[OrderModel]:
        return self.repo.list_by_user(user_id)

    # commands
    def update_status(self, order_id: int, new_status: OrderStatus | str) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError(f"Order with ID {order_id} not found")

        current = OrderStatus(order.status)
        requested = OrderStatus(new_status)

        if requested not in ALLOWED_TRANSITIONS[current]:
            raise InvalidTransitionError(current.value, requested.value)

        values = {}
        # cash collected on delivery is the payment
        if order.payment_method == PaymentMethod.COD.value and requested is OrderStatus.DELIVERED:
            values["payment_status"] = PaymentStatus.COMPLETED.value

        if not self.repo.transition_status(order.id, [current.value], requested.value, **values):
            self.repo.rollback()
            order = self.repo.refresh(order)
            raise InvalidTransitionError(order.status, requested.value)

        try:
            # cancelling through a status change gives the stock back too
            if requested is OrderStatus.CANCELLED:
                self._restore_stock(order)
            self.repo.commit()

        except Exception as e:
            self.repo.rollback()
            logger.error(f"Status change of order {order_id} rolled back: {e}")
            raise

        logger.info(f"Order {order.order_number} moved from {current.value} to {requested.value}")

        self.notification_service.status_changed(order)
        return order

    def cancel_order(self, user_id: int, order_id: int) -> OrderModel:
        order = self.find_one(order_id, user_id)

        if OrderStatus(order.status) not in CANCELLABLE:
            raise self._cannot_cancel(order)

        # claim the transition before touching stock; a concurrent cancel
        # or status change that got there first leaves nothing to update
        claimed = self.repo.transition_status(
            order.id,
            [status.value for status in CANCELLABLE],
            OrderStatus.CANCELLED.value,
        )
        if not claimed:
            self.repo.rollback()
            order = self.repo.refresh(order)
            raise self._cannot_cancel(order)

        try:
            self._restore_stock(order)
            self.repo.commit()

        except Exception as e:
            self.repo.rollback()
            logger.error(f"Cancelling order {order_id} rolled back: {e}")
            raise

        logger.info(f"Order {order.order_number} cancelled by user {user_id}")

        self.notification_service.order_cancelled(order)
        return order

    # helpers
    def _restore_stock(self, order: OrderModel):
        for item in order.items:
            if item.product_id is None:
                continue
            try:
                self.stock.increase_stock(item.product_id, item.quantity)
            except NotFoundError:
                logger.warning(
                    f"Product {item.product_id} of order {order.order_number} "
                    f"no longer exists, stock not restored"
                )

    @staticmethod
    def _cannot_cancel(order: OrderModel) -> CannotCancelError:
        return CannotCancelError(
            f"Cannot cancel order {order.order_number}. "
            f"Order is already {order.status}."
        )
