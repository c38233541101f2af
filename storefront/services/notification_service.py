# storefront/services/notification_service.py
from kombu.exceptions import OperationalError

from storefront.celery_worker import celery_app
from storefront.data.models.order import OrderModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_PLACED = "order_placed"
STATUS_CHANGED = "status_changed"
ORDER_CANCELLED = "order_cancelled"


class NotificationService:
    """
    Queues customer notifications about orders.
    Called only after the order change has been committed; a broker outage
    is logged and does not affect the committed order.
    """

    def order_placed(self, order: OrderModel):
        self._dispatch(order, ORDER_PLACED)

    def status_changed(self, order: OrderModel):
        self._dispatch(order, STATUS_CHANGED)

    def order_cancelled(self, order: OrderModel):
        self._dispatch(order, ORDER_CANCELLED)

    @staticmethod
    def _dispatch(order: OrderModel, event: str):
        try:
            send_order_notification_task.delay(
                order.user_id, order.order_number, event, order.status
            )
        except OperationalError as e:
            logger.error(f"Could not queue {event} notification for {order.order_number}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_number: str, event: str, status: str):
    """
    Celery task. A real deployment would hand this to an email/SMS/push
    provider; here it only logs.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: {event} for order {order_number} (status {status})")

    return {"user_id": user_id, "order_number": order_number, "event": event, "status": "sent"}
