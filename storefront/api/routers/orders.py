# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user_id
from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import OrderCreate, OrderOut, OrderStatusUpdate
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("/", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Checkout: turns the caller's cart into an order.
    Cart issues come back as 400 with the list of affected products.
    """
    svc = CheckoutService(db)
    try:
        return svc.create_order(
            user_id=user_id,
            address_id=payload.address_id,
            payment_method=payload.payment_method,
            notes=payload.notes,
        )
    except StorefrontError as e:
        raise to_http(e)


@router.get("/", response_model=List[OrderOut])
def list_orders(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_service(db).list_by_user(user_id)


@router.get("/by-number/{order_number}", response_model=OrderOut)
def get_order_by_number(
    order_number: str,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).find_by_order_number(order_number, user_id)
    except StorefrontError as e:
        raise to_http(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).find_one(order_id, user_id)
    except StorefrontError as e:
        raise to_http(e)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: OrderStatusUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Status changes come from sellers / back office; no ownership check."""
    try:
        return get_service(db).update_status(order_id, payload.status)
    except StorefrontError as e:
        raise to_http(e)


@router.patch("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).cancel_order(user_id, order_id)
    except StorefrontError as e:
        raise to_http(e)
