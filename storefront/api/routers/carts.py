# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user_id
from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    ItemIn,
    QuantityIn,
    CartLineOut,
    CartOut,
    CartValidationOut,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("/", response_model=CartOut)
def get_cart(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_service(db).get_cart(user_id)


@router.get("/validate", response_model=CartValidationOut)
def validate_cart(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_service(db).validate_for_checkout(user_id)


@router.post("/items", response_model=CartLineOut, status_code=201)
def add_item(
    payload: ItemIn,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_item(user_id, payload.product_id, payload.quantity)
    except (StorefrontError, ValueError) as e:
        raise to_http(e)


@router.patch("/items/{line_id}", response_model=CartLineOut)
def update_quantity(
    line_id: int,
    payload: QuantityIn,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_quantity(user_id, line_id, payload.quantity)
    except (StorefrontError, ValueError) as e:
        raise to_http(e)


@router.delete("/items/{line_id}", status_code=204)
def remove_item(
    line_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.remove_item(user_id, line_id)
    except StorefrontError as e:
        raise to_http(e)


@router.delete("/", status_code=204)
def clear_cart(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    get_service(db).clear_cart(user_id)
