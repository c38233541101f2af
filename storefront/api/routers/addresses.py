# storefront/api/routers/addresses.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user_id
from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import AddressCreate, AddressOut
from storefront.services.address_service import AddressService

router = APIRouter(prefix="/addresses", tags=["addresses"])


@router.post("/", response_model=AddressOut, status_code=201)
def create_address(
    payload: AddressCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return AddressService(db).create_address(user_id, payload)


@router.get("/", response_model=List[AddressOut])
def list_addresses(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return AddressService(db).list_addresses(user_id)


@router.get("/{address_id}", response_model=AddressOut)
def get_address(
    address_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return AddressService(db).get_address(address_id, user_id)
    except StorefrontError as e:
        raise to_http(e)


@router.patch("/{address_id}/default", response_model=AddressOut)
def set_default(
    address_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return AddressService(db).set_default(address_id, user_id)
    except StorefrontError as e:
        raise to_http(e)


@router.delete("/{address_id}", status_code=204)
def delete_address(
    address_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        AddressService(db).delete_address(address_id, user_id)
    except StorefrontError as e:
        raise to_http(e)
