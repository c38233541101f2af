# storefront/services/address_service.py
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.domain.errors import NotFoundError, ForbiddenError
from storefront.domain.schemas import AddressCreate
from storefront.repos.address_repo import AddressRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AddressService:
    """
    Address book. A user has at most one default address: every path that
    sets is_default clears the other defaults in the same commit.
    """

    def __init__(self, db: Session):
        self.repo = AddressRepo(db)

    def get_address(self, address_id: int, user_id: int) -> AddressModel:
        address = self.repo.get_address(address_id)

        if not address:
            raise NotFoundError(f"Address with ID {address_id} not found")

        if address.user_id != user_id:
            raise ForbiddenError("You can only access your own addresses")

        return address

    def list_addresses(self, user_id: int) -> list[AddressModel]:
        return self.repo.list_for_user(user_id)

    def create_address(self, user_id: int, payload: AddressCreate) -> AddressModel:
        data = payload.model_dump()

        # first address is always the default
        if self.repo.count_for_user(user_id) == 0:
            data["is_default"] = True

        if data["is_default"]:
            self.repo.unset_defaults(user_id)

        address = self.repo.add_address(AddressModel(user_id=user_id, **data))
        self.repo.commit()

        logger.info(f"Address {address.id} created for user {user_id} (default={address.is_default})")
        return address

    def set_default(self, address_id: int, user_id: int) -> AddressModel:
        address = self.get_address(address_id, user_id)

        self.repo.unset_defaults(user_id)
        address.is_default = True
        self.repo.commit()

        return address

    def delete_address(self, address_id: int, user_id: int) -> None:
        address = self.get_address(address_id, user_id)
        was_default = address.is_default

        self.repo.delete_address(address)

        if was_default:
            remaining = self.repo.newest_for_user(user_id)
            if remaining:
                remaining.is_default = True

        self.repo.commit()
        logger.info(f"Address {address_id} deleted for user {user_id}")
