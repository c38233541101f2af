# storefront/repos/address_repo.py
from sqlalchemy import select, update, func
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel


class AddressRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_address(self, address_id: int) -> AddressModel | None:
        return self.db.get(AddressModel, address_id)

    def list_for_user(self, user_id: int) -> list[AddressModel]:
        return list(
            self.db.execute(
                select(AddressModel)
                .where(AddressModel.user_id == user_id)
                .order_by(
                    AddressModel.is_default.desc(),
                    AddressModel.created_at.desc(),
                    AddressModel.id.desc(),
                )
            ).scalars()
        )

    def count_for_user(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(AddressModel).where(AddressModel.user_id == user_id)
        ).scalar_one()

    def newest_for_user(self, user_id: int) -> AddressModel | None:
        return self.db.execute(
            select(AddressModel)
            .where(AddressModel.user_id == user_id)
            .order_by(AddressModel.created_at.desc(), AddressModel.id.desc())
        ).scalars().first()

    def unset_defaults(self, user_id: int):
        self.db.execute(
            update(AddressModel)
            .where(AddressModel.user_id == user_id, AddressModel.is_default.is_(True))
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )

    def add_address(self, address: AddressModel) -> AddressModel:
        self.db.add(address)
        self.db.flush()
        return address

    def delete_address(self, address: AddressModel):
        self.db.delete(address)
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
