# storefront/repos/cart_repo.py
from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_items(self, user_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.user_id == user_id)
                .order_by(CartItemModel.created_at.desc(), CartItemModel.id.desc())
            ).scalars().unique()
        )

    def get_cart_item(self, line_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, line_id)

    def get_cart_item_for_product(self, user_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
        ).scalars().first()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        # flush so a duplicate (user, product) surfaces as IntegrityError here
        self.db.add(item)
        self.db.flush()
        return item

    def increment_quantity(self, line_id: int, seen_quantity: int, delta: int) -> int:
        # optimistic: only applies when nobody changed the line since we read it
        result = self.db.execute(
            update(CartItemModel)
            .where(
                CartItemModel.id == line_id,
                CartItemModel.quantity == seen_quantity,
            )
            .values(quantity=seen_quantity + delta)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def set_quantity(self, item: CartItemModel, quantity: int) -> CartItemModel:
        item.quantity = quantity
        self.db.flush()
        return item

    def delete_cart_item(self, item: CartItemModel):
        self.db.delete(item)
        self.db.flush()

    def clear(self, user_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def refresh(self, item: CartItemModel) -> CartItemModel:
        self.db.refresh(item)
        return item

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
