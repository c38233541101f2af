# storefront/repos/product_repo.py
from sqlalchemy import update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    """
    Data access for the stock ledger.
    Stock changes are single conditional UPDATEs, so reading the stock and
    changing it cannot interleave with another writer. Nothing here commits.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def refresh(self, product: ProductModel) -> ProductModel:
        self.db.refresh(product)
        return product

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def decrease_stock(self, product_id: int, quantity: int) -> int:
        # UPDATE products SET stock_quantity = stock_quantity - 2
        # WHERE id = 1 AND stock_quantity >= 2
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.stock_quantity >= quantity,
            )
            .values(stock_quantity=ProductModel.stock_quantity - quantity)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def increase_stock(self, product_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock_quantity=ProductModel.stock_quantity + quantity)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def set_stock(self, product_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock_quantity=quantity)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
