# storefront/services/product_service.py
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFoundError, ForbiddenError, InsufficientStockError
from storefront.domain.schemas import ProductCreate
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """
    Stock ledger consumed by the cart and checkout use cases.

    decrease_stock / increase_stock do not commit: the calling use case
    (checkout, cancellation) owns the transaction and commits or rolls back
    everything together. Seller-facing commands commit themselves.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    # query
    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError(f"Product with ID {product_id} not found")
        return product

    # stock ledger
    def decrease_stock(self, product_id: int, quantity: int) -> ProductModel:
        if quantity <= 0:
            raise ValueError("Quantity must be at least 1")

        if self.repo.decrease_stock(product_id, quantity) == 0:
            product = self.repo.get_product(product_id)
            if not product:
                raise NotFoundError(f"Product with ID {product_id} not found")
            self.repo.refresh(product)
            raise InsufficientStockError(
                f'Not enough stock for "{product.name}". Available: {product.stock_quantity}',
                available=product.stock_quantity,
            )

        logger.info(f"Stock of product {product_id} decreased by {quantity}")
        return self.repo.refresh(self.get_product(product_id))

    def increase_stock(self, product_id: int, quantity: int) -> ProductModel:
        if quantity <= 0:
            raise ValueError("Quantity must be at least 1")

        if self.repo.increase_stock(product_id, quantity) == 0:
            raise NotFoundError(f"Product with ID {product_id} not found")

        logger.info(f"Stock of product {product_id} increased by {quantity}")
        return self.repo.refresh(self.get_product(product_id))

    # seller commands
    def create_product(self, seller_id: int, payload: ProductCreate) -> ProductModel:
        product = self.repo.add_product(
            ProductModel(
                seller_id=seller_id,
                name=payload.name,
                description=payload.description,
                price=payload.price,
                stock_quantity=payload.stock_quantity,
                image_url=payload.image_url,
                category=payload.category,
            )
        )
        self.repo.commit()

        logger.info(f"Seller {seller_id} listed product {product.id} with stock {product.stock_quantity}")
        return product

    def update_stock(self, seller_id: int, product_id: int, quantity: int) -> ProductModel:
        if quantity < 0:
            raise ValueError("Stock quantity cannot be negative")

        product = self.get_product(product_id)
        if product.seller_id != seller_id:
            raise ForbiddenError("You can only update stock for your own products")

        self.repo.set_stock(product_id, quantity)
        self.repo.commit()

        logger.info(f"Seller {seller_id} set stock of product {product_id} to {quantity}")
        return self.repo.refresh(product)
