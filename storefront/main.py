# storefront/main.py
import uvicorn
from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from storefront.api.routers import health, products, addresses, carts, orders
from storefront.data.database import Base, engine
from storefront.utils.logging import get_logger

# register every model in Base.metadata before create_all
import storefront.data.models  # noqa: F401

logger = get_logger(__name__)


def init_db() -> None:
    logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info("Database tables ready")


def create_app() -> FastAPI:
    init_db()

    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
    )

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(addresses.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
