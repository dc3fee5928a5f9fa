from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from catalog.api import bulk_product_import, generate_bulk_data, products
from catalog.config import get_settings
from catalog.db import init_db
from catalog.logger import setup_logger

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logger(settings.log_level)
    logger.info("Application has started")
    init_db()
    yield
    logger.info("Application is shutting down")


def create_app() -> FastAPI:
    app = FastAPI(title="Product Catalog", lifespan=lifespan)

    @app.get("/")
    def root():
        return {"message": "Hello FastAPI"}

    app.include_router(products.router)
    app.include_router(generate_bulk_data.router)
    app.include_router(bulk_product_import.router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("catalog.main:app", host=settings.app_host, port=settings.app_port)
