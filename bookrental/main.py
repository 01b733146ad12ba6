# bookrental/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from bookrental.data.database import init_db
from bookrental.api.routers import auth, books, carts, checkout, payments, rentals, health
from bookrental.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Inicjalizacja tabel bazy danych")
    init_db()
    yield


def create_app(create_tables: bool = True) -> FastAPI:
    app = FastAPI(
        title="Book Rental Service",
        version="1.0.0",
        lifespan=lifespan if create_tables else None,
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(books.router)
    app.include_router(carts.router)
    app.include_router(checkout.router)
    app.include_router(payments.router)
    app.include_router(rentals.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
