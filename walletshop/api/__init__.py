# walletshop/api/__init__.py
from fastapi import FastAPI
from walletshop.api.routers import orders
from walletshop.api.routers.health import router as health_router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Wallet Shop Orders",
        version="1.0.0",
    )

    app.include_router(health_router)
    app.include_router(orders.router)
    return app
