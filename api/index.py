"""
GoMarketplace Cart API

FastAPI entry point. The lifespan builds the single cart store, restores
it from Redis, and drains pending writes on shutdown.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from gomarket.cart import CartStore, create_cart_store
from gomarket.logging import get_logger
from gomarket.routers import cart_router

logger = get_logger(__name__)


def create_app(cart_store: Optional[CartStore] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        cart_store: Store to serve; a Redis-backed one is created at startup
            when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler"""
        # Startup
        store = cart_store if cart_store is not None else create_cart_store()
        await store.hydrate()
        app.state.cart_store = store
        yield
        # Shutdown
        await store.flush()
        logger.info("Cart writes flushed")

    app = FastAPI(
        title="GoMarketplace Cart",
        description="Shopping cart state persisted to Redis",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(cart_router, prefix="/api")

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "ok", "service": "gomarket-cart"}

    return app


app = create_app()
