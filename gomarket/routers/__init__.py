"""HTTP routers."""
from .cart import router as cart_router
from .deps import get_cart_store

__all__ = ["cart_router", "get_cart_store"]
