"""
Shared Dependencies for Routers

The cart store is created once by the application lifespan and attached
to app.state; routers receive it through get_cart_store.
"""

from fastapi import Request

from gomarket.cart import CartStore
from gomarket.errors import CartContextMissingError


def get_cart_store(request: Request) -> CartStore:
    """Return the application's cart store, failing loudly if it is not wired."""
    store = getattr(request.app.state, "cart_store", None)
    if not isinstance(store, CartStore):
        raise CartContextMissingError()
    return store
