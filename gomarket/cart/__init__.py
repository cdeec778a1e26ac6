"""Cart package: models, storage, and the in-memory store."""
from .models import CartItem, CartUpdate, CartUpdateStatus, Product
from .storage import CartStorage, StoredCart, decode_snapshot, encode_snapshot
from .store import CartStore, create_cart_store

__all__ = [
    "CartItem",
    "CartUpdate",
    "CartUpdateStatus",
    "Product",
    "CartStorage",
    "StoredCart",
    "decode_snapshot",
    "encode_snapshot",
    "CartStore",
    "create_cart_store",
]
