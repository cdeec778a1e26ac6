"""
Cart Router

Read and mutate the application's cart. Every mutation returns the full
cart so clients can re-render from a single response.
"""
from fastapi import APIRouter, Depends, HTTPException

from gomarket.cart import CartStore, CartUpdate
from gomarket.errors import ERROR_ITEM_NOT_FOUND
from gomarket.logging import get_logger, sanitize_id_for_logging
from .deps import get_cart_store
from .models import AddToCartRequest, CartItemResponse, CartResponse

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


def _cart_response(store: CartStore) -> CartResponse:
    return CartResponse(
        items=[CartItemResponse.from_item(item) for item in store.items],
        total_items=store.total_items,
    )


def _ensure_found(update: CartUpdate) -> None:
    if not update.ok:
        logger.info(f"Cart item {sanitize_id_for_logging(update.item_id)} not found")
        raise HTTPException(status_code=404, detail=ERROR_ITEM_NOT_FOUND)


@router.get("/cart", response_model=CartResponse)
async def get_cart(store: CartStore = Depends(get_cart_store)):
    """Get current cart contents."""
    return _cart_response(store)


@router.post("/cart/add", response_model=CartResponse)
async def add_to_cart(request: AddToCartRequest, store: CartStore = Depends(get_cart_store)):
    """Add product to cart (or bump its quantity)."""
    store.add_to_cart(request.to_product())
    return _cart_response(store)


@router.post("/cart/items/{item_id}/increment", response_model=CartResponse)
async def increment_item(item_id: str, store: CartStore = Depends(get_cart_store)):
    """Increase item quantity by one."""
    _ensure_found(store.increment(item_id))
    return _cart_response(store)


@router.post("/cart/items/{item_id}/decrement", response_model=CartResponse)
async def decrement_item(item_id: str, store: CartStore = Depends(get_cart_store)):
    """Decrease item quantity by one (removed at zero)."""
    _ensure_found(store.decrement(item_id))
    return _cart_response(store)
