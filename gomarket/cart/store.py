"""In-memory cart store synchronized to Redis."""
import asyncio
from typing import Callable, List, Optional

from gomarket.errors import CartError, StorageUnavailableError
from gomarket.logging import get_logger, sanitize_id_for_logging
from .models import CartItem, CartItems, CartUpdate, CartUpdateStatus, Product
from .storage import CartStorage

logger = get_logger(__name__)

CartSubscriber = Callable[[CartItems], None]


class CartStore:
    """
    Owns the cart contents and is the only thing that changes them.

    Features:
    - One line item per product id; re-adding bumps the quantity
    - Items that reach quantity 0 are removed
    - Subscribers get the new state after every change
    - Every change is written to Redis in the background

    Persistence runs through a single writer task that always serializes
    the state current when the write starts, so a burst of mutations ends
    with the latest state stored.

    Usage:
        store = CartStore(CartStorage(get_redis()))
        await store.hydrate()
        store.add_to_cart(product)
        store.decrement(product.id)
        await store.flush()
    """

    def __init__(self, storage: CartStorage):
        self._storage = storage
        self._items: CartItems = ()
        self._subscribers: List[CartSubscriber] = []
        self._revision = 0
        self._hydrated = False
        self._dirty = False
        self._writer: Optional[asyncio.Task] = None

    # ==================== READ ====================

    @property
    def items(self) -> CartItems:
        """Current cart state (immutable)."""
        return self._items

    def list_items(self) -> CartItems:
        """Current cart state (immutable)."""
        return self.items

    @property
    def total_items(self) -> int:
        """Total number of units in cart."""
        return sum(item.quantity for item in self._items)

    def subscribe(self, callback: CartSubscriber) -> Callable[[], None]:
        """Register a state listener. Returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # ==================== MUTATIONS ====================

    def add_to_cart(self, product: Product) -> CartUpdate:
        """Add product, or bump its quantity if already in cart."""
        items = self._items
        index = self._index_of(product.id)

        if index is None:
            return self._commit(items + (CartItem.from_product(product),))

        # Title/price keep the values from the first add
        existing = items[index]
        return self._commit(self._replace_at(index, existing.with_quantity(existing.quantity + 1)))

    def increment(self, item_id: str) -> CartUpdate:
        """Increase quantity of an item by one."""
        index = self._index_of(item_id)
        if index is None:
            return self._missing("increment", item_id)

        item = self._items[index]
        return self._commit(self._replace_at(index, item.with_quantity(item.quantity + 1)))

    def decrement(self, item_id: str) -> CartUpdate:
        """Decrease quantity of an item by one, removing it at zero."""
        index = self._index_of(item_id)
        if index is None:
            return self._missing("decrement", item_id)

        items = self._items
        new_quantity = items[index].quantity - 1
        if new_quantity == 0:
            return self._commit(items[:index] + items[index + 1:])
        return self._commit(self._replace_at(index, items[index].with_quantity(new_quantity)))

    # ==================== PERSISTENCE ====================

    async def hydrate(self) -> None:
        """
        Seed the cart from the stored snapshot. Runs once per store.

        A storage failure leaves the cart empty. If the cart was changed
        while the snapshot was loading, the in-memory state is kept.
        """
        if self._hydrated:
            return
        self._hydrated = True
        revision = self._revision

        try:
            stored = await self._storage.load()
        except StorageUnavailableError as e:
            logger.warning(f"Starting with empty cart, stored cart unavailable: {e}")
            return

        if self._revision != revision:
            logger.warning("Cart changed while loading stored snapshot; keeping in-memory state")
            return

        if stored.items:
            self._items = stored.items
            self._revision += 1
            self._notify()
            logger.info(f"Cart hydrated with {len(stored.items)} item(s)")

        if stored.needs_rewrite:
            self._schedule_persist()

    async def flush(self) -> None:
        """Wait until every pending write has reached the store."""
        while True:
            writer = self._writer
            if writer is not None and not writer.done():
                await writer
                continue
            if self._dirty:
                self._writer = asyncio.get_running_loop().create_task(self._write_pending())
                continue
            return

    async def _write_pending(self) -> None:
        while self._dirty:
            self._dirty = False
            try:
                # Read at write time, never the state from when it was scheduled
                await self._storage.save(self._items)
            except CartError as e:
                # Not retried; the next mutation writes the full state again
                logger.warning(f"Failed to persist cart: {e}")
            except Exception as e:
                logger.warning(f"Unexpected error persisting cart: {e}", exc_info=True)

    def _schedule_persist(self) -> None:
        self._dirty = True
        if self._writer is not None and not self._writer.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, cart write deferred until flush()")
            return
        self._writer = loop.create_task(self._write_pending())

    # ==================== HELPERS ====================

    def _index_of(self, item_id: str) -> Optional[int]:
        return next(
            (index for index, item in enumerate(self._items) if item.id == item_id),
            None,
        )

    def _replace_at(self, index: int, item: CartItem) -> CartItems:
        items = self._items
        return items[:index] + (item,) + items[index + 1:]

    def _commit(self, items: CartItems) -> CartUpdate:
        self._items = items
        self._revision += 1
        self._notify()
        self._schedule_persist()
        return CartUpdate(status=CartUpdateStatus.OK, items=items)

    def _missing(self, operation: str, item_id: str) -> CartUpdate:
        logger.warning(f"Cart {operation} ignored: item {sanitize_id_for_logging(item_id)} not in cart")
        return CartUpdate(status=CartUpdateStatus.NOT_FOUND, items=self._items, item_id=item_id)

    def _notify(self) -> None:
        items = self._items
        for callback in list(self._subscribers):
            try:
                callback(items)
            except Exception as e:
                logger.warning(f"Cart subscriber failed: {e}", exc_info=True)


def create_cart_store(redis=None) -> CartStore:
    """
    Build a cart store backed by Redis.

    Call once at application start and pass the store to its consumers.
    """
    if redis is None:
        from gomarket.db import get_redis
        redis = get_redis()
    return CartStore(CartStorage(redis))
