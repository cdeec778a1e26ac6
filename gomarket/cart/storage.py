"""Cart snapshot storage in Redis."""
import json
from decimal import Decimal
from typing import Any, List, NamedTuple, Optional, Protocol, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from gomarket.db import RedisKeys, TTL
from gomarket.errors import (
    ERROR_SNAPSHOT_ENCODING,
    ERROR_SNAPSHOT_UNREADABLE,
    ERROR_STORAGE_UNAVAILABLE,
    DeserializationError,
    SnapshotEncodingError,
    StorageUnavailableError,
    UnsupportedSnapshotVersionError,
)
from gomarket.logging import get_logger, sanitize_id_for_logging
from .models import CartItem, CartItems

logger = get_logger(__name__)

SNAPSHOT_VERSION = 1
# Bare JSON array written by the first mobile release
LEGACY_SNAPSHOT_VERSION = 0


class KeyValueStore(Protocol):
    """Subset of the async Redis client the cart needs."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str, **kwargs: Any) -> Any: ...


# ============================================================
# Snapshot schema
# ============================================================

class StoredCartItem(BaseModel):
    """One line item as written to Redis."""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    title: str
    image_url: str = Field(validation_alias=AliasChoices("image_url", "imageUrl"))
    price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)

    @classmethod
    def from_item(cls, item: CartItem) -> "StoredCartItem":
        return cls(
            id=item.id,
            title=item.title,
            image_url=item.image_url,
            price=item.price,
            quantity=item.quantity,
        )

    def to_item(self) -> CartItem:
        return CartItem(
            id=self.id,
            title=self.title,
            image_url=self.image_url,
            price=self.price,
            quantity=self.quantity,
        )


class CartSnapshot(BaseModel):
    """Envelope of the stored cart. Items are validated one by one."""
    version: int
    items: List[Any] = Field(default_factory=list)


class StoredCart(NamedTuple):
    """Result of loading the snapshot."""
    items: CartItems
    # True when what is stored differs from items and should be rewritten
    needs_rewrite: bool = False


def encode_snapshot(items: Sequence[CartItem]) -> str:
    """Serialize cart items into the current snapshot format."""
    return json.dumps({
        "version": SNAPSHOT_VERSION,
        "items": [StoredCartItem.from_item(item).model_dump(mode="json") for item in items],
    })


def decode_snapshot(raw: Any) -> StoredCart:
    """
    Decode a raw snapshot value.

    Entries that fail the item schema or repeat an id already seen are
    dropped with a warning; the rest are kept in order.

    Raises:
        DeserializationError: payload is not JSON, has the wrong shape,
            or carries an unsupported version
    """
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, TypeError, UnicodeDecodeError) as e:
        raise DeserializationError(f"{ERROR_SNAPSHOT_UNREADABLE}: {e}") from e

    if isinstance(payload, list):
        version = LEGACY_SNAPSHOT_VERSION
        entries = payload
    elif isinstance(payload, dict):
        try:
            snapshot = CartSnapshot.model_validate(payload)
        except ValidationError as e:
            raise DeserializationError(f"{ERROR_SNAPSHOT_UNREADABLE}: {e}") from e
        if snapshot.version != SNAPSHOT_VERSION:
            raise UnsupportedSnapshotVersionError(snapshot.version)
        version = snapshot.version
        entries = snapshot.items
    else:
        raise DeserializationError(f"{ERROR_SNAPSHOT_UNREADABLE}: expected object or array")

    items: List[CartItem] = []
    seen = set()
    dropped = 0
    for position, entry in enumerate(entries):
        try:
            stored = StoredCartItem.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Dropping invalid cart entry #{position}: {e.error_count()} error(s)")
            dropped += 1
            continue
        if stored.id in seen:
            logger.warning(f"Dropping duplicate cart entry for item {sanitize_id_for_logging(stored.id)}")
            dropped += 1
            continue
        seen.add(stored.id)
        items.append(stored.to_item())

    return StoredCart(
        items=tuple(items),
        needs_rewrite=dropped > 0 or version != SNAPSHOT_VERSION,
    )


class CartStorage:
    """
    Mirrors the cart to a single Redis key.

    save() is the only write path: the whole snapshot is overwritten on
    every call, nothing is merged or deleted.
    """

    def __init__(
        self,
        redis: KeyValueStore,
        key: str = RedisKeys.CART_PRODUCTS,
        ttl: Optional[int] = TTL.CART,
    ):
        self._redis = redis
        self.key = key
        self.ttl = ttl

    async def load(self) -> StoredCart:
        """
        Read the stored snapshot.

        Returns an empty cart when the key is absent or the stored value
        cannot be decoded.

        Raises:
            StorageUnavailableError: If Redis cannot be read
        """
        try:
            raw = await self._redis.get(self.key)
        except Exception as e:
            logger.error(f"Failed to read cart from Redis: {e}")
            raise StorageUnavailableError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}") from e

        if raw is None:
            return StoredCart(items=())

        try:
            return decode_snapshot(raw)
        except UnsupportedSnapshotVersionError as e:
            # Written by a newer app version; left in place until the next save
            logger.warning(f"Ignoring stored cart: {e}")
            return StoredCart(items=())
        except DeserializationError as e:
            logger.warning(f"Discarding stored cart: {e}")
            return StoredCart(items=(), needs_rewrite=True)

    async def save(self, items: Sequence[CartItem]) -> None:
        """
        Overwrite the stored snapshot with items.

        Raises:
            SnapshotEncodingError: If an item does not fit the snapshot schema
            StorageUnavailableError: If Redis cannot be written
        """
        try:
            value = encode_snapshot(items)
        except (ValidationError, TypeError, ValueError, ArithmeticError) as e:
            logger.error(f"Failed to serialize cart: {e}")
            raise SnapshotEncodingError(f"{ERROR_SNAPSHOT_ENCODING}: {e}") from e

        try:
            if self.ttl:
                result = await self._redis.set(self.key, value, ex=self.ttl)
            else:
                result = await self._redis.set(self.key, value)
        except Exception as e:
            logger.error(f"Failed to save cart to Redis: {e}")
            raise StorageUnavailableError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}") from e

        if result is False:
            raise StorageUnavailableError(f"{ERROR_STORAGE_UNAVAILABLE}: write rejected")
