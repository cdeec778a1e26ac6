"""Cart models: immutable line items and mutation results."""
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from gomarket.errors import ItemNotFoundError
from gomarket.money import parse_price


@dataclass(frozen=True)
class Product:
    """Catalog descriptor passed to add_to_cart."""
    id: str
    title: str
    image_url: str
    price: Decimal

    def __post_init__(self):
        if not self.id:
            raise ValueError("id must be a non-empty string")
        object.__setattr__(self, "price", parse_price(self.price))


@dataclass(frozen=True)
class CartItem:
    """Single product in the cart with its quantity."""
    id: str
    title: str
    image_url: str
    price: Decimal
    quantity: int = 1

    def __post_init__(self):
        if not self.id:
            raise ValueError("id must be a non-empty string")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError("quantity must be a positive integer")
        object.__setattr__(self, "price", parse_price(self.price))

    @classmethod
    def from_product(cls, product: Product) -> "CartItem":
        """Snapshot a catalog product as a new line item."""
        return cls(
            id=product.id,
            title=product.title,
            image_url=product.image_url,
            price=product.price,
            quantity=1,
        )

    def with_quantity(self, quantity: int) -> "CartItem":
        """Copy of this item with another quantity."""
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "image_url": self.image_url,
            "price": str(self.price),
            "quantity": self.quantity,
        }


CartItems = Tuple[CartItem, ...]


class CartUpdateStatus(str, Enum):
    """Outcome of a cart mutation."""
    OK = "ok"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class CartUpdate:
    """
    Result of add_to_cart / increment / decrement.

    items is the cart state after the call. For NOT_FOUND it is the
    unchanged state and item_id names the missing id.
    """
    status: CartUpdateStatus
    items: CartItems
    item_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is CartUpdateStatus.OK

    def raise_for_status(self) -> "CartUpdate":
        """Raise ItemNotFoundError when the mutation hit a missing id."""
        if self.status is CartUpdateStatus.NOT_FOUND:
            raise ItemNotFoundError(self.item_id or "")
        return self
