"""
Cart Errors

Message constants and the exception hierarchy shared by the cart store,
its storage layer and the HTTP surface.
"""

# Cart errors
ERROR_ITEM_NOT_FOUND = "Item not in cart"
ERROR_STORAGE_UNAVAILABLE = "Cart storage unavailable"
ERROR_SNAPSHOT_UNREADABLE = "Stored cart snapshot is unreadable"
ERROR_SNAPSHOT_VERSION = "Unsupported cart snapshot version"
ERROR_SNAPSHOT_ENCODING = "Cart could not be serialized"

# Wiring errors
ERROR_CART_CONTEXT_MISSING = "Cart store is not configured for this application"


class CartError(Exception):
    """Base class for cart errors."""


class ItemNotFoundError(CartError):
    """A mutation referenced an id that is not in the cart."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"{ERROR_ITEM_NOT_FOUND}: {item_id}")


class StorageUnavailableError(CartError):
    """The durable key-value store could not be read or written."""


class DeserializationError(CartError):
    """A stored snapshot could not be decoded."""


class SnapshotEncodingError(CartError):
    """The in-memory cart could not be serialized."""


class UnsupportedSnapshotVersionError(DeserializationError):
    """A stored snapshot was written with a schema this version cannot read."""

    def __init__(self, version: int):
        self.version = version
        super().__init__(f"{ERROR_SNAPSHOT_VERSION}: {version}")


class CartContextMissingError(RuntimeError):
    """No cart store is attached to the application."""

    def __init__(self, message: str = ERROR_CART_CONTEXT_MISSING):
        super().__init__(message)
