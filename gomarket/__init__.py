"""GoMarketplace cart: in-memory shopping cart persisted to Redis."""

__version__ = "1.0.0"
