"""Pytest configuration and fixtures"""
import asyncio
import os
from decimal import Decimal
from typing import Optional

import pytest

# Set test environment variables
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")

from gomarket.cart import CartStorage, CartStore, Product  # noqa: E402


class FakeRedis:
    """In-memory stand-in for the async Upstash client."""

    def __init__(self):
        self.data = {}
        self.writes = []
        self.set_kwargs = []
        # Clear to block set() until released
        self.gate = asyncio.Event()
        self.gate.set()

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str, **kwargs):
        await self.gate.wait()
        self.data[key] = value
        self.writes.append(value)
        self.set_kwargs.append(kwargs)
        return True


@pytest.fixture
def fake_redis():
    """Empty in-memory Redis"""
    return FakeRedis()


@pytest.fixture
def storage(fake_redis):
    """Cart storage on the fake Redis, no expiry"""
    return CartStorage(fake_redis, ttl=None)


@pytest.fixture
def cart_store(storage):
    """Empty cart store"""
    return CartStore(storage)


@pytest.fixture
def sample_product():
    """Sample catalog product"""
    return Product(
        id="a",
        title="Shirt",
        image_url="https://cdn.example.com/shirt.png",
        price=Decimal("10"),
    )


@pytest.fixture
def other_product():
    """Second catalog product"""
    return Product(
        id="b",
        title="Mug",
        image_url="https://cdn.example.com/mug.png",
        price=Decimal("4.50"),
    )
