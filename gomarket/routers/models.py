"""
Cart API Pydantic Models
"""
from decimal import Decimal
from typing import List

from pydantic import AliasChoices, BaseModel, Field

from gomarket.cart import CartItem, Product
from gomarket.money import to_float


class AddToCartRequest(BaseModel):
    id: str = Field(min_length=1)
    title: str
    image_url: str = Field(validation_alias=AliasChoices("image_url", "imageUrl"))
    price: Decimal = Field(ge=0)

    def to_product(self) -> Product:
        return Product(id=self.id, title=self.title, image_url=self.image_url, price=self.price)


class CartItemResponse(BaseModel):
    id: str
    title: str
    image_url: str
    price: float
    quantity: int

    @classmethod
    def from_item(cls, item: CartItem) -> "CartItemResponse":
        return cls(
            id=item.id,
            title=item.title,
            image_url=item.image_url,
            price=to_float(item.price),
            quantity=item.quantity,
        )


class CartResponse(BaseModel):
    items: List[CartItemResponse]
    total_items: int
