"""
Cart Domain Models

A cart is the per-user set of cart_items rows. Lines snapshot the product's
name, image and price at the moment they were added.
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from storefront.domain.pricing import (
    format_rupiah,
    free_shipping_remaining,
    shipping_cost,
)


class CartItem(BaseModel):
    """A line in a user's cart"""

    id: str = Field(..., description="Cart item id")
    user_id: str = Field(..., description="Owner")
    product_name: str = Field(..., description="Product name at add time")
    product_image: Optional[str] = Field(None, description="Product image at add time")
    price: Decimal = Field(..., description="Unit price at add time", ge=0)
    quantity: int = Field(..., description="Units", ge=1)
    size: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _uuid_to_str(cls, value):
        return str(value) if value is not None else value

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['line_total'] = float(self.line_total)
        data['price'] = float(self.price)
        data['price_formatted'] = format_rupiah(self.price)
        return data


class CartSummary(BaseModel):
    """Totals shown in the order summary box"""

    item_count: int = 0
    subtotal: Decimal = Decimal("0")
    shipping_cost: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    free_shipping_remaining: Decimal = Decimal("0")

    @classmethod
    def from_items(cls, items: List[CartItem]) -> "CartSummary":
        subtotal = sum((item.line_total for item in items), Decimal("0"))
        shipping = shipping_cost(subtotal)
        return cls(
            item_count=sum(item.quantity for item in items),
            subtotal=subtotal,
            shipping_cost=shipping,
            total=subtotal + shipping,
            free_shipping_remaining=free_shipping_remaining(subtotal),
        )

    @property
    def has_free_shipping(self) -> bool:
        return self.shipping_cost == 0

    def to_dict(self) -> dict:
        return {
            'item_count': self.item_count,
            'subtotal': float(self.subtotal),
            'shipping_cost': float(self.shipping_cost),
            'total': float(self.total),
            'free_shipping_remaining': float(self.free_shipping_remaining),
            'has_free_shipping': self.has_free_shipping,
            'subtotal_formatted': format_rupiah(self.subtotal),
            'shipping_cost_formatted': format_rupiah(self.shipping_cost),
            'total_formatted': format_rupiah(self.total),
            'free_shipping_remaining_formatted': format_rupiah(self.free_shipping_remaining),
        }


class CartItemAdd(BaseModel):
    """Request body for adding a product to the cart"""
    product_id: str
    quantity: int = Field(1, ge=1)
    size: Optional[str] = None
    color: Optional[str] = None


class CartItemQuantityChange(BaseModel):
    """Request body for the +/- buttons"""
    delta: int
