"""
Order Domain Models

An order is the immutable record written at checkout from the cart contents.
Only its status changes afterwards (admin back-office).
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from storefront.domain.payment import payment_method_label
from storefront.domain.pricing import format_rupiah

ORDER_STATUSES = ("pending", "processing", "completed", "cancelled")

# Labels shown to customers
STATUS_LABELS = {
    "completed": "Selesai",
    "processing": "Diproses",
    "cancelled": "Dibatalkan",
    "pending": "Menunggu",
}


def status_label(status: str) -> str:
    """Unknown statuses read as pending"""
    return STATUS_LABELS.get(status, STATUS_LABELS["pending"])


class OrderItem(BaseModel):
    """
    Order Item domain model - a line of an order

    Fields:
        id: Order item id
        order_id: Parent order id
        product_name: Product name at checkout time
        product_image: Product image at checkout time
        price: Unit price at checkout time
        quantity: Units ordered
    """

    id: Optional[str] = Field(None, description="Order item id")
    order_id: str = Field(..., description="Parent order id")
    product_name: str = Field(..., description="Product name at order time")
    product_image: Optional[str] = Field(None, description="Product image at order time")
    price: Decimal = Field(..., description="Unit price", ge=0)
    quantity: int = Field(..., description="Quantity ordered", ge=1)

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", "order_id", mode="before")
    @classmethod
    def _uuid_to_str(cls, value):
        return str(value) if value is not None else value

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data['price'] = float(self.price)
        data['line_total'] = float(self.line_total)
        data['price_formatted'] = format_rupiah(self.price)
        data['line_total_formatted'] = format_rupiah(self.line_total)
        return data


class Order(BaseModel):
    """
    Order domain model - represents a customer order

    Fields:
        id: Order id (uuid)
        user_id: Customer who placed the order
        total_amount: Final total (subtotal + shipping)
        shipping_cost: Shipping charged
        payment_method: transfer or ewallet
        status: pending, processing, completed, cancelled
        created_at: When the order was placed

        # Related data (optional)
        customer_name: Customer full name (from profiles JOIN)
        item_count: Number of units (from order_items aggregate)
        items: Order lines
    """

    id: str = Field(..., description="Order id")
    user_id: str = Field(..., description="Customer user id")
    total_amount: Decimal = Field(..., description="Total order amount", ge=0)
    shipping_cost: Decimal = Field(Decimal('0'), description="Shipping cost", ge=0)
    payment_method: str = Field(..., description="Payment method id")
    status: str = Field("pending", description="Order status")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    customer_name: Optional[str] = Field(None, description="Customer name (from JOIN)")
    item_count: Optional[int] = Field(None, description="Units ordered (aggregate)")

    items: List[OrderItem] = Field(default_factory=list, description="Order items")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _uuid_to_str(cls, value):
        return str(value) if value is not None else value

    @property
    def subtotal(self) -> Decimal:
        return self.total_amount - self.shipping_cost

    @property
    def order_number(self) -> str:
        """Short reference shown to customers"""
        return self.id[:8].upper()

    @property
    def total_quantity(self) -> int:
        if self.items:
            return sum(item.quantity for item in self.items)
        return self.item_count or 0

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns dict with all fields plus computed properties
        """
        data = self.model_dump()

        data['order_number'] = self.order_number
        data['status_label'] = status_label(self.status)
        data['payment_method_label'] = payment_method_label(self.payment_method)
        data['total_quantity'] = self.total_quantity
        data['subtotal'] = float(self.subtotal)

        for field in ['total_amount', 'shipping_cost']:
            data[field] = float(data[field])

        data['total_amount_formatted'] = format_rupiah(self.total_amount)
        data['shipping_cost_formatted'] = format_rupiah(self.shipping_cost)
        data['subtotal_formatted'] = format_rupiah(self.subtotal)

        if data.get('created_at'):
            data['created_at'] = self.created_at.isoformat()

        data['items'] = [item.to_dict() for item in self.items]

        return data


class CheckoutRequest(BaseModel):
    """Request body for checkout"""
    payment_method: str = Field(..., description="transfer or ewallet")


class OrderStatusUpdate(BaseModel):
    """Request body for the admin status dropdown"""
    status: str

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: str) -> str:
        if value not in ORDER_STATUSES:
            raise ValueError(f"status must be one of {', '.join(ORDER_STATUSES)}")
        return value
