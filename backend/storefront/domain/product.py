"""
Product Domain Model

Represents a product in the DAZMerch catalog.
This is the single source of truth for product data structure.
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal

from storefront.domain.pricing import discount_percent, format_rupiah


class Product(BaseModel):
    """
    Product domain model - represents a row of the products table

    Fields:
        id: Product id (uuid)
        name: Product name (cart and order lines reference products by name)
        description: Product description (optional)
        price: Current selling price
        original_price: Price before discount (optional, shown struck through)
        image: Image URL (optional)
        category: Catalog category (cases, audio, cables, ...)
        stock: Units available
        is_active: Whether the storefront shows the product
        is_new: Whether the product carries the NEW badge
        rating: Average review rating (maintained from reviews)
        reviews_count: Number of reviews (maintained from reviews)
        created_at: When product was created
        updated_at: When product was last updated
    """

    id: str = Field(..., description="Product id")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., description="Selling price", ge=0)
    original_price: Optional[Decimal] = Field(None, description="Price before discount", ge=0)
    image: Optional[str] = Field(None, description="Image URL")
    category: str = Field(..., description="Product category")
    stock: int = Field(0, description="Units in stock", ge=0)
    is_active: bool = Field(True, description="Visible in the storefront")
    is_new: bool = Field(False, description="Shows the NEW badge")
    rating: Optional[Decimal] = Field(None, description="Average rating", ge=0, le=5)
    reviews_count: Optional[int] = Field(None, description="Number of reviews", ge=0)
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", mode="before")
    @classmethod
    def _uuid_to_str(cls, value):
        return str(value) if value is not None else value

    @property
    def discount_percent(self) -> int:
        return discount_percent(self.price, self.original_price)

    @property
    def is_in_stock(self) -> bool:
        return self.stock > 0

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Decimals become floats for JSON compatibility.
        """
        data = self.model_dump()

        data['discount_percent'] = self.discount_percent
        data['is_in_stock'] = self.is_in_stock
        data['price_formatted'] = format_rupiah(self.price)
        data['original_price_formatted'] = (
            format_rupiah(self.original_price) if self.original_price else None
        )

        for field in ['price', 'original_price', 'rating']:
            if data.get(field) is not None:
                data[field] = float(data[field])

        return data


def _strip_required_text(value: Optional[str]) -> str:
    """name and category: trimmed and never blank"""
    if value is None:
        raise ValueError("must not be null")
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def _blank_text_to_none(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        return None
    return value


class ProductCreate(BaseModel):
    """Schema for creating a new product (admin)"""
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    image: Optional[str] = None
    category: str = Field(..., min_length=1)
    stock: int = Field(0, ge=0)
    is_active: bool = True
    is_new: bool = False

    @field_validator("name", "category")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        return _strip_required_text(value)

    @field_validator("description", "image")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return _blank_text_to_none(value)


class ProductUpdate(BaseModel):
    """
    Schema for updating an existing product (admin, partial)

    Only description, original_price and image can be cleared with null.
    """
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    image: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    is_new: Optional[bool] = None

    @field_validator("name", "category")
    @classmethod
    def _strip_required(cls, value: Optional[str]) -> str:
        return _strip_required_text(value)

    @field_validator("price", "stock", "is_active", "is_new")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

    @field_validator("description", "image")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return _blank_text_to_none(value)


class CategoryCount(BaseModel):
    """Category with the number of active products in it"""
    category: str
    count: int
