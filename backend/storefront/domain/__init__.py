"""
Domain Layer - Business Entities

This layer contains Pydantic models representing storefront entities.
These models enforce type safety and validation across the application.
"""
from storefront.domain.product import Product
from storefront.domain.cart import CartItem, CartSummary
from storefront.domain.order import Order, OrderItem
from storefront.domain.review import Review
from storefront.domain.profile import Profile, UserRole

__all__ = ['Product', 'CartItem', 'CartSummary', 'Order', 'OrderItem', 'Review', 'Profile', 'UserRole']
