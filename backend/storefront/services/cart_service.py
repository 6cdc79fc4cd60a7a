"""
Cart Service
Rules for adding products and changing quantities in a customer's cart
"""
import logging
from typing import List, Optional, Tuple

from storefront.domain.cart import CartItem, CartItemAdd, CartSummary
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class CartError(ValueError):
    """The cart operation is not allowed (maps to 400)"""


class ProductNotFound(LookupError):
    pass


class CartItemNotFound(LookupError):
    pass


class CartService:
    """
    Service for cart operations

    Handles:
    - Merging repeated adds of the same product into one line
    - Stock checks against the live product row
    - Quantity changes (a line that reaches 0 is removed)
    """

    def __init__(
        self,
        cart_repository: Optional[CartRepository] = None,
        product_repository: Optional[ProductRepository] = None
    ):
        self.cart_repository = cart_repository or CartRepository()
        self.product_repository = product_repository or ProductRepository()

    def get_cart(self, user_id: str) -> Tuple[List[CartItem], CartSummary]:
        items = self.cart_repository.find_by_user(user_id)
        return items, CartSummary.from_items(items)

    def add_product(self, user_id: str, request: CartItemAdd) -> CartItem:
        """
        Put a product in the cart

        The line snapshots the product's current name, image and price.
        Adding a product that is already in the cart increments that line.

        Raises:
            ProductNotFound: product missing or inactive
            CartError: out of stock or quantity above stock
        """
        product = self.product_repository.find_by_id(request.product_id, active_only=True)
        if not product:
            raise ProductNotFound(f"Product {request.product_id} not found")

        if not product.is_in_stock:
            raise CartError(f"{product.name} is out of stock")

        if request.quantity > product.stock:
            raise CartError(f"Only {product.stock} units of {product.name} available")

        existing = self.cart_repository.find_by_product_name(user_id, product.name)
        if existing:
            new_quantity = existing.quantity + request.quantity
            item = self.cart_repository.set_quantity(user_id, existing.id, new_quantity)
            logger.info(f"Cart {user_id}: {product.name} quantity {existing.quantity} -> {new_quantity}")
            return item

        item = self.cart_repository.add(
            user_id=user_id,
            product_name=product.name,
            product_image=product.image,
            price=product.price,
            quantity=request.quantity,
            size=request.size,
            color=request.color,
        )
        logger.info(f"Cart {user_id}: added {product.name} x{request.quantity}")
        return item

    def change_quantity(self, user_id: str, item_id: str, delta: int) -> Optional[CartItem]:
        """
        Apply a +/- step to a line

        Returns:
            The updated line, or None when the line dropped to 0 and was removed
        """
        item = self.cart_repository.find_item(user_id, item_id)
        if not item:
            raise CartItemNotFound(f"Cart item {item_id} not found")

        new_quantity = max(0, item.quantity + delta)
        if new_quantity == 0:
            self.cart_repository.remove(user_id, item_id)
            return None

        return self.cart_repository.set_quantity(user_id, item_id, new_quantity)

    def remove_item(self, user_id: str, item_id: str) -> None:
        if not self.cart_repository.remove(user_id, item_id):
            raise CartItemNotFound(f"Cart item {item_id} not found")

    def count(self, user_id: str) -> int:
        return self.cart_repository.count_quantity(user_id)
