"""
Checkout Service
Turns a customer's cart into an order

Totals are always recomputed server-side from the stored cart lines.
"""
import logging
from typing import Optional

from storefront.domain.cart import CartSummary
from storefront.domain.order import Order
from storefront.domain.payment import PaymentMethod, get_payment_method, PAYMENT_METHODS
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)

# Payment is confirmed by the customer at checkout, so orders start completed
CHECKOUT_ORDER_STATUS = "completed"


class CheckoutError(ValueError):
    """Checkout cannot proceed (maps to 400)"""


class CheckoutResult:
    """Created order plus the instructions for the chosen payment method"""

    def __init__(self, order: Order, payment_method: PaymentMethod):
        self.order = order
        self.payment_method = payment_method

    def to_dict(self) -> dict:
        return {
            'order': self.order.to_dict(),
            'payment': self.payment_method.model_dump(),
        }


class CheckoutService:
    """
    Service for checkout

    Handles:
    - Payment method validation
    - Subtotal, shipping and total computation
    - Delegating the atomic order write to OrderRepository
    """

    def __init__(
        self,
        cart_repository: Optional[CartRepository] = None,
        order_repository: Optional[OrderRepository] = None
    ):
        self.cart_repository = cart_repository or CartRepository()
        self.order_repository = order_repository or OrderRepository()

    def checkout(self, user_id: str, payment_method: str) -> CheckoutResult:
        """
        Place an order for everything in the user's cart

        Raises:
            CheckoutError: unknown payment method or empty cart
        """
        method = get_payment_method(payment_method)
        if not method:
            raise CheckoutError(
                f"Unknown payment method '{payment_method}'. "
                f"Choose one of: {', '.join(PAYMENT_METHODS)}"
            )

        items = self.cart_repository.find_by_user(user_id)
        if not items:
            raise CheckoutError("Cart is empty")

        summary = CartSummary.from_items(items)

        order = self.order_repository.place_order(
            user_id=user_id,
            items=items,
            shipping_cost=summary.shipping_cost,
            total_amount=summary.total,
            payment_method=method.id,
            status=CHECKOUT_ORDER_STATUS,
        )

        logger.info(
            f"Order {order.order_number} placed by {user_id}: "
            f"{summary.item_count} units, total={summary.total}, payment={method.id}"
        )

        return CheckoutResult(order=order, payment_method=method)
